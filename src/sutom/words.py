"""Dictionary loading."""

from __future__ import annotations

import re
from typing import List

MAX_NUMBER_OF_WORDS = 4096
SUTOM_MAX_NUMBER_OF_WORDS = 100000

# one file per word length, e.g. data/mots_5.txt
DEFAULT_WORDS_TEMPLATE = "data/mots_{size}.txt"


def default_word_source(word_size: int) -> str:
    return DEFAULT_WORDS_TEMPLATE.format(size=word_size)


# load_words_from_file loads up to max_words distinct K-letter words, one per line, in file order
def load_words_from_file(path: str, word_size: int, max_words: int = MAX_NUMBER_OF_WORDS) -> List[str]:
    word_re = re.compile(rf"[A-Z]{{{word_size}}}")
    seen = set()
    out: List[str] = []
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            if len(out) >= max_words:
                break
            w = line.strip().upper()
            if w in seen or not word_re.fullmatch(w):
                continue
            seen.add(w)
            out.append(w)
    return out


def matches_mask(word: str, mask: str) -> bool:
    if len(word) != len(mask):
        return False
    return all(not ("A" <= m <= "Z") or m == c for m, c in zip(mask, word))


# e.g. mask "F......" keeps the 7-letter words starting with F
def load_words_with_mask(path: str, mask: str, max_words: int = SUTOM_MAX_NUMBER_OF_WORDS) -> List[str]:
    words = load_words_from_file(path, len(mask), max_words)
    return [w for w in words if matches_mask(w, mask)]


# Sutom gives away the first letter of the secret
def sutom_mask(secret: str) -> str:
    return secret[0] + "." * (len(secret) - 1)
