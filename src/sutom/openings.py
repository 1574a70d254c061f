"""Opening book: precomputed best first guesses per (language, word size)."""

from __future__ import annotations

import json
import os
from typing import Dict, Optional, Tuple

# found by find_best_opening on the bundled French dictionaries
DEFAULT_OPENINGS: Dict[Tuple[str, int], str] = {
    ("fr", 5): "TARIE",
    ("fr", 6): "SORTIE",
}

DEFAULT_LANGUAGE = "fr"


def _book_key(language: str, word_size: int) -> str:
    return f"{language}:{word_size}"


class OpeningBook:
    _FORMAT_VERSION = 1

    def __init__(self, openings: Optional[Dict[Tuple[str, int], str]] = None):
        self._openings = dict(DEFAULT_OPENINGS if openings is None else openings)

    def lookup(self, language: str, word_size: int) -> Optional[str]:
        return self._openings.get((language, word_size))

    def record(self, language: str, word: str) -> None:
        self._openings[(language, len(word))] = word.upper()

    def __len__(self) -> int:
        return len(self._openings)

    # load a book file on top of the defaults; a missing or broken file just means defaults
    @classmethod
    def load(cls, path: Optional[str]) -> "OpeningBook":
        book = cls()
        if path is None:
            return book
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return book

        if not isinstance(data, dict) or data.get("format_version") != cls._FORMAT_VERSION:
            return book
        entries = data.get("openings")
        if not isinstance(entries, dict):
            return book

        for key, word in entries.items():
            if not isinstance(key, str) or not isinstance(word, str):
                continue
            language, _, size = key.rpartition(":")
            if language and size.isdigit() and int(size) == len(word):
                book._openings[(language, int(size))] = word.upper()
        return book

    def save(self, path: str) -> None:
        payload = {
            "format_version": self._FORMAT_VERSION,
            "openings": {_book_key(lang, size): w for (lang, size), w in sorted(self._openings.items())},
        }
        tmp_path = str(path) + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
