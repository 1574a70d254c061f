"""Feedback patterns.

A pattern is the colour of every tile of a guess, packed into one integer:
position k contributes ``digit * 3**k`` with 0 = gray, 1 = yellow, 2 = green.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

Pattern = int

GRAY = 0
YELLOW = 1
GREEN = 2

SQUARES = {GRAY: "\u2B1B", YELLOW: "\U0001F7E8", GREEN: "\U0001F7E9"}

_LETTER_DIGITS = {"b": GRAY, "y": YELLOW, "g": GREEN}


def encode_digits(digits: Sequence[int]) -> Pattern:
    res = 0
    for k, d in enumerate(digits):
        res += d * 3 ** k
    return res


def all_green(word_size: int) -> Pattern:
    return 3 ** word_size - 1


# compute Wordle-style feedback for guess given the truth word
def compute_feedback(guess: str, truth: str) -> Pattern:
    """
    Greens are assigned first, then each remaining guess letter takes the
    leftmost unused occurrence in the truth (yellow), else it stays gray.
    """
    if len(guess) != len(truth):
        raise ValueError(f"Guess '{guess}' and truth '{truth}' have different lengths.")

    # first pass: greens, consuming the matched truth letters
    remaining: List[Optional[str]] = list(truth)
    digits = [GRAY] * len(guess)
    for k, (g_ch, t_ch) in enumerate(zip(guess, truth)):
        if g_ch == t_ch:
            digits[k] = GREEN
            remaining[k] = None

    # second pass: yellows (only for non-greens)
    for k, g_ch in enumerate(guess):
        if digits[k] == GREEN or g_ch not in remaining:
            continue
        digits[k] = YELLOW
        remaining[remaining.index(g_ch)] = None

    return encode_digits(digits)


# decode least significant digit first, i.e. in position order
def pattern_to_display(pattern: Pattern, word_size: int) -> List[int]:
    digits = []
    current = pattern
    for _ in range(word_size):
        digits.append(current % 3)
        current //= 3
    return digits


def pattern_to_string(pattern: Pattern, word_size: int) -> str:
    return "".join(str(d) for d in pattern_to_display(pattern, word_size))


def pattern_to_squares(pattern: Pattern, word_size: int) -> str:
    return "".join(SQUARES[d] for d in pattern_to_display(pattern, word_size))


# parse_pattern converts a string like '21002' or 'gybbg' into a Pattern
def parse_pattern(s: str, word_size: Optional[int] = None) -> Pattern:
    s = s.strip().lower()
    if word_size is not None and len(s) != word_size:
        raise ValueError(f"Pattern must be exactly {word_size} characters, got {len(s)}.")
    if re.fullmatch(r"[012]+", s):
        return encode_digits([int(ch) for ch in s])
    if re.fullmatch(r"[gyb]+", s):
        return encode_digits([_LETTER_DIGITS[ch] for ch in s])
    raise ValueError("Pattern must use only [0,1,2] or [b,y,g]. Example: '21002' or 'gybbg'.")


string_to_pattern = parse_pattern
