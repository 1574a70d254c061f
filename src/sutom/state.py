"""Game state: the guesses played so far and what they tell us about the secret."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .patterns import GREEN, Pattern, compute_feedback, pattern_to_display

ASCII_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass(frozen=True)
class GuessStep:
    word: str
    pattern: Pattern


class GameState:
    """
    Ordered list of played steps plus a green mask.

    The mask holds, per position, the letter known to be there (or None).
    It is only a cache of the greens seen so far, used to reject candidates
    before replaying the history.
    """

    def __init__(self, word_size: int, mask: Optional[List[Optional[str]]] = None):
        if mask is not None and len(mask) != word_size:
            raise ValueError(f"Mask has {len(mask)} slots, expected {word_size}.")
        self.word_size = word_size
        self.steps: List[GuessStep] = []
        self._green_mask: List[Optional[str]] = list(mask) if mask is not None else [None] * word_size

    # a mask like "F......" pins letters, anything outside A-Z is unconstrained
    @classmethod
    def from_mask(cls, mask: str) -> "GameState":
        return cls(len(mask), [c if c in ASCII_LETTERS else None for c in mask])

    @property
    def mask(self) -> str:
        return "".join(c if c is not None else "." for c in self._green_mask)

    def is_unconstrained(self) -> bool:
        return all(c is None for c in self._green_mask)

    def copy(self) -> "GameState":
        clone = GameState(self.word_size, self._green_mask)
        clone.steps = list(self.steps)
        return clone

    def update(self, word: str, pattern: Pattern) -> None:
        if len(word) != self.word_size:
            raise ValueError(f"Word '{word}' must be exactly {self.word_size} letters.")
        self.steps.append(GuessStep(word, pattern))

        # later greens overwrite earlier ones; contradictory feedback is not detected
        for k, digit in enumerate(pattern_to_display(pattern, self.word_size)):
            if digit == GREEN:
                self._green_mask[k] = word[k]

    # whether candidate_truth could have produced every pattern played so far
    def is_compatible(self, candidate_truth: str, check_only_last_step: bool = False) -> bool:
        for k, c in enumerate(self._green_mask):
            if c is not None and candidate_truth[k] != c:
                return False

        # most recent first, those tend to be the most discriminating
        for step in reversed(self.steps):
            if compute_feedback(step.word, candidate_truth) != step.pattern:
                return False
            if check_only_last_step:
                return True
        return True

    def possible_solutions(self, words: Iterable[str]) -> List[str]:
        return [w for w in words if self.is_compatible(w)]

    def count_compatible(self, words: Iterable[str]) -> int:
        return sum(1 for w in words if self.is_compatible(w))

    def state_entropy(self, words: Iterable[str]) -> float:
        """log2 of the number of words still compatible (0.0 if none left)."""
        n = self.count_compatible(words)
        return math.log2(n) if n > 0 else 0.0

    def __repr__(self) -> str:
        return f"GameState(mask={self.mask!r}, steps={len(self.steps)})"
