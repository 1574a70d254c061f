"""Wordle / Sutom entropy solver."""

__version__ = "1.0.0"

from .openings import OpeningBook
from .patterns import (
    Pattern,
    compute_feedback,
    parse_pattern,
    pattern_to_display,
    pattern_to_squares,
    string_to_pattern,
)
from .solver import (
    GameResult,
    compute_entropy,
    entropy_from_counts,
    find_best_opening,
    play_game,
    select_best_guess,
    suggest,
)
from .state import GameState, GuessStep
from .words import load_words_from_file, load_words_with_mask

__all__ = [
    "GameResult",
    "GameState",
    "GuessStep",
    "OpeningBook",
    "Pattern",
    "compute_entropy",
    "compute_feedback",
    "entropy_from_counts",
    "find_best_opening",
    "load_words_from_file",
    "load_words_with_mask",
    "parse_pattern",
    "pattern_to_display",
    "pattern_to_squares",
    "play_game",
    "select_best_guess",
    "string_to_pattern",
    "suggest",
]
