#!/usr/bin/env python3
"""cli.py

Wordle / Sutom solver that picks guesses by maximizing expected information gain (entropy).

Commands:
  play SECRET          Let the solver play a full game against a known secret.
  play SECRET --sutom  Same, Sutom rules: the first letter is given.
  interactive          You play elsewhere and type the feedback of each guess here.
  opening SIZE         Search the best first guess for SIZE-letter words.

Feedback format (interactive):
- One character per letter, 2 = green, 1 = yellow, 0 = gray (or g / y / b).
  Example: "21002"

Word lists default to data/mots_<size>.txt, one word per line.

Usage:
  sutom play REPAS --verbose
  sutom play DIAMETRE --sutom
  sutom interactive --mask F......
  sutom opening 5 --book openings.json --jobs 0
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional, Sequence

from .openings import DEFAULT_LANGUAGE, OpeningBook
from .patterns import all_green, parse_pattern, pattern_to_squares
from .solver import MAX_TURNS, LogFn, find_best_opening, play_game, suggest
from .state import GameState
from .words import (
    MAX_NUMBER_OF_WORDS,
    SUTOM_MAX_NUMBER_OF_WORDS,
    default_word_source,
    load_words_with_mask,
    sutom_mask,
)


def make_log(verbose: bool) -> LogFn:
    start_t = time.time()

    def log(msg: str) -> None:
        if not verbose:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] {msg}")

    return log


def _load_corpus(path: Optional[str], mask: str, max_words: int) -> Optional[List[str]]:
    """Load the dictionary for mask, or report why it can't be used (None)."""
    path = path or default_word_source(len(mask))
    try:
        words = load_words_with_mask(path, mask, max_words)
    except OSError as e:
        print(f"Failed to open word list {path}: {e}", file=sys.stderr)
        return None
    if not words:
        print(f"Loaded 0 usable words from {path} for mask {mask}. Check the file.", file=sys.stderr)
        return None
    return words


def _ask(prompt: str) -> Optional[str]:
    """input() that maps 'quit' and end of input to None."""
    try:
        answer = input(prompt).strip()
    except EOFError:
        return None
    return None if answer.lower() == "quit" else answer


def interactive_game(
    words: Sequence[str],
    initial_mask: str,
    *,
    opening_book: Optional[OpeningBook] = None,
    language: str = DEFAULT_LANGUAGE,
    max_turns: int = MAX_TURNS,
    top: int = 5,
    n_jobs: Optional[int] = 1,
    show_progress: bool = True,
    log: Optional[LogFn] = None,
) -> Optional[int]:
    """
    Suggest guesses while the user plays the real game.

    Returns the number of turns when the secret was found, None otherwise.
    """
    state = GameState.from_mask(initial_mask)
    size = state.word_size

    for turn in range(1, max_turns + 1):
        n = state.count_compatible(words)
        if n == 0:
            print("No candidates left. Either the word list doesn't match the game's dictionary,")
            print("or a feedback pattern was mistyped.")
            return None

        print(f"Turn {turn} | Remaining candidates: {n}")

        best_word = None
        if turn == 1 and n > 1 and opening_book is not None and state.is_unconstrained():
            best_word = opening_book.lookup(language, size)
        if best_word is None:
            suggestions = suggest(state, words, top_k=top, n_jobs=n_jobs, show_progress=show_progress, log=log)
            best_word = suggestions[0][0]
            if n > 1:
                print("\nTop suggestions (guess | expected bits):")
                for w, h in suggestions:
                    print(f"  {w}  |  {h:.4f}")
        print(f"\nSuggested guess: {best_word}\n")

        if n == 1:
            print(f"There's only one word left, the answer is {best_word}!\n")
            return turn

        while True:
            guess = _ask("Enter the guess you used (or press Enter to use suggested): ")
            if guess is None:
                return None
            guess = guess.upper() or best_word
            if len(guess) == size and guess.isalpha():
                break
            print(f"Guess must be exactly {size} letters.\n")

        while True:
            pat_s = _ask(f"Enter the feedback pattern ({size} of 2/1/0 or g/y/b): ")
            if pat_s is None:
                return None
            try:
                pattern = parse_pattern(pat_s, word_size=size)
                break
            except ValueError as e:
                print(f"{e}\n")

        print(f"{guess} {pattern_to_squares(pattern, size)}")
        if pattern == all_green(size):
            print(f"Solved in {turn} turns.\n")
            return turn

        state.update(guess, pattern)
        print("")

    print(f"Not solved within {max_turns} turns.")
    return None


def _cmd_play(args: argparse.Namespace, book: OpeningBook, log: LogFn) -> int:
    secret = args.secret.upper()
    if args.sutom:
        mask = sutom_mask(secret)
        max_words = args.max_words or SUTOM_MAX_NUMBER_OF_WORDS
    else:
        mask = "." * len(secret)
        max_words = args.max_words or MAX_NUMBER_OF_WORDS

    words = _load_corpus(args.words, mask, max_words)
    if words is None:
        return 2

    print(f"\n*** NEW GAME Truth={secret}")
    result = play_game(
        words,
        secret,
        initial_mask=mask,
        opening_book=book,
        language=args.language,
        max_turns=args.max_turns,
        n_jobs=args.jobs,
        show_progress=not args.no_progress,
        log=log,
    )
    for step in result.steps:
        print(f"{step.word} {pattern_to_squares(step.pattern, len(secret))}")

    if result.solved:
        print(f"SOLVED IN {result.turns} STEPS")
        return 0
    print(f"NOT SOLVED within {args.max_turns} turns. Remaining candidates: {result.final_candidates}")
    return 1


def _cmd_interactive(args: argparse.Namespace, book: OpeningBook, log: LogFn) -> int:
    mask = args.mask
    while not mask:
        mask = _ask("Enter initial mask (e.g. ..... or F......): ")
        if mask is None:
            return 1
    mask = mask.upper()

    words = _load_corpus(args.words, mask, args.max_words or SUTOM_MAX_NUMBER_OF_WORDS)
    if words is None:
        return 2

    print(f"\n=== {len(mask)}-letter solver ===")
    print(f"Dictionary words: {len(words)}")
    print("Feedback input: one of [2,1,0] or [g,y,b] per letter. Example: 21002")
    print("Type 'quit' to exit.\n")

    turns = interactive_game(
        words,
        mask,
        opening_book=book,
        language=args.language,
        max_turns=args.max_turns,
        top=args.top,
        n_jobs=args.jobs,
        show_progress=not args.no_progress,
        log=log,
    )
    return 0 if turns is not None else 1


def _cmd_opening(args: argparse.Namespace, book: OpeningBook, log: LogFn) -> int:
    words = _load_corpus(args.words, "." * args.size, args.max_words or MAX_NUMBER_OF_WORDS)
    if words is None:
        return 2

    t0 = time.time()
    best = find_best_opening(words, n_jobs=args.jobs, show_progress=not args.no_progress, log=log)
    print(f"Best opening for {args.size} letters ({len(words)} words): {best} ({time.time() - t0:.1f}s)")

    if args.book:
        book.record(args.language, best)
        book.save(args.book)
        print(f"Recorded in opening book: {args.book}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Wordle / Sutom entropy solver.")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--words", type=str, default=None,
                        help="Word list, one per line (default: data/mots_<size>.txt).")
    common.add_argument("--max-words", type=int, default=0,
                        help="Keep at most this many words from the list (0 = mode default).")
    common.add_argument("--language", type=str, default=DEFAULT_LANGUAGE, help="Opening book language.")
    common.add_argument("--book", type=str, default=None, help="Opening book JSON file (merged over defaults).")
    common.add_argument("--max-turns", type=int, default=MAX_TURNS, help="Max turns per game.")
    common.add_argument("--jobs", type=int, default=1,
                        help="Worker processes used to score guesses (0 = all CPUs but one).")
    common.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    common.add_argument("--verbose", action="store_true", help="Print timestamped solver progress.")

    sub = ap.add_subparsers(dest="command", required=True)

    p_play = sub.add_parser("play", parents=[common], help="Solve a known secret automatically.")
    p_play.add_argument("secret", type=str)
    p_play.add_argument("--sutom", action="store_true", help="Sutom rules: the first letter is given.")
    p_play.set_defaults(func=_cmd_play)

    p_inter = sub.add_parser("interactive", parents=[common], help="Suggest guesses for a game played elsewhere.")
    p_inter.add_argument("--mask", type=str, default=None, help="Initial mask, e.g. '.....' or 'F......'.")
    p_inter.add_argument("--top", type=int, default=5, help="How many suggestions to show each turn.")
    p_inter.set_defaults(func=_cmd_interactive)

    p_open = sub.add_parser("opening", parents=[common], help="Search the best first guess.")
    p_open.add_argument("size", type=int, help="Word length.")
    p_open.set_defaults(func=_cmd_opening)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    book = OpeningBook.load(args.book)
    log = make_log(args.verbose)
    return args.func(args, book, log)


if __name__ == "__main__":
    raise SystemExit(main())
