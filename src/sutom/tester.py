#!/usr/bin/env python3
"""tester.py

Runs automated games with the solver and prints summary statistics.
Optionally writes a matplotlib graph to disk.

Examples:
  sutom-tester --size 5 --samples 10 --seed 1
  sutom-tester --size 7 --samples 10 --sutom
  sutom-tester --size 5 --secrets secrets.txt --limit 200 --plot results.png

Notes:
- Without --secrets, secrets are drawn at random among the first 1001 dictionary words.
- A failed game scores max-turns, so the running average stays comparable across runs.
"""

from __future__ import annotations

import argparse
import random
import statistics
import sys
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

import tqdm

from .cli import make_log
from .openings import DEFAULT_LANGUAGE, OpeningBook
from .solver import MAX_TURNS, GameResult, LogFn, play_game
from .words import (
    MAX_NUMBER_OF_WORDS,
    SUTOM_MAX_NUMBER_OF_WORDS,
    default_word_source,
    load_words_from_file,
    matches_mask,
    sutom_mask,
)

# secrets are drawn among the first SAMPLE_POOL_SIZE words of the dictionary
SAMPLE_POOL_SIZE = 1001


def sample_secrets(words: Sequence[str], n: int, rng: random.Random) -> List[str]:
    pool_size = min(len(words), SAMPLE_POOL_SIZE)
    return [words[rng.randrange(pool_size)] for _ in range(n)]


def running_average(avg: float, n_done: int, score: int) -> float:
    """Average after adding score to n_done previous games averaging avg."""
    return (avg * n_done + score) / (n_done + 1)


def _iter_progress(iterable, *, enabled: bool, desc: str, unit: str):
    if enabled:
        return tqdm.tqdm(iterable, desc=desc, unit=unit)
    return iterable


def run_simulations(
    words: Sequence[str],
    secrets: Iterable[str],
    *,
    sutom: bool = False,
    opening_book: Optional[OpeningBook] = None,
    language: str = DEFAULT_LANGUAGE,
    max_turns: int = MAX_TURNS,
    n_jobs: Optional[int] = 1,
    show_progress: bool = True,
    log: Optional[LogFn] = None,
    report: Optional[LogFn] = None,
) -> List[GameResult]:
    """
    Play one automatic game per secret.

    In Sutom mode each game only keeps the dictionary words sharing the
    secret's first letter, and the mask gives that letter away.
    report receives the running average after every game.
    """
    secrets = list(secrets)
    by_mask: Dict[str, List[str]] = {}
    results: List[GameResult] = []
    avg = 0.0

    for secret in _iter_progress(secrets, enabled=show_progress, desc="Simulating", unit="game"):
        mask = sutom_mask(secret) if sutom else "." * len(secret)
        if mask not in by_mask:
            by_mask[mask] = [w for w in words if matches_mask(w, mask)] if sutom else list(words)
        result = play_game(
            by_mask[mask],
            secret,
            initial_mask=mask,
            opening_book=opening_book,
            language=language,
            max_turns=max_turns,
            n_jobs=n_jobs,
            log=log,
        )
        avg = running_average(avg, len(results), result.score)
        results.append(result)
        if report is not None:
            report(f"*** {secret}: score {result.score}, CURRENT AVERAGE = {avg:.4f} ({len(results)} tests)")

    return results


def summarize(results: Iterable[GameResult]) -> str:
    """Text report; an exhausted game scores max turns like in the running average."""
    results = list(results)
    if not results:
        return "No results."

    n = len(results)
    exhausted = [r for r in results if not r.solved]
    # exhausted before any guess: no dictionary word fit the starting mask
    unplayable = [r for r in exhausted if not r.steps]
    score_parts = [f"{s}:{c}" for s, c in sorted(Counter(r.score for r in results if r.solved).items())]
    if exhausted:
        score_parts.append(f"X:{len(exhausted)}")
    openers = Counter(r.first_guess for r in results if r.first_guess)

    lines = [
        f"Games: {n}",
        f"Solved: {n - len(exhausted)} ({(n - len(exhausted)) / n * 100:.2f}%)",
        f"Exhausted: {len(exhausted)} ({len(exhausted) / n * 100:.2f}%)",
        f"Average score: {statistics.mean(r.score for r in results):.3f}",
        "Scores (X = exhausted): " + ", ".join(score_parts),
    ]
    if len(exhausted) > len(unplayable):
        left = statistics.mean(r.final_candidates for r in exhausted if r.steps)
        lines.append(f"Candidates left when exhausted (avg): {left:.1f}")
    if unplayable:
        lines.append(f"No dictionary word for the mask: {', '.join(r.secret for r in unplayable[:10])}")
    if openers:
        (top_guess, top_count) = openers.most_common(1)[0]
        lines.append(f"Opening: {top_guess} ({top_count} / {n})")
    if exhausted:
        lines.append(f"Exhausted secrets (up to 10): {', '.join(r.secret for r in exhausted[:10])}")
    return "\n".join(lines)


def plot_results(*, results: List[GameResult], max_turns: int, out_path: str) -> None:
    """Score histogram (left) and running average score per game (right)."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # noqa: E402

    scores = Counter(r.score for r in results if r.solved)
    n_failed = sum(1 for r in results if not r.solved)
    turns = list(range(1, max_turns + 1))

    averages: List[float] = []
    for i, r in enumerate(results):
        averages.append(running_average(averages[-1] if averages else 0.0, i, r.score))

    fig, (hist_ax, avg_ax) = plt.subplots(1, 2, figsize=(11, 4.5))
    hist_ax.bar(turns, [scores.get(t, 0) for t in turns], label="Solved", color="C0")
    hist_ax.bar([max_turns + 1], [n_failed], label="Not solved", color="C3")
    hist_ax.set_xticks(turns + [max_turns + 1])
    hist_ax.set_xticklabels([str(t) for t in turns] + ["fail"])
    hist_ax.set_xlabel("Turns")
    hist_ax.set_ylabel("# games")
    hist_ax.legend(loc="upper left")

    avg_ax.plot(range(1, len(averages) + 1), averages, color="C2")
    avg_ax.set_xlabel("Games played")
    avg_ax.set_ylabel("Average score")
    if averages:
        avg_ax.set_title(f"Final average: {averages[-1]:.3f} over {len(averages)} games")

    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run solver simulations and print statistics.")
    ap.add_argument("--size", type=int, default=5, help="Word length.")
    ap.add_argument("--words", type=str, default=None, help="Word list (default: data/mots_<size>.txt).")
    ap.add_argument("--max-words", type=int, default=0, help="Keep at most this many words (0 = mode default).")
    ap.add_argument("--secrets", type=str, default=None, help="Secrets to test, one per line (default: random sample).")
    ap.add_argument("--samples", type=int, default=10, help="Number of random secrets when --secrets is not given.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the random secret sampling.")
    ap.add_argument("--limit", type=int, default=0, help="Limit number of secrets (0 = no limit).")
    ap.add_argument("--sutom", action="store_true", help="Sutom rules: the first letter is given.")
    ap.add_argument("--max-turns", type=int, default=MAX_TURNS, help="Max turns per game.")
    ap.add_argument("--language", type=str, default=DEFAULT_LANGUAGE, help="Opening book language.")
    ap.add_argument("--book", type=str, default=None, help="Opening book JSON file (merged over defaults).")
    ap.add_argument("--jobs", type=int, default=1, help="Worker processes used to score guesses (0 = all CPUs but one).")
    ap.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    ap.add_argument("--verbose", action="store_true", help="Print timestamped solver progress.")
    ap.add_argument("--plot", type=str, default=None, help="Write a matplotlib graph to this path (e.g. results.png).")
    args = ap.parse_args(argv)

    words_path = args.words or default_word_source(args.size)
    default_cap = SUTOM_MAX_NUMBER_OF_WORDS if args.sutom else MAX_NUMBER_OF_WORDS
    try:
        words = load_words_from_file(words_path, args.size, args.max_words or default_cap)
    except OSError as e:
        print(f"Failed to open word list {words_path}: {e}", file=sys.stderr)
        return 2
    if not words:
        print(f"Loaded 0 usable words from {words_path}.", file=sys.stderr)
        return 2

    if args.secrets:
        try:
            secrets = load_words_from_file(args.secrets, args.size, sys.maxsize)
        except OSError as e:
            print(f"Failed to open secrets list {args.secrets}: {e}", file=sys.stderr)
            return 2
    else:
        secrets = sample_secrets(words, args.samples, random.Random(args.seed))

    if args.limit and args.limit > 0:
        secrets = secrets[: args.limit]

    results = run_simulations(
        words,
        secrets,
        sutom=args.sutom,
        opening_book=OpeningBook.load(args.book),
        language=args.language,
        max_turns=args.max_turns,
        n_jobs=args.jobs,
        show_progress=not args.no_progress,
        log=make_log(args.verbose),
        report=tqdm.tqdm.write,
    )

    print(summarize(results))

    if args.plot:
        try:
            plot_results(results=results, max_turns=args.max_turns, out_path=args.plot)
            print(f"Wrote plot: {args.plot}")
        except ModuleNotFoundError as e:
            print(f"Plot requested but missing dependency: {e}. Install matplotlib to use --plot.", file=sys.stderr)
            return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
