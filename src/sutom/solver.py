"""Entropy-maximizing guess selection and the automatic game loop."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from multiprocessing import Pool, cpu_count
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

import tqdm

from .openings import DEFAULT_LANGUAGE, OpeningBook
from .patterns import all_green, compute_feedback, pattern_to_squares
from .state import GameState, GuessStep

LogFn = Callable[[str], None]

MAX_TURNS = 6

# below this many possible solutions, only guess words that could be the answer
SHOOT_TO_KILL_THRESHOLD = 4


def _noop(msg: str) -> None:
    pass


def _log2_count(n: int) -> float:
    return math.log2(n) if n > 0 else 0.0


# compute Shannon entropy from counts
# H(X) = - sum(p(x) * log2(p(x))) over all feedback patterns x
def entropy_from_counts(counts: Iterable[int], total: int) -> float:
    """Shannon entropy in bits, from bucket counts"""
    if total <= 0:
        return 0.0
    h = 0.0
    for c in counts:
        if c:
            p = c / total
            h -= p * math.log2(p)
    return h


# expected information gain of playing guess, assuming the secret is uniform over possible_solutions
def compute_entropy(state: GameState, guess: str, possible_solutions: Sequence[str]) -> float:
    if len(guess) != state.word_size:
        raise ValueError(f"Guess '{guess}' must be exactly {state.word_size} letters.")
    buckets = Counter(compute_feedback(guess, secret) for secret in possible_solutions)
    return entropy_from_counts(buckets.values(), total=len(possible_solutions))


def entropy_by_enumeration(state: GameState, guess: str, possible_solutions: Sequence[str]) -> float:
    """
    Same quantity as compute_entropy, obtained the slow way: apply every one of
    the 3**K patterns to a copy of the state and count who survives.
    """
    counts = []
    for pattern in range(all_green(state.word_size) + 1):
        hypothetical = state.copy()
        hypothetical.update(guess, pattern)
        # possible_solutions already satisfy the earlier steps
        counts.append(sum(1 for s in possible_solutions if hypothetical.is_compatible(s, check_only_last_step=True)))
    return entropy_from_counts(counts, total=len(possible_solutions))


# worker process globals, installed once per worker by _init_worker
_worker_state: Optional[GameState] = None
_worker_solutions: Sequence[str] = ()


def _init_worker(state: GameState, possible_solutions: Sequence[str]) -> None:
    global _worker_state, _worker_solutions
    _worker_state = state
    _worker_solutions = possible_solutions


def _score_in_worker(guess: str) -> Tuple[str, float]:
    return guess, compute_entropy(_worker_state, guess, _worker_solutions)


def score_guesses(
    state: GameState,
    pool: Sequence[str],
    possible_solutions: Sequence[str],
    *,
    n_jobs: Optional[int] = 1,
    show_progress: bool = False,
) -> Iterator[Tuple[str, float]]:
    """
    Yield (guess, entropy) for every word of pool, in pool order.

    n_jobs > 1 spreads the work over a process pool; n_jobs None or 0 uses all
    CPUs but one. Results come back in pool order either way.
    """
    if not n_jobs:
        n_jobs = max(1, cpu_count() - 1)

    if n_jobs <= 1:
        results: Iterable[Tuple[str, float]] = ((g, compute_entropy(state, g, possible_solutions)) for g in pool)
        if show_progress:
            results = tqdm.tqdm(results, total=len(pool), desc="Scoring guesses", unit="word")
        yield from results
        return

    with Pool(processes=n_jobs, initializer=_init_worker, initargs=(state, list(possible_solutions))) as workers:
        chunksize = max(1, len(pool) // (n_jobs * 8))
        results = workers.imap(_score_in_worker, pool, chunksize=chunksize)
        if show_progress:
            results = tqdm.tqdm(results, total=len(pool), desc="Scoring guesses", unit="word")
        yield from results


def _candidate_pool(possible_solutions: List[str], words: Sequence[str]) -> Sequence[str]:
    # few solutions left: guessing one of them beats a purely informative guess
    if len(possible_solutions) < SHOOT_TO_KILL_THRESHOLD:
        return possible_solutions
    return words


def _possible_or_fail(state: GameState, words: Sequence[str], log: LogFn) -> List[str]:
    possible = state.possible_solutions(words)
    if not possible:
        raise ValueError("No word in the dictionary is compatible with the feedback so far.")
    if len(possible) > 1:
        listing = f": {', '.join(possible)}" if len(possible) < 10 else ""
        log(f"possible solutions: {len(possible)}{listing}")
    return possible


def select_best_guess(
    state: GameState,
    words: Sequence[str],
    *,
    n_jobs: Optional[int] = 1,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> str:
    """
    Pick the guess with maximum expected entropy.

    words is both the pool of guesses and the universe of possible solutions.
    Ties go to the word that comes first in words.
    """
    log = log or _noop
    possible = _possible_or_fail(state, words, log)
    if len(possible) == 1:
        return possible[0]

    pool = _candidate_pool(possible, words)

    # (entropy, guess) is replaced as a whole, never field by field
    best: Tuple[float, str] = (-1.0, "")
    for i, (guess, h) in enumerate(score_guesses(state, pool, possible, n_jobs=n_jobs, show_progress=show_progress)):
        if h > best[0]:
            best = (h, guess)
            log(f"new best option (n°{i}): {guess} : {h:.4f} bits")
    return best[1]


# suggest top_k guesses by entropy
def suggest(
    state: GameState,
    words: Sequence[str],
    top_k: int = 10,
    *,
    n_jobs: Optional[int] = 1,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> List[Tuple[str, float]]:
    log = log or _noop
    possible = _possible_or_fail(state, words, log)
    if len(possible) == 1:
        return [(possible[0], 0.0)]

    pool = _candidate_pool(possible, words)
    scored = list(score_guesses(state, pool, possible, n_jobs=n_jobs, show_progress=show_progress))
    # stable sort keeps corpus order among ties
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored[:top_k]


def find_best_opening(
    words: Sequence[str],
    *,
    n_jobs: Optional[int] = 1,
    show_progress: bool = True,
    log: Optional[LogFn] = None,
) -> str:
    if not words:
        raise ValueError("Cannot search an opening on an empty dictionary.")
    return select_best_guess(GameState(len(words[0])), words, n_jobs=n_jobs, show_progress=show_progress, log=log)


@dataclass(frozen=True)
class GameResult:
    secret: str
    solved: bool
    turns: int
    steps: Tuple[GuessStep, ...]
    final_candidates: int

    @property
    def first_guess(self) -> str:
        return self.steps[0].word if self.steps else ""

    # turns taken when solved, max_turns otherwise
    @property
    def score(self) -> int:
        return self.turns


def play_game(
    words: Sequence[str],
    secret: str,
    *,
    initial_mask: Optional[str] = None,
    opening_book: Optional[OpeningBook] = None,
    language: str = DEFAULT_LANGUAGE,
    max_turns: int = MAX_TURNS,
    n_jobs: Optional[int] = 1,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> GameResult:
    """
    Play a whole game against a known secret.

    Turn 1 uses the opening book when the mask pins no letter; every other
    turn asks select_best_guess. The game ends solved, or exhausted after
    max_turns guesses (or when no dictionary word fits the feedback anymore).
    """
    log = log or _noop
    secret = secret.upper()
    mask = initial_mask if initial_mask is not None else "." * len(secret)
    if len(mask) != len(secret):
        raise ValueError(f"Mask '{mask}' and secret '{secret}' have different lengths.")

    state = GameState.from_mask(mask)
    n_compat = state.count_compatible(words)
    log(f"new game: {n_compat} compatible words, entropy={_log2_count(n_compat):.4f} bits")
    if n_compat == 0:
        log(f"no dictionary word fits the mask {mask}")
        return GameResult(secret, False, max_turns, (), 0)

    steps: List[GuessStep] = []
    for turn in range(max_turns):
        proposal = None
        if turn == 0 and opening_book is not None and state.is_unconstrained():
            proposal = opening_book.lookup(language, state.word_size)
            if proposal is not None:
                log(f"opening book: {proposal}")

        if proposal is None:
            proposal = select_best_guess(state, words, n_jobs=n_jobs, show_progress=show_progress, log=log)

        pattern = compute_feedback(proposal, secret)
        steps.append(GuessStep(proposal, pattern))
        log(f"turn {turn + 1}: {proposal} {pattern_to_squares(pattern, state.word_size)}")

        if proposal == secret:
            return GameResult(secret, True, turn + 1, tuple(steps), n_compat)

        old_entropy = _log2_count(n_compat)
        state.update(proposal, pattern)
        n_compat = state.count_compatible(words)
        new_entropy = _log2_count(n_compat)
        log(
            f"turn {turn + 1}: entropy gain={old_entropy - new_entropy:.4f} "
            f"compatible words={n_compat} new entropy={new_entropy:.4f}"
        )
        if n_compat == 0:
            log("no compatible word left; the secret is not in the dictionary")
            break

    return GameResult(secret, False, max_turns, tuple(steps), n_compat)
