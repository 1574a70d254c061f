import itertools
import math

import pytest

from sutom import solver
from sutom.openings import OpeningBook
from sutom.patterns import all_green, compute_feedback
from sutom.solver import (
    MAX_TURNS,
    compute_entropy,
    entropy_by_enumeration,
    entropy_from_counts,
    find_best_opening,
    play_game,
    score_guesses,
    select_best_guess,
    suggest,
)
from sutom.state import GameState

THREE_LETTER_WORDS = ["".join(p) for p in itertools.product("ABC", repeat=3)]


def test_entropy_from_counts():
    assert entropy_from_counts([1, 1], total=2) == pytest.approx(1.0)
    assert entropy_from_counts([4, 0, 0], total=4) == 0.0
    assert entropy_from_counts([1, 1, 1, 1, 0], total=4) == pytest.approx(2.0)
    assert entropy_from_counts([], total=0) == 0.0


def test_histogram_matches_enumeration_on_empty_state():
    state = GameState(3)
    for guess in THREE_LETTER_WORDS:
        assert compute_entropy(state, guess, THREE_LETTER_WORDS) == pytest.approx(
            entropy_by_enumeration(state, guess, THREE_LETTER_WORDS)
        )


def test_histogram_matches_enumeration_after_feedback():
    for played, truth in [("ABC", "CAB"), ("AAB", "ABA"), ("CCC", "ACB")]:
        state = GameState(3)
        state.update(played, compute_feedback(played, truth))
        possible = state.possible_solutions(THREE_LETTER_WORDS)
        assert truth in possible
        for guess in THREE_LETTER_WORDS:
            assert compute_entropy(state, guess, possible) == pytest.approx(
                entropy_by_enumeration(state, guess, possible)
            )


def test_entropy_bounds(words):
    state = GameState(5)
    for guess in words:
        h = compute_entropy(state, guess, words)
        assert 0.0 <= h <= math.log2(len(words)) + 1e-9


def test_entropy_wrong_length():
    with pytest.raises(ValueError):
        compute_entropy(GameState(5), "SORTIE", ["REPAS"])


def test_single_solution_needs_no_scoring(monkeypatch, words):
    def fail(*args, **kwargs):
        raise AssertionError("entropy should not be computed")

    monkeypatch.setattr(solver, "compute_entropy", fail)
    state = GameState(5)
    state.update("REPAS", compute_feedback("REPAS", "SAPIN"))
    state.update("SAPIN", all_green(5))
    assert select_best_guess(state, words) == "SAPIN"


def test_few_solutions_only_guess_solutions(words):
    # REPAS splits SAPIN / LAPIN too, but it can't be the answer
    state = GameState.from_mask("..PIN")
    assert compute_entropy(state, "REPAS", ["SAPIN", "LAPIN"]) == pytest.approx(1.0)
    assert select_best_guess(state, words) == "SAPIN"


def test_best_guess_is_first_maximum(words):
    state = GameState(5)
    expected = max(words, key=lambda w: compute_entropy(state, w, words))
    assert select_best_guess(state, words) == expected


def test_best_guess_logs_progress(words):
    messages = []
    select_best_guess(GameState(5), words, log=messages.append)
    assert messages[0].startswith("possible solutions: 16")
    assert any("new best option" in m for m in messages)


def test_no_candidates(small_words):
    state = GameState(5)
    state.update("MOTUS", all_green(5))
    with pytest.raises(ValueError):
        select_best_guess(state, small_words)


def test_parallel_scoring_matches_sequential(words):
    state = GameState(5)
    sequential = list(score_guesses(state, words, words))
    parallel = list(score_guesses(state, words, words, n_jobs=2))
    assert [g for g, _ in parallel] == words
    assert [h for _, h in parallel] == pytest.approx([h for _, h in sequential])
    assert select_best_guess(state, words, n_jobs=2) == select_best_guess(state, words)


def test_suggest(words):
    state = GameState(5)
    ranked = suggest(state, words, top_k=3)
    assert len(ranked) == 3
    assert ranked[0][0] == select_best_guess(state, words)
    assert ranked[0][1] >= ranked[1][1] >= ranked[2][1]

    state.update("SAPIN", all_green(5))
    assert suggest(state, words) == [("SAPIN", 0.0)]


def test_find_best_opening(words):
    assert find_best_opening(words, show_progress=False) == select_best_guess(GameState(5), words)
    with pytest.raises(ValueError):
        find_best_opening([])


@pytest.mark.parametrize("secret", ["REPAS", "SAPIN", "PARIS", "LAPIN", "SALON", "TARIE"])
def test_play_game_solves(small_words, secret):
    result = play_game(small_words, secret)
    assert result.solved
    assert result.turns <= MAX_TURNS
    assert result.score == result.turns == len(result.steps)
    assert result.steps[-1].word == secret
    assert result.steps[-1].pattern == all_green(5)


def test_play_game_uses_opening_book(words):
    book = OpeningBook({("fr", 5): "MOTUS"})
    assert play_game(words, "sapin", opening_book=book).first_guess == "MOTUS"
    # constrained mask or unknown language: no book
    assert play_game(words, "SAPIN", opening_book=book, initial_mask="S....").first_guess != "MOTUS"
    result = play_game(words, "SAPIN", opening_book=book, language="en")
    assert result.first_guess == select_best_guess(GameState(5), words)


def test_play_game_exhausted(words):
    book = OpeningBook({("fr", 5): "MOTUS"})
    result = play_game(words, "SAPIN", opening_book=book, max_turns=1)
    assert not result.solved
    assert result.score == 1
    assert [s.word for s in result.steps] == ["MOTUS"]


def test_play_game_secret_outside_dictionary(small_words):
    result = play_game(small_words, "MOTUS")
    assert not result.solved
    assert result.score == MAX_TURNS
    assert "MOTUS" not in [s.word for s in result.steps]


def test_play_game_mask_length_mismatch(words):
    with pytest.raises(ValueError):
        play_game(words, "SAPIN", initial_mask="......")


def test_play_game_logs_turns(small_words):
    messages = []
    play_game(small_words, "SALON", log=messages.append)
    assert messages[0].startswith("new game: 6 compatible words")
    assert any(m.startswith("turn 1: ") for m in messages)


def test_play_game_mask_matches_no_word(small_words):
    messages = []
    result = play_game(small_words, "MOTUS", initial_mask="M....", log=messages.append)
    assert not result.solved
    assert result.score == MAX_TURNS
    assert result.steps == ()
    assert result.final_candidates == 0
    assert messages[-1] == "no dictionary word fits the mask M...."


def test_play_game_counts_once_per_turn(monkeypatch, small_words):
    def fail(self, words):
        raise AssertionError("entropy should come from the running count")

    monkeypatch.setattr(GameState, "state_entropy", fail)
    messages = []
    assert play_game(small_words, "SALON", log=messages.append).solved
    assert messages[0] == f"new game: 6 compatible words, entropy={math.log2(6):.4f} bits"
