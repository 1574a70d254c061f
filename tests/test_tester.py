import itertools
import random

import pytest

from sutom.patterns import all_green
from sutom.solver import GameResult
from sutom.state import GuessStep
from sutom.tester import (
    SAMPLE_POOL_SIZE,
    main,
    plot_results,
    run_simulations,
    running_average,
    sample_secrets,
    summarize,
)


def make_result(secret, solved, turns, first="TARIE"):
    return GameResult(secret, solved, turns, (GuessStep(first, 0),), 1)


def test_sample_secrets_is_reproducible():
    words = ["".join(p) for p in itertools.product("ABCDEFGHIJK", repeat=3)]
    first = sample_secrets(words, 200, random.Random(42))
    assert first == sample_secrets(words, 200, random.Random(42))
    assert len(first) == 200
    assert set(first) <= set(words[:SAMPLE_POOL_SIZE])


def test_running_average():
    assert running_average(0.0, 0, 4) == 4.0
    assert running_average(4.0, 1, 2) == 3.0
    assert running_average(3.0, 2, 6) == 4.0


def test_run_simulations(small_words):
    reports = []
    results = run_simulations(small_words, ["SAPIN", "LAPIN"], show_progress=False, report=reports.append)
    assert [r.secret for r in results] == ["SAPIN", "LAPIN"]
    assert all(r.solved for r in results)
    assert len(reports) == 2
    assert "CURRENT AVERAGE" in reports[-1]
    assert "(2 tests)" in reports[-1]


def test_run_simulations_sutom(words):
    (result,) = run_simulations(words, ["SORTE"], sutom=True, show_progress=False)
    assert result.solved
    assert all(step.word.startswith("S") for step in result.steps)
    assert result.steps[-1].pattern == all_green(5)


def test_summarize():
    assert summarize([]) == "No results."
    text = summarize([make_result("SAPIN", True, 3), make_result("LAPIN", False, 6)])
    assert "Games: 2" in text
    assert "Solved: 1 (50.00%)" in text
    assert "Exhausted: 1 (50.00%)" in text
    assert "Average score: 4.500" in text
    assert "Scores (X = exhausted): 3:1, X:1" in text
    assert "Candidates left when exhausted (avg): 1.0" in text
    assert "Opening: TARIE (2 / 2)" in text
    assert "Exhausted secrets (up to 10): LAPIN" in text


def test_summarize_unplayable_mask():
    text = summarize([GameResult("ZEBRE", False, 6, (), 0)])
    assert "No dictionary word for the mask: ZEBRE" in text
    assert "Candidates left" not in text
    assert "Opening" not in text


def test_main_with_secrets(small_dict, tmp_path, capsys):
    secrets = tmp_path / "secrets.txt"
    secrets.write_text("salon\nparis\n", encoding="utf-8")
    assert main(["--words", small_dict, "--secrets", str(secrets), "--no-progress"]) == 0
    out = capsys.readouterr().out
    assert "Games: 2" in out
    assert "Solved: 2 (100.00%)" in out


def test_main_random_samples(small_dict, capsys):
    assert main(["--words", small_dict, "--samples", "3", "--seed", "1", "--no-progress"]) == 0
    assert "Games: 3" in capsys.readouterr().out


def test_main_missing_dictionary(tmp_path, capsys):
    assert main(["--words", str(tmp_path / "none.txt")]) == 2
    assert "Failed to open word list" in capsys.readouterr().err


def test_plot_results(tmp_path):
    pytest.importorskip("matplotlib")
    out = tmp_path / "results.png"
    plot_results(results=[make_result("SAPIN", True, 3)], max_turns=6, out_path=str(out))
    assert out.exists()


def test_run_simulations_sutom_without_matching_words(small_words):
    # no dictionary word starts with M
    reports = []
    results = run_simulations(small_words, ["MOTUS", "SALON"], sutom=True, show_progress=False, report=reports.append)
    assert [r.solved for r in results] == [False, True]
    assert results[0].score == 6
    assert results[0].steps == ()
    assert "CURRENT AVERAGE" in reports[0]
