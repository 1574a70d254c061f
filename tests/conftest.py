import pytest

# every word is 5 letters; the first six are a closed corpus any game solves in 6 turns
SMALL_WORDS = ["REPAS", "SAPIN", "PARIS", "LAPIN", "SALON", "TARIE"]
WORDS = SMALL_WORDS + ["PIANO", "MOTUS", "CRANE", "TIRES", "SORTE", "RAPES", "PISTE", "ROUTE", "AIMER", "LIVRE"]


@pytest.fixture
def small_words():
    return list(SMALL_WORDS)


@pytest.fixture
def words():
    return list(WORDS)


@pytest.fixture
def small_dict(tmp_path):
    path = tmp_path / "mots_5.txt"
    path.write_text("\n".join(w.lower() for w in SMALL_WORDS) + "\n", encoding="utf-8")
    return str(path)
