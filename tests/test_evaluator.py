import random
from collections import Counter

import pytest

from wordle_engine.models.game import LetterState
from wordle_engine.services.evaluator import evaluate, pattern_key

C, P, A = LetterState.CORRECT, LetterState.PRESENT, LetterState.ABSENT


@pytest.mark.parametrize("secret,guess,expected", [
    ("HELLO", "WORLD", [A, P, A, C, A]),
    ("BOOKS", "BOOST", [C, C, C, P, A]),
    ("LEVEL", "BELLE", [A, C, P, P, P]),
    ("ABBEY", "BBBBB", [A, C, C, A, A]),
    ("SPEED", "EERIE", [P, P, A, A, A]),
    ("ABBEY", "KEBAB", [A, P, C, P, P]),
    ("CRANE", "CRANE", [C, C, C, C, C]),
    ("CRANE", "MOULD", [A, A, A, A, A]),
])
def test_evaluate_golden(secret, guess, expected):
    assert evaluate(secret, guess) == expected


def test_exact_match_wins_over_earlier_displaced_letter():
    # The T at position 3 is exact, so the T at position 0 has nothing left to match
    assert evaluate("SLATE", "TASTE") == [A, P, P, C, C]


def test_evaluate_identical_words_all_correct():
    for word in ["ABOUT", "LLAMA", "KAYAK", "SPEED"]:
        assert evaluate(word, word) == [C] * 5


def test_evaluate_rejects_length_mismatch():
    with pytest.raises(ValueError):
        evaluate("CRANE", "CRANES")


def test_evaluate_counts_never_exceed_secret_multiplicity():
    rng = random.Random(1234)
    letters = "ABELOST"
    for _ in range(500):
        secret = ''.join(rng.choice(letters) for _ in range(5))
        guess = ''.join(rng.choice(letters) for _ in range(5))
        result = evaluate(secret, guess)

        exact_positions = [i for i in range(5) if secret[i] == guess[i]]
        assert [i for i, state in enumerate(result) if state is C] == exact_positions

        secret_counts = Counter(secret)
        marked = Counter(guess[i] for i, state in enumerate(result) if state in (C, P))
        for letter, count in marked.items():
            assert count <= secret_counts[letter]


def test_pattern_key():
    assert pattern_key([C, P, A, C, C]) == "CPACC"
