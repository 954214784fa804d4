"""
Guess Evaluator

Pure letter-by-letter evaluation of a guess against the secret word.
"""

from typing import List, Optional

from ..models.game import LetterState


def evaluate(secret: str, guess: str) -> List[LetterState]:
    """
    Implements the Wordle letter evaluation algorithm.

    Exact position matches are resolved first and consume their letter, so a
    repeated guess letter is marked PRESENT at most as many times as it still
    occurs in the unmatched part of the secret.

    Args:
        secret: The secret word
        guess: A word of the same length

    Returns:
        List[LetterState]: One state per position

    Raises:
        ValueError: If the words differ in length
    """
    if len(secret) != len(guess):
        raise ValueError(f"Guess length {len(guess)} does not match secret length {len(secret)}")

    result = [LetterState.ABSENT] * len(secret)

    # Working copies to track letter consumption
    secret_chars: List[Optional[str]] = list(secret)
    guess_chars: List[Optional[str]] = list(guess)

    # First pass: exact position matches
    for i, letter in enumerate(guess):
        if letter == secret[i]:
            result[i] = LetterState.CORRECT
            secret_chars[i] = None
            guess_chars[i] = None

    # Second pass: displaced letters, left to right
    for i, letter in enumerate(guess_chars):
        if letter is None:
            continue
        if letter in secret_chars:
            result[i] = LetterState.PRESENT
            secret_chars[secret_chars.index(letter)] = None

    return result


def pattern_key(result: List[LetterState]) -> str:
    """Compact string form of an evaluation, e.g. 'CAPCC' for log lines."""
    return ''.join(state.value[0].upper() for state in result)
