import pytest

from wordle_engine.models.game import GameSession, GameStatus, InvalidStateError, LetterState
from tests.helpers import play


def test_add_letter_fills_up_to_word_length():
    session = GameSession(secret_word="CRANE")
    for letter in "slate":
        assert session.add_letter(letter) is True
    assert session.current_input == "SLATE"
    assert session.add_letter("X") is False
    assert session.current_input == "SLATE"


def test_add_letter_rejects_non_letters():
    session = GameSession(secret_word="CRANE")
    assert session.add_letter("1") is False
    assert session.add_letter("AB") is False
    assert session.current_input == ""


def test_remove_letter():
    session = GameSession(secret_word="CRANE")
    assert session.remove_letter() is False
    session.add_letter("A")
    session.add_letter("B")
    assert session.remove_letter() is True
    assert session.current_input == "A"


def test_submit_incomplete_guess_changes_nothing():
    session = GameSession(secret_word="CRANE")
    for letter in "CRAN":
        session.add_letter(letter)
    assert session.submit_guess() is False
    assert session.guesses == []
    assert session.current_input == "CRAN"
    assert session.status is GameStatus.PLAYING


def test_submit_records_immutable_guess_and_clears_input():
    session = play(GameSession(secret_word="CRANE"), "SLATE")
    guess = session.guesses[0]
    assert guess.word == "SLATE"
    assert guess.result == (
        LetterState.ABSENT, LetterState.ABSENT, LetterState.CORRECT,
        LetterState.ABSENT, LetterState.CORRECT
    )
    assert session.current_input == ""
    with pytest.raises(AttributeError):
        guess.word = "OTHER"


def test_winning_guess_ends_game():
    session = play(GameSession(secret_word="CRANE"), "SLATE", "CRANE")
    assert session.status is GameStatus.WON
    assert session.ended_at is not None
    assert session.is_over
    assert session.remaining_guesses == 4


def test_six_misses_lose_the_game():
    session = play(GameSession(secret_word="CRANE"), *["ABOUT"] * 5)
    assert session.status is GameStatus.PLAYING
    assert session.ended_at is None

    play(session, "ABOUT")
    assert session.status is GameStatus.LOST
    assert session.ended_at is not None
    assert len(session.guesses) == 6


def test_win_on_last_guess_is_a_win():
    session = play(GameSession(secret_word="CRANE"), *["ABOUT"] * 5, "CRANE")
    assert session.status is GameStatus.WON


def test_no_mutation_after_terminal_state():
    session = play(GameSession(secret_word="CRANE"), "CRANE")
    assert session.add_letter("A") is False
    assert session.remove_letter() is False
    with pytest.raises(InvalidStateError):
        session.submit_guess()
    assert len(session.guesses) == 1


def test_used_letters_never_downgrade():
    session = GameSession(secret_word="ABBEY")
    play(session, "BBBBB")
    assert session.letter_state("B") is LetterState.CORRECT

    # B at position 0 is only present here; the correct state is kept
    play(session, "BOOST")
    assert session.letter_state("B") is LetterState.CORRECT
    assert session.letter_state("O") is LetterState.ABSENT

    play(session, "EERIE")
    assert session.letter_state("E") is LetterState.PRESENT
    assert session.letter_state("Z") is LetterState.UNUSED


def test_secret_must_be_well_formed():
    with pytest.raises(ValueError):
        GameSession(secret_word="TOOLONG")
    assert GameSession(secret_word="crane").secret_word == "CRANE"


def test_to_dict_hides_answer_until_over():
    session = play(GameSession(secret_word="CRANE"), "SLATE")
    state = session.to_dict()
    assert state['answer'] is None
    assert state['status'] == 'playing'
    assert state['used_letters']['A'] == 'correct'
    assert state['remaining_guesses'] == 5

    play(session, "CRANE")
    assert session.to_dict()['answer'] == "CRANE"


def test_letter_state_rank_order():
    assert LetterState.CORRECT.best(LetterState.ABSENT) is LetterState.CORRECT
    assert LetterState.ABSENT.best(LetterState.PRESENT) is LetterState.PRESENT
    assert LetterState.UNUSED.best(LetterState.ABSENT) is LetterState.ABSENT
