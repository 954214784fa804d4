from wordle_engine.models.game import GameSession


def play(session, *words):
    """Type and submit each word on a bare session."""
    for word in words:
        for letter in word:
            session.add_letter(letter)
        session.submit_guess()
    return session


def finished_game(secret="CRANE", guesses_to_win=None, lose=False):
    """A finished session: won in `guesses_to_win` guesses, or lost."""
    session = GameSession(secret_word=secret)
    filler = "ABOUT" if secret != "ABOUT" else "HELLO"
    if lose:
        return play(session, *[filler] * session.max_guesses)
    return play(session, *[filler] * (guesses_to_win - 1), secret)
