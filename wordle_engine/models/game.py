"""
Game Data Models

Contains the letter and status enums, the immutable guess record and the
single-round game session state machine.
"""

import random
import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..config.game_settings import ALPHABET, MAX_GUESSES, WORD_LENGTH


class InvalidStateError(Exception):
    """Raised when the engine is driven in a way the current state does not allow."""


class LetterState(Enum):
    """Per-letter evaluation result, also used for the best known keyboard state."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"
    UNUSED = "unused"

    @property
    def rank(self) -> int:
        return _LETTER_RANK[self]

    def best(self, other: "LetterState") -> "LetterState":
        """Return whichever of the two states carries more information."""
        return self if self.rank >= other.rank else other


_LETTER_RANK = {
    LetterState.UNUSED: 0,
    LetterState.ABSENT: 1,
    LetterState.PRESENT: 2,
    LetterState.CORRECT: 3,
}


class GameStatus(Enum):
    """Session status. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


def generate_game_id() -> str:
    """Build an id of the form game_<epoch ms>_<9 base36 chars>."""
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"game_{int(time.time() * 1000)}_{suffix}"


def is_well_formed(word: str, length: int = WORD_LENGTH) -> bool:
    """True when word is exactly `length` uppercase A-Z letters."""
    return len(word) == length and all(char in ALPHABET for char in word)


@dataclass(frozen=True)
class Guess:
    """A submitted word and its per-position evaluation."""
    word: str
    result: Tuple[LetterState, ...]
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict:
        return {
            'word': self.word,
            'result': [state.value for state in self.result],
            'timestamp': self.timestamp
        }


@dataclass(frozen=True)
class Hint:
    """A revealed letter of the secret word. Position is 1-based."""
    position: int
    letter: str

    def to_dict(self) -> Dict:
        return {'position': self.position, 'letter': self.letter}


@dataclass
class GameSession:
    """
    One round of the puzzle.

    The session accumulates guesses until the secret is found or the guess
    budget runs out. Status only moves playing -> won or playing -> lost, and
    no mutation is accepted afterwards. Dictionary membership is checked by
    the caller before submit_guess; the session only checks the shape of the
    word.
    """
    secret_word: str
    id: str = field(default_factory=generate_game_id)
    guesses: List[Guess] = field(default_factory=list)
    current_input: str = ""
    status: GameStatus = GameStatus.PLAYING
    used_letters: Dict[str, LetterState] = field(default_factory=dict)
    started_at: float = field(default_factory=time.time)
    ended_at: Optional[float] = None
    max_guesses: int = MAX_GUESSES
    word_length: int = WORD_LENGTH

    def __post_init__(self):
        self.secret_word = self.secret_word.upper()
        if not is_well_formed(self.secret_word, self.word_length):
            raise ValueError(f"Secret word must be {self.word_length} letters A-Z: {self.secret_word!r}")

    @property
    def is_over(self) -> bool:
        return self.status is not GameStatus.PLAYING

    @property
    def remaining_guesses(self) -> int:
        return self.max_guesses - len(self.guesses)

    @property
    def duration(self) -> float:
        end = self.ended_at if self.ended_at is not None else time.time()
        return end - self.started_at

    def letter_state(self, letter: str) -> LetterState:
        return self.used_letters.get(letter.upper(), LetterState.UNUSED)

    def add_letter(self, letter: str) -> bool:
        """Append one letter to the partial guess. False when nothing changed."""
        if self.is_over:
            return False
        if len(self.current_input) >= self.word_length:
            return False
        if not isinstance(letter, str) or len(letter) != 1 or letter.upper() not in ALPHABET:
            return False
        self.current_input += letter.upper()
        return True

    def remove_letter(self) -> bool:
        if self.is_over or not self.current_input:
            return False
        self.current_input = self.current_input[:-1]
        return True

    def clear_input(self) -> None:
        self.current_input = ""

    def submit_guess(self) -> bool:
        """
        Evaluate the current input against the secret word.

        Returns:
            bool: False, with no state change, when the input is not a full word

        Raises:
            InvalidStateError: If the game is already over
        """
        from ..services.evaluator import evaluate

        if self.is_over:
            raise InvalidStateError(f"Game {self.id} is already over ({self.status.value})")

        word = self.current_input
        if not is_well_formed(word, self.word_length):
            return False

        result = tuple(evaluate(self.secret_word, word))
        self.guesses.append(Guess(word=word, result=result))

        # Keyboard state can only progress in priority order
        for letter, state in zip(word, result):
            self.used_letters[letter] = self.letter_state(letter).best(state)

        self.current_input = ""
        self._check_status()
        return True

    def next_hint(self) -> Optional[Hint]:
        """
        First letter of the secret whose keyboard state is still unused.

        None once the game is over or every secret letter has been tried.
        """
        if self.is_over:
            return None
        for index, letter in enumerate(self.secret_word):
            if self.letter_state(letter) is LetterState.UNUSED:
                return Hint(position=index + 1, letter=letter)
        return None

    def _check_status(self) -> None:
        last_guess = self.guesses[-1] if self.guesses else None
        if last_guess is not None and last_guess.word == self.secret_word:
            self.status = GameStatus.WON
            self.ended_at = time.time()
        elif len(self.guesses) >= self.max_guesses:
            self.status = GameStatus.LOST
            self.ended_at = time.time()

    def to_dict(self, reveal_secret: bool = False) -> Dict:
        """
        Caller-facing view of the session.

        The secret word is only included once the game is over, or when
        reveal_secret is set.
        """
        return {
            'game_id': self.id,
            'status': self.status.value,
            'game_over': self.is_over,
            'won': self.status is GameStatus.WON,
            'current_input': self.current_input,
            'guesses': [guess.to_dict() for guess in self.guesses],
            'used_letters': {letter: state.value for letter, state in sorted(self.used_letters.items())},
            'max_guesses': self.max_guesses,
            'word_length': self.word_length,
            'remaining_guesses': self.remaining_guesses,
            'started_at': self.started_at,
            'ended_at': self.ended_at,
            'answer': self.secret_word if (self.is_over or reveal_secret) else None
        }
