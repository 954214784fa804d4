"""
Game Service

Caller-facing API: composes the dictionary, the session state machine,
the statistics engine and the persistence gateway.
"""

import random
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional

from ..config.game_settings import ALPHABET, DEFAULT_SECRET, MAX_GUESSES
from ..models.game import GameSession, GameStatus, Hint, InvalidStateError, LetterState
from ..models.stats import Achievement, HistoryRecord, PersistedState, Settings
from ..utils.game_logger import game_logger
from .evaluator import pattern_key
from .persistence import PersistenceGateway
from .statistics_service import StatisticsEngine
from .word_validator import BatchResult, RejectionReason, ValidationResult, WordValidator


@dataclass
class GuessOutcome:
    """Result of a guess submission as seen by the caller."""
    accepted: bool
    word: Optional[str] = None
    reason: Optional[RejectionReason] = None
    result: List[LetterState] = field(default_factory=list)
    status: GameStatus = GameStatus.PLAYING
    unlocked: List[Achievement] = field(default_factory=list)
    message: Optional[str] = None

    def __post_init__(self):
        if self.reason is not None and self.message is None:
            self.message = self.reason.describe()

    def to_dict(self) -> Dict:
        data = {
            'accepted': self.accepted,
            'word': self.word,
            'status': self.status.value,
            'result': [state.value for state in self.result],
            'unlocked_achievements': [achievement.id for achievement in self.unlocked]
        }
        if self.reason is not None:
            data['reason'] = self.reason.name
            data['error'] = self.message
        return data


class GameService:
    """
    Single-player game service.

    This class handles:
    - One active game session at a time (a new game discards the previous one)
    - Guess validation against the dictionary before evaluation
    - Folding finished games into statistics and achievements
    - Saving the whole state after every change
    """

    def __init__(self, validator: Optional[WordValidator] = None,
                 gateway: Optional[PersistenceGateway] = None,
                 max_guesses: int = MAX_GUESSES):
        self.validator = validator if validator is not None else WordValidator()
        self.gateway = gateway if gateway is not None else PersistenceGateway()
        self.max_guesses = max_guesses
        self.state: PersistedState = self.gateway.load()
        self.stats_engine = StatisticsEngine(self.state)

    def _save(self) -> bool:
        return self.gateway.save(self.state)

    def _require_game(self) -> GameSession:
        if self.state.current_game is None:
            raise InvalidStateError("No active game")
        return self.state.current_game

    @property
    def current_game(self) -> Optional[GameSession]:
        return self.state.current_game

    def _select_secret(self, word_list: Optional[Iterable[str]]) -> str:
        if word_list is None:
            secret = self.validator.pick_random()
            return secret if secret is not None else DEFAULT_SECRET

        candidates = [word.upper() for word in word_list if self.validator.validate_format(word).valid]
        if not candidates:
            return DEFAULT_SECRET
        return random.choice(candidates)

    def new_game(self, word_list: Optional[Iterable[str]] = None) -> GameSession:
        """
        Start a new session, discarding any session in progress.

        Args:
            word_list: Optional candidate secrets. The dictionary is used when omitted.

        Returns:
            GameSession: The new session
        """
        previous = self.state.current_game
        if previous is not None and not previous.is_over:
            game_logger.log_game_event(previous.id, 'game_abandoned', guesses_used=len(previous.guesses))

        session = GameSession(secret_word=self._select_secret(word_list), max_guesses=self.max_guesses)
        self.state.current_game = session
        self._save()

        game_logger.log_game_event(session.id, 'game_started', max_guesses=session.max_guesses)
        return session

    def add_letter(self, letter: str) -> bool:
        changed = self._require_game().add_letter(letter)
        if changed:
            self._save()
        return changed

    def remove_letter(self) -> bool:
        changed = self._require_game().remove_letter()
        if changed:
            self._save()
        return changed

    def type_word(self, word: str) -> None:
        """
        Replace the partial guess with the letters of word.

        Raises:
            InvalidStateError: If there is no game or the game is over
            ValueError: If word is longer than a guess or contains non-letters
        """
        game = self._require_game()
        if game.is_over:
            raise InvalidStateError(f"Game {game.id} is already over ({game.status.value})")
        if len(word) > game.word_length or not all(char.upper() in ALPHABET for char in word):
            raise ValueError(f"Cannot type {word!r}: expected up to {game.word_length} letters A-Z")
        game.clear_input()
        for letter in word:
            game.add_letter(letter)
        self._save()

    def submit_word(self, word: str) -> GuessOutcome:
        """
        Submit a whole word in one call.

        The word is format-checked as given; a malformed word is rejected
        with its format reason and the partial guess is cleared.

        Raises:
            InvalidStateError: If there is no game or the game is over
        """
        game = self._require_game()
        if game.is_over:
            raise InvalidStateError(f"Game {game.id} is already over ({game.status.value})")

        format_result = self.validator.validate_format(word)
        if not format_result.valid:
            game.clear_input()
            self._save()
            return GuessOutcome(
                accepted=False, word=format_result.word, reason=format_result.reason,
                status=game.status, message=format_result.message
            )

        self.type_word(format_result.word)
        return self.submit_guess()

    def submit_guess(self) -> GuessOutcome:
        """
        Validate and submit the partial guess.

        A word rejected by the dictionary clears the partial guess so the
        player can retype it. An incomplete word is kept.

        Raises:
            InvalidStateError: If there is no game or the game is over
        """
        game = self._require_game()
        if game.is_over:
            raise InvalidStateError(f"Game {game.id} is already over ({game.status.value})")

        # An unfinished word is kept so the player can complete it
        if len(game.current_input) != game.word_length:
            reason = RejectionReason.EMPTY_INPUT if not game.current_input else RejectionReason.WRONG_LENGTH
            return GuessOutcome(
                accepted=False, word=game.current_input or None, reason=reason,
                status=game.status, message=reason.describe(game.word_length)
            )

        validation = self.validator.validate_word(game.current_input)
        # The secret is always guessable, even when it came from a custom word list
        is_secret = validation.word == game.secret_word
        if not validation.valid and not is_secret:
            game.clear_input()
            self._save()
            return GuessOutcome(
                accepted=False, word=validation.word, reason=validation.reason,
                status=game.status, message=validation.message
            )

        word = validation.word
        game.submit_guess()
        last_guess = game.guesses[-1]

        unlocked: List[Achievement] = []
        if game.is_over:
            unlocked = self._finish(game)

        self._save()
        game_logger.log_game_event(
            game.id, 'guess_submitted',
            guess=word, pattern=pattern_key(list(last_guess.result)), round=len(game.guesses)
        )

        return GuessOutcome(
            accepted=True,
            word=word,
            result=list(last_guess.result),
            status=game.status,
            unlocked=unlocked
        )

    def _finish(self, game: GameSession) -> List[Achievement]:
        unlocked = self.stats_engine.finalize(game)

        event = 'game_won' if game.status is GameStatus.WON else 'game_lost'
        game_logger.log_game_event(
            game.id, event,
            rounds_used=len(game.guesses), target_word=game.secret_word,
            duration_seconds=round(game.duration, 1)
        )
        for achievement in unlocked:
            game_logger.log_game_event(game.id, 'achievement_unlocked', achievement_id=achievement.id)
        return unlocked

    def get_game_state(self) -> Optional[Dict]:
        if self.state.current_game is None:
            return None
        return self.state.current_game.to_dict()

    def get_hint(self) -> Optional[Hint]:
        """
        Reveal the first secret letter not yet tried on the keyboard.

        Returns:
            Optional[Hint]: None when the game is over or no hint is left

        Raises:
            InvalidStateError: If there is no game
        """
        game = self._require_game()
        hint = game.next_hint()
        game_logger.log_game_event(
            game.id, 'hint_requested',
            position=hint.position if hint else None, round=len(game.guesses)
        )
        return hint

    def get_statistics(self) -> Dict:
        return self.stats_engine.get_snapshot()

    def get_achievements(self) -> List[Achievement]:
        return self.stats_engine.get_achievements()

    def get_history(self, limit: int = 10) -> List[HistoryRecord]:
        return self.stats_engine.get_history(limit)

    def get_settings(self) -> Settings:
        return replace(self.state.settings)

    def update_settings(self, new_settings: Dict) -> Settings:
        """
        Merge new_settings into the stored settings.

        Raises:
            ValueError: If a key is not a known setting or a value is not a bool
        """
        known = Settings.field_names()
        unknown = sorted(set(new_settings) - set(known))
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        for key, value in new_settings.items():
            if not isinstance(value, bool):
                raise ValueError(f"Setting '{key}' must be true or false")

        for key, value in new_settings.items():
            setattr(self.state.settings, key, value)
        self._save()
        return self.get_settings()

    def validate_word(self, word: str) -> ValidationResult:
        return self.validator.validate_word(word)

    def get_suggestions(self, partial_word: str, limit: int = 5) -> List[str]:
        return self.validator.get_suggestions(partial_word, limit)

    def add_words(self, words: Iterable[str]) -> BatchResult:
        return self.validator.add_many(words)

    def remove_word(self, word: str) -> ValidationResult:
        return self.validator.remove(word)

    def reset_dictionary(self) -> None:
        self.validator.reset()

    def export_words(self) -> List[str]:
        return self.validator.export()

    def import_words(self, words: Iterable[str]) -> BatchResult:
        return self.validator.import_words(words)

    def cleanup_old_data(self, days_to_keep: int = 30) -> int:
        removed = self.stats_engine.cleanup_old_data(days_to_keep)
        if removed:
            self._save()
        return removed

    def reset_statistics(self) -> None:
        self.stats_engine.reset()
        self._save()

    def reset_all(self) -> None:
        """Forget the current game, statistics, history, achievements and settings."""
        self.state = PersistedState()
        self.stats_engine.bind(self.state)
        self._save()

    def export_state(self) -> str:
        return self.gateway.export_state(self.state)

    def import_state(self, serialized_state: str) -> bool:
        state = self.gateway.import_state(serialized_state)
        if state is None:
            return False
        self.state = state
        self.stats_engine.bind(self.state)
        return True


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(validator: Optional[WordValidator] = None,
                            gateway: Optional[PersistenceGateway] = None,
                            max_guesses: int = MAX_GUESSES) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(validator=validator, gateway=gateway, max_guesses=max_guesses)
    return _game_service
