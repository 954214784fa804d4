"""
Persistence Service

Serializes the PersistedState root to a key-value storage medium and back.

Storage backends only need get/set/remove on string keys. Memory, file and
MongoDB backends are provided; anything with the same three methods works.
Saving and loading never raise: failures are logged and the in-memory state
stays authoritative.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..config.game_settings import MAX_GUESSES, WORD_LENGTH
from ..models.game import GameSession, GameStatus, Guess, LetterState
from ..models.stats import Achievement, HistoryRecord, PersistedState, Settings, StatisticsSnapshot
from ..utils.game_logger import game_logger
from .statistics_service import ACHIEVEMENT_RULES

DEFAULT_STATE_KEY = 'wordleGameState'
REQUIRED_KEYS = ('statistics', 'settings', 'achievements')
TYPE_TAG = '__type__'


class MemoryStorage:
    """Dictionary-backed storage, mostly for tests and throwaway sessions."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """One JSON file per key inside a directory."""

    def __init__(self, directory: str = 'data'):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding='utf-8')

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


class MongoStorage:
    """
    MongoDB collection used as a key-value store.

    Each key is one document: {"_id": key, "value": <serialized string>}.
    """

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_uri(cls, mongo_uri: str, database: str = 'wordle_game',
                 collection: str = 'game_state') -> 'MongoStorage':
        client = MongoClient(mongo_uri, server_api=ServerApi('1'))
        return cls(client[database][collection])

    def get(self, key: str) -> Optional[str]:
        document = self.collection.find_one({"_id": key})
        if document is None:
            return None
        return document.get("value")

    def set(self, key: str, value: str) -> None:
        self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    def remove(self, key: str) -> None:
        self.collection.delete_one({"_id": key})


def build_storage(config_class) -> Any:
    """Create the storage backend named by config_class.STORAGE_BACKEND."""
    backend = getattr(config_class, 'STORAGE_BACKEND', 'memory')
    if backend == 'memory':
        return MemoryStorage()
    if backend == 'file':
        return FileStorage(getattr(config_class, 'STORAGE_DIR', 'data'))
    if backend == 'mongo':
        if not config_class.MONGO_URI:
            raise ValueError("MONGO_URI must be set for the mongo storage backend")
        return MongoStorage.from_uri(config_class.MONGO_URI, config_class.MONGO_DB, config_class.MONGO_COLLECTION)
    raise ValueError(f"Unknown storage backend: {backend}")


# Tagged encodings for the values JSON cannot carry natively

def _encode_map(mapping: Dict[str, str]) -> Dict[str, Any]:
    return {TYPE_TAG: 'Map', 'entries': [[key, value] for key, value in mapping.items()]}


def _encode_set(values: List[str]) -> Dict[str, Any]:
    return {TYPE_TAG: 'Set', 'values': list(values)}


def _decode_tagged(value: Any) -> Any:
    """json.loads object_hook restoring tagged Map and Set values."""
    if isinstance(value, dict) and TYPE_TAG in value:
        if value[TYPE_TAG] == 'Set':
            return list(dict.fromkeys(value.get('values', [])))
        if value[TYPE_TAG] == 'Map':
            return {key: item for key, item in value.get('entries', [])}
    return value


def encode_session(session: GameSession) -> Dict[str, Any]:
    return {
        'id': session.id,
        'secret_word': session.secret_word,
        'guesses': [guess.to_dict() for guess in session.guesses],
        'current_input': session.current_input,
        'status': session.status.value,
        'used_letters': _encode_map({letter: state.value for letter, state in session.used_letters.items()}),
        'started_at': session.started_at,
        'ended_at': session.ended_at,
        'max_guesses': session.max_guesses,
        'word_length': session.word_length
    }


def _expect_dict(value: Any, name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' must be an object, got {type(value).__name__}")
    return value


def decode_session(data: Dict[str, Any]) -> GameSession:
    data = _expect_dict(data, 'current_game')
    used_letters = _expect_dict(data.get('used_letters', {}), 'used_letters')
    return GameSession(
        secret_word=data['secret_word'],
        id=data['id'],
        guesses=[
            Guess(
                word=guess['word'],
                result=tuple(LetterState(value) for value in guess['result']),
                timestamp=guess.get('timestamp', 0.0)
            )
            for guess in data.get('guesses', [])
        ],
        current_input=data.get('current_input', ''),
        status=GameStatus(data['status']),
        used_letters={letter: LetterState(value) for letter, value in used_letters.items()},
        started_at=data['started_at'],
        ended_at=data.get('ended_at'),
        max_guesses=data.get('max_guesses', MAX_GUESSES),
        word_length=data.get('word_length', WORD_LENGTH)
    )


def encode_state(state: PersistedState) -> Dict[str, Any]:
    return {
        'current_game': encode_session(state.current_game) if state.current_game else None,
        'statistics': {
            'games_played': state.statistics.games_played,
            'games_won': state.statistics.games_won,
            'current_streak': state.statistics.current_streak,
            'max_streak': state.statistics.max_streak,
            'guess_distribution': list(state.statistics.guess_distribution)
        },
        'history': [asdict(record) for record in state.history],
        'achievements': _encode_set([achievement.id for achievement in state.achievements]),
        'achievement_unlocks': {achievement.id: achievement.unlocked_at for achievement in state.achievements},
        'settings': asdict(state.settings),
        'last_played': state.last_played,
        'recorded_games': _encode_set(state.recorded_games)
    }


def _decode_achievements(ids: List[str], unlocks: Dict[str, Optional[float]]) -> List[Achievement]:
    catalogue = {rule.id: rule for rule in ACHIEVEMENT_RULES}
    achievements = []
    for achievement_id in ids:
        unlocked_at = unlocks.get(achievement_id)
        rule = catalogue.get(achievement_id)
        if rule is not None:
            achievements.append(rule.unlock(unlocked_at))
        else:
            achievements.append(Achievement(
                id=achievement_id, name=achievement_id, description='', unlocked_at=unlocked_at
            ))
    return achievements


def is_valid_state(data: Any) -> bool:
    """Top-level shape check applied before a decoded record is accepted."""
    return (
        isinstance(data, dict)
        and all(key in data for key in REQUIRED_KEYS)
        and isinstance(data['statistics'], dict)
        and isinstance(data['settings'], dict)
        and isinstance(data['achievements'], list)
        and isinstance(data.get('achievement_unlocks', {}), dict)
        and isinstance(data.get('history', []), list)
        and isinstance(data.get('recorded_games', []), list)
    )


def decode_state(data: Dict[str, Any]) -> PersistedState:
    known_settings = Settings.field_names()
    history = [HistoryRecord(**record) for record in data.get('history', [])]
    # Records written before recorded_games existed fall back to the history ids
    recorded_games = data.get('recorded_games', [record.id for record in history])
    state = PersistedState(
        statistics=StatisticsSnapshot(**data['statistics']),
        history=history,
        achievements=_decode_achievements(data['achievements'], data.get('achievement_unlocks', {})),
        settings=Settings(**{key: value for key, value in data['settings'].items() if key in known_settings}),
        last_played=data.get('last_played'),
        recorded_games=list(recorded_games)
    )

    if data.get('current_game'):
        try:
            state.current_game = decode_session(data['current_game'])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            game_logger.logger.warning(f"Discarding unreadable saved game: {e}")

    return state


class PersistenceGateway:
    """Best-effort save/load of the PersistedState under a single storage key."""

    def __init__(self, storage=None, key: str = DEFAULT_STATE_KEY):
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key

    def serialize(self, state: PersistedState) -> str:
        return json.dumps(encode_state(state), ensure_ascii=False)

    def deserialize(self, serialized_state: str) -> Optional[PersistedState]:
        """Decode a record, returning None when it is corrupt or has the wrong shape."""
        try:
            data = json.loads(serialized_state, object_hook=_decode_tagged)
            if not is_valid_state(data):
                return None
            return decode_state(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            game_logger.log_persistence_error('deserialize', e, key=self.key)
            return None

    def save(self, state: PersistedState) -> bool:
        try:
            self.storage.set(self.key, self.serialize(state))
            return True
        except Exception as e:
            game_logger.log_persistence_error('save', e, key=self.key)
            return False

    def load(self) -> PersistedState:
        """Stored state, or a fresh default when nothing valid is stored."""
        try:
            serialized_state = self.storage.get(self.key)
        except Exception as e:
            game_logger.log_persistence_error('load', e, key=self.key)
            return PersistedState()

        if not serialized_state:
            return PersistedState()

        state = self.deserialize(serialized_state)
        if state is None:
            game_logger.logger.warning(f"Stored state under '{self.key}' is invalid, starting fresh")
            return PersistedState()
        return state

    def clear(self) -> bool:
        try:
            self.storage.remove(self.key)
            return True
        except Exception as e:
            game_logger.log_persistence_error('clear', e, key=self.key)
            return False

    def export_state(self, state: PersistedState) -> str:
        return self.serialize(state)

    def import_state(self, serialized_state: str) -> Optional[PersistedState]:
        """Decode an exported record and store it. None when it is not acceptable."""
        state = self.deserialize(serialized_state)
        if state is not None:
            self.save(state)
        return state
