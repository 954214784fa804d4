"""
Statistics Data Models

Contains the cross-session aggregates, history records, achievements,
player settings and the persisted root object.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

from ..config.game_settings import MAX_GUESSES
from .game import GameSession


def _empty_distribution() -> List[int]:
    return [0] * MAX_GUESSES


@dataclass
class StatisticsSnapshot:
    """Running totals. Only StatisticsEngine.finalize mutates these."""
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    guess_distribution: List[int] = field(default_factory=_empty_distribution)


@dataclass
class HistoryRecord:
    """Compact record of a finished game."""
    id: str
    secret_word: str
    status: str
    guess_count: int
    duration: float
    date: str
    completed_at: float


@dataclass
class Achievement:
    """An unlocked achievement. unlocked_at stays set once assigned."""
    id: str
    name: str
    description: str
    icon: str = ""
    unlocked_at: Optional[float] = None


@dataclass
class Settings:
    """Player preferences. Stored and returned, not interpreted by the engine."""
    hard_mode: bool = False
    dark_theme: bool = False
    colorblind_mode: bool = False
    animations: bool = True

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass
class PersistedState:
    """The single root object round-tripped through the storage medium."""
    current_game: Optional[GameSession] = None
    statistics: StatisticsSnapshot = field(default_factory=StatisticsSnapshot)
    history: List[HistoryRecord] = field(default_factory=list)
    achievements: List[Achievement] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    last_played: Optional[float] = None
    # Ids of every session folded into the statistics; outlives history pruning
    recorded_games: List[str] = field(default_factory=list)

    @property
    def achievements_by_id(self) -> Dict[str, Achievement]:
        return {achievement.id: achievement for achievement in self.achievements}
