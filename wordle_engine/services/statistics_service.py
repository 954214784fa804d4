"""
Statistics Service

Cross-session aggregates: totals, streaks, the guess-count histogram,
the finished-game history and achievement unlocking.
"""

import time
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from ..models.game import GameSession, GameStatus, InvalidStateError
from ..models.stats import Achievement, HistoryRecord, PersistedState, StatisticsSnapshot


@dataclass(frozen=True)
class AchievementRule:
    """Static description of an achievement and the predicate that unlocks it."""
    id: str
    name: str
    description: str
    icon: str
    predicate: Callable[[StatisticsSnapshot, GameSession], bool]

    def unlock(self, timestamp: float) -> Achievement:
        return Achievement(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            unlocked_at=timestamp
        )


ACHIEVEMENT_RULES: List[AchievementRule] = [
    AchievementRule(
        id='first_win',
        name='First Win',
        description='Win your first game',
        icon='🎉',
        predicate=lambda stats, game: stats.games_won >= 1
    ),
    AchievementRule(
        id='streak_master',
        name='Streak Master',
        description='Win 5 games in a row',
        icon='🔥',
        predicate=lambda stats, game: stats.current_streak >= 5
    ),
    AchievementRule(
        id='perfect_game',
        name='Perfect Game',
        description='Guess the word on the first try',
        icon='💯',
        predicate=lambda stats, game: game.status is GameStatus.WON and len(game.guesses) == 1
    ),
    AchievementRule(
        id='word_master',
        name='Word Master',
        description='Play 10 games',
        icon='📚',
        predicate=lambda stats, game: stats.games_played >= 10
    ),
]


class StatisticsEngine:
    """
    Updates the statistics, history and achievements held by a PersistedState.

    The engine does not own the state: it works on whichever root object it
    is bound to, so a reload or reset only needs a bind() call.
    """

    def __init__(self, state: Optional[PersistedState] = None,
                 rules: Optional[List[AchievementRule]] = None,
                 clock: Callable[[], float] = time.time):
        self.state = state if state is not None else PersistedState()
        self.rules = rules if rules is not None else ACHIEVEMENT_RULES
        self.clock = clock

    def bind(self, state: PersistedState) -> None:
        self.state = state

    @property
    def statistics(self) -> StatisticsSnapshot:
        return self.state.statistics

    def is_recorded(self, game_id: str) -> bool:
        return game_id in self.state.recorded_games

    def finalize(self, session: GameSession) -> List[Achievement]:
        """
        Fold a finished session into the aggregates.

        Args:
            session: A session in a terminal status

        Returns:
            List[Achievement]: Achievements unlocked by this game

        Raises:
            InvalidStateError: If the session is still playing or was already recorded
        """
        if not session.is_over:
            raise InvalidStateError(f"Game {session.id} is still in progress")
        if self.is_recorded(session.id):
            raise InvalidStateError(f"Game {session.id} has already been recorded")

        now = self.clock()
        stats = self.state.statistics
        stats.games_played += 1

        guess_count = len(session.guesses)
        if session.status is GameStatus.WON:
            stats.games_won += 1
            stats.current_streak += 1
            stats.max_streak = max(stats.max_streak, stats.current_streak)
            if 1 <= guess_count <= len(stats.guess_distribution):
                stats.guess_distribution[guess_count - 1] += 1
        else:
            stats.current_streak = 0

        completed_at = session.ended_at if session.ended_at is not None else now
        self.state.history.insert(0, HistoryRecord(
            id=session.id,
            secret_word=session.secret_word,
            status=session.status.value,
            guess_count=guess_count,
            duration=round(completed_at - session.started_at, 3),
            date=datetime.fromtimestamp(completed_at).date().isoformat(),
            completed_at=completed_at
        ))
        self.state.recorded_games.append(session.id)

        unlocked = self._check_achievements(session, now)
        self.state.last_played = now
        return unlocked

    def _check_achievements(self, session: GameSession, timestamp: float) -> List[Achievement]:
        owned = self.state.achievements_by_id
        unlocked = []
        for rule in self.rules:
            if rule.id in owned:
                continue
            if rule.predicate(self.state.statistics, session):
                achievement = rule.unlock(timestamp)
                self.state.achievements.append(achievement)
                unlocked.append(achievement)
        return unlocked

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self.state.achievements_by_id

    def get_achievements(self) -> List[Achievement]:
        return list(self.state.achievements)

    def get_history(self, limit: int = 10) -> List[HistoryRecord]:
        return self.state.history[:limit]

    def average_guesses(self) -> float:
        """Mean guess count over won games still present in history."""
        won_games = [record for record in self.state.history if record.status == GameStatus.WON.value]
        if not won_games:
            return 0
        total_guesses = sum(record.guess_count for record in won_games)
        return round(total_guesses / len(won_games), 1)

    def get_snapshot(self) -> Dict:
        """Stored counters plus the derived win percentage and average."""
        stats = self.state.statistics
        snapshot = asdict(stats)
        snapshot['win_percentage'] = (
            round(stats.games_won / stats.games_played * 100) if stats.games_played > 0 else 0
        )
        snapshot['average_guesses'] = self.average_guesses()
        return snapshot

    def cleanup_old_data(self, days_to_keep: int = 30) -> int:
        """
        Drop history records completed before the cutoff.

        Returns:
            int: Number of records removed
        """
        cutoff = self.clock() - timedelta(days=days_to_keep).total_seconds()
        kept = [record for record in self.state.history if record.completed_at > cutoff]
        removed = len(self.state.history) - len(kept)
        self.state.history = kept
        return removed

    def reset(self) -> None:
        """Zero the counters and forget achievements. History is kept."""
        self.state.statistics = StatisticsSnapshot()
        self.state.achievements = []
