"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameSession, GameStatus, Guess, Hint, InvalidStateError, LetterState
from .stats import Achievement, HistoryRecord, PersistedState, Settings, StatisticsSnapshot

__all__ = [
    'GameSession', 'GameStatus', 'Guess', 'Hint', 'InvalidStateError', 'LetterState',
    'Achievement', 'HistoryRecord', 'PersistedState', 'Settings', 'StatisticsSnapshot'
]
