"""
Services Package

Contains all business logic and service classes.
"""

from .evaluator import evaluate
from .word_validator import WordValidator, ValidationResult, BatchResult, RejectionReason
from .statistics_service import StatisticsEngine, ACHIEVEMENT_RULES
from .persistence import PersistenceGateway, MemoryStorage, FileStorage, MongoStorage, build_storage
from .game_service import GameService, GuessOutcome, get_game_service, initialize_game_service

__all__ = [
    'evaluate',
    'WordValidator', 'ValidationResult', 'BatchResult', 'RejectionReason',
    'StatisticsEngine', 'ACHIEVEMENT_RULES',
    'PersistenceGateway', 'MemoryStorage', 'FileStorage', 'MongoStorage', 'build_storage',
    'GameService', 'GuessOutcome', 'get_game_service', 'initialize_game_service'
]
