"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .game_logger import game_logger
from .helpers import get_user_identity, get_json_body, parse_limit
from .decorators import require_game_service, handle_game_errors

__all__ = [
    'game_logger', 'get_user_identity', 'get_json_body', 'parse_limit',
    'require_game_service', 'handle_game_errors'
]
