"""
Endpoint Decorators

Contains decorators shared by the HTTP controllers.
"""

from functools import wraps
from flask import request, jsonify

from .game_logger import game_logger


def require_game_service(f):
    """
    Decorator that resolves the game service and passes it as `game_service`.
    Responds with 500 when the service has not been initialized.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        kwargs['game_service'] = game_service
        return f(*args, **kwargs)

    return decorated_function


def handle_game_errors(action: str):
    """
    Decorator mapping engine exceptions to JSON error responses.

    InvalidStateError -> 409, ValueError -> 400, anything else -> 500.
    Every failure is logged with the action name.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            from ..models.game import InvalidStateError

            try:
                return f(*args, **kwargs)
            except InvalidStateError as e:
                status_code = 409
                error = e
            except ValueError as e:
                status_code = 400
                error = e
            except Exception as e:
                status_code = 500
                error = e

            game_logger.log_error(request, error, action)
            error_response = {
                'success': False,
                'error': str(error)
            }
            game_logger.log_server_response(request, action, False, error_response)
            return jsonify(error_response), status_code

        return decorated_function
    return decorator
