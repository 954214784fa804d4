"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, request, jsonify

from ..utils.decorators import require_game_service, handle_game_errors
from ..utils.game_logger import game_logger
from ..utils.helpers import get_json_body, parse_limit

game_bp = Blueprint('game', __name__)


@game_bp.route('/new_game', methods=['POST'])
@require_game_service
@handle_game_errors('new_game')
def new_game(game_service):
    """Start a new game, optionally drawing the secret from a supplied word list."""
    data = get_json_body()
    word_list = data.get('word_list')
    if word_list is not None and not isinstance(word_list, list):
        raise ValueError('word_list must be an array of words')

    game_logger.log_user_action(
        request, 'new_game',
        custom_word_list=word_list is not None
    )

    session = game_service.new_game(word_list)

    response_data = {
        'success': True,
        'game_id': session.id,
        'state': session.to_dict()
    }

    game_logger.log_server_response(
        request, 'new_game', True, response_data, session.id,
        word_length=session.word_length, max_guesses=session.max_guesses
    )
    return jsonify(response_data)


@game_bp.route('/game/state', methods=['GET'])
@require_game_service
@handle_game_errors('get_state')
def get_state(game_service):
    """Get current game state."""
    game_logger.log_user_action(request, 'get_state')

    state = game_service.get_game_state()
    if state is None:
        error_response = {
            'success': False,
            'error': 'No active game'
        }
        game_logger.log_server_response(request, 'get_state', False, error_response)
        return jsonify(error_response), 404

    response_data = {
        'success': True,
        'state': state
    }
    game_logger.log_server_response(
        request, 'get_state', True, response_data, state['game_id'],
        game_over=state['game_over']
    )
    return jsonify(response_data)


@game_bp.route('/game/letter', methods=['POST'])
@require_game_service
@handle_game_errors('add_letter')
def add_letter(game_service):
    """Append one letter to the partial guess."""
    data = get_json_body()
    letter = data.get('letter')
    if not isinstance(letter, str):
        raise ValueError('Letter is required')

    changed = game_service.add_letter(letter)
    return jsonify({
        'success': True,
        'changed': changed,
        'state': game_service.get_game_state()
    })


@game_bp.route('/game/letter', methods=['DELETE'])
@require_game_service
@handle_game_errors('remove_letter')
def remove_letter(game_service):
    """Drop the last letter of the partial guess."""
    changed = game_service.remove_letter()
    return jsonify({
        'success': True,
        'changed': changed,
        'state': game_service.get_game_state()
    })


@game_bp.route('/game/guess', methods=['POST'])
@require_game_service
@handle_game_errors('submit_guess')
def submit_guess(game_service):
    """
    Submit the partial guess for validation and evaluation.

    A `guess` field in the body replaces the partial guess before submitting.
    """
    data = get_json_body()
    guess = data.get('guess')
    if guess is not None and not isinstance(guess, str):
        raise ValueError('Guess must be a string')

    game = game_service.current_game
    game_id = game.id if game else None

    game_logger.log_user_action(
        request, 'submit_guess', game_id,
        guess=guess, guess_length=len(guess) if guess else None
    )

    if guess is not None:
        outcome = game_service.submit_word(guess)
    else:
        outcome = game_service.submit_guess()

    if not outcome.accepted:
        error_response = {
            'success': False,
            'error': outcome.message,
            'reason': outcome.reason.name,
            'state': game_service.get_game_state()
        }
        game_logger.log_server_response(
            request, 'submit_guess', False, error_response, game_id,
            validation_error=outcome.reason.name, attempted_guess=outcome.word
        )
        return jsonify(error_response), 400

    response_data = {
        'success': True,
        'outcome': outcome.to_dict(),
        'state': game_service.get_game_state()
    }
    game_logger.log_server_response(
        request, 'submit_guess', True, response_data, game_id,
        guess=outcome.word, status=outcome.status.value
    )
    return jsonify(response_data)


@game_bp.route('/game/hint', methods=['GET'])
@require_game_service
@handle_game_errors('get_hint')
def get_hint(game_service):
    """Reveal one letter of the secret that has not been tried yet."""
    game_logger.log_user_action(request, 'get_hint')

    hint = game_service.get_hint()
    response_data = {
        'success': True,
        'hint': hint.to_dict() if hint else None
    }
    if hint is None:
        response_data['message'] = 'No more hints available'

    game_logger.log_server_response(request, 'get_hint', True, response_data)
    return jsonify(response_data)


@game_bp.route('/statistics', methods=['GET'])
@require_game_service
@handle_game_errors('get_statistics')
def get_statistics(game_service):
    """Statistics with derived win percentage and average guesses."""
    return jsonify({
        'success': True,
        'statistics': game_service.get_statistics()
    })


@game_bp.route('/achievements', methods=['GET'])
@require_game_service
@handle_game_errors('get_achievements')
def get_achievements(game_service):
    return jsonify({
        'success': True,
        'achievements': [asdict(achievement) for achievement in game_service.get_achievements()]
    })


@game_bp.route('/history', methods=['GET'])
@require_game_service
@handle_game_errors('get_history')
def get_history(game_service):
    limit = parse_limit(request.args.get('limit'), default=10)
    return jsonify({
        'success': True,
        'history': [asdict(record) for record in game_service.get_history(limit)]
    })


@game_bp.route('/settings', methods=['GET'])
@require_game_service
@handle_game_errors('get_settings')
def get_settings(game_service):
    return jsonify({
        'success': True,
        'settings': asdict(game_service.get_settings())
    })


@game_bp.route('/settings', methods=['PUT'])
@require_game_service
@handle_game_errors('update_settings')
def update_settings(game_service):
    data = get_json_body()
    game_logger.log_user_action(request, 'update_settings', changed=sorted(data))

    settings = game_service.update_settings(data)
    response_data = {
        'success': True,
        'settings': asdict(settings)
    }
    game_logger.log_server_response(request, 'update_settings', True, response_data)
    return jsonify(response_data)


@game_bp.route('/reset', methods=['POST'])
@require_game_service
@handle_game_errors('reset')
def reset(game_service):
    """Reset statistics only (`scope: statistics`) or everything (default)."""
    scope = get_json_body().get('scope', 'all')
    if scope not in ('all', 'statistics'):
        raise ValueError('Invalid scope. Must be "all" or "statistics"')

    game_logger.log_user_action(request, 'reset', scope=scope)

    if scope == 'statistics':
        game_service.reset_statistics()
    else:
        game_service.reset_all()

    response_data = {
        'success': True,
        'scope': scope,
        'statistics': game_service.get_statistics()
    }
    game_logger.log_server_response(request, 'reset', True, response_data)
    return jsonify(response_data)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    from ..services.game_service import get_game_service

    game_service = get_game_service()
    game = game_service.current_game if game_service else None

    response_data = {
        'status': 'healthy' if game_service else 'degraded',
        'game_service': game_service is not None,
        'active_game': game is not None and not game.is_over,
        'dictionary_size': len(game_service.validator) if game_service else 0,
        'log_stats': game_logger.get_log_stats()
    }

    game_logger.log_server_response(request, 'health_check', True, response_data)
    return jsonify(response_data)
