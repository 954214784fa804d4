"""
Dictionary Controller

Handles word validation, suggestions and dictionary maintenance endpoints.
"""

from flask import Blueprint, request, jsonify

from ..utils.decorators import require_game_service, handle_game_errors
from ..utils.game_logger import game_logger
from ..utils.helpers import get_json_body, parse_limit

dictionary_bp = Blueprint('dictionary', __name__)


def _word_array(data, field_name='words'):
    words = data.get(field_name)
    if not isinstance(words, list):
        raise ValueError(f'{field_name} must be an array of words')
    return words


@dictionary_bp.route('/dictionary/validate/<word>', methods=['GET'])
@require_game_service
@handle_game_errors('validate_word')
def validate_word(word, game_service):
    result = game_service.validate_word(word)
    return jsonify({
        'success': True,
        'validation': result.to_dict()
    })


@dictionary_bp.route('/dictionary/suggestions', methods=['GET'])
@require_game_service
@handle_game_errors('get_suggestions')
def get_suggestions(game_service):
    prefix = request.args.get('prefix', '')
    limit = parse_limit(request.args.get('limit'), default=5, maximum=50)
    return jsonify({
        'success': True,
        'suggestions': game_service.get_suggestions(prefix, limit)
    })


@dictionary_bp.route('/dictionary/words', methods=['POST'])
@require_game_service
@handle_game_errors('add_words')
def add_words(game_service):
    words = _word_array(get_json_body())
    game_logger.log_user_action(request, 'add_words', count=len(words))

    batch = game_service.add_words(words)
    response_data = {
        'success': batch.failed == 0,
        **batch.to_dict()
    }
    game_logger.log_server_response(request, 'add_words', True, response_data)
    return jsonify(response_data)


@dictionary_bp.route('/dictionary/words/<word>', methods=['DELETE'])
@require_game_service
@handle_game_errors('remove_word')
def remove_word(word, game_service):
    game_logger.log_user_action(request, 'remove_word', word=word)

    result = game_service.remove_word(word)
    if not result.valid:
        error_response = {
            'success': False,
            'error': result.message,
            'reason': result.reason.name
        }
        game_logger.log_server_response(request, 'remove_word', False, error_response)
        status_code = 404 if result.reason.name == 'NOT_FOUND' else 400
        return jsonify(error_response), status_code

    return jsonify({'success': True, 'word': result.word})


@dictionary_bp.route('/dictionary/reset', methods=['POST'])
@require_game_service
@handle_game_errors('reset_dictionary')
def reset_dictionary(game_service):
    game_logger.log_user_action(request, 'reset_dictionary')
    game_service.reset_dictionary()
    return jsonify({'success': True, 'total_words': len(game_service.validator)})


@dictionary_bp.route('/dictionary/export', methods=['GET'])
@require_game_service
@handle_game_errors('export_words')
def export_words(game_service):
    return jsonify({'success': True, 'words': game_service.export_words()})


@dictionary_bp.route('/dictionary/import', methods=['PUT'])
@require_game_service
@handle_game_errors('import_words')
def import_words(game_service):
    words = _word_array(get_json_body())
    game_logger.log_user_action(request, 'import_words', count=len(words))

    batch = game_service.import_words(words)
    response_data = {
        'success': batch.successful > 0,
        **batch.to_dict()
    }
    game_logger.log_server_response(request, 'import_words', response_data['success'], response_data)
    return jsonify(response_data)


@dictionary_bp.route('/dictionary/stats', methods=['GET'])
@require_game_service
@handle_game_errors('dictionary_stats')
def dictionary_stats(game_service):
    return jsonify({'success': True, 'stats': game_service.validator.get_stats()})
