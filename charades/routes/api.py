"""
REST API endpoints for the Charades application.
"""

import logging

from flask import Blueprint, jsonify, request

from charades.core.errors import ErrorCode

logger = logging.getLogger(__name__)

MAX_RECENT_GAMES = 100


def create_api_blueprint(services):
    """Create and configure the API Blueprint with service dependencies."""
    deck_manager = services['deck_manager']
    history_service = services['history_service']
    session_manager = services['session_manager']
    presenter = services['session_state_presenter']
    error_response_factory = services['error_response_factory']

    api = Blueprint('api', __name__)

    def error(code: ErrorCode, message: str, status: int, details=None):
        return jsonify(error_response_factory.create_error_response(code, message, details)), status

    @api.route('/api/decks')
    def list_decks():
        """List available decks without their words."""
        if not deck_manager.is_loaded():
            return error(ErrorCode.SERVICE_UNAVAILABLE, 'No word decks are loaded', 503)
        return jsonify({'decks': [deck.to_dict() for deck in deck_manager.list_decks()]})

    @api.route('/api/decks/<deck_id>')
    def get_deck(deck_id):
        if not deck_manager.is_loaded():
            return error(ErrorCode.SERVICE_UNAVAILABLE, 'No word decks are loaded', 503)
        deck = deck_manager.get_deck(deck_id)
        if deck is None:
            return error(ErrorCode.DECK_NOT_FOUND, f'Deck {deck_id} not found', 404, {'deck_id': deck_id})
        return jsonify(deck.to_dict(include_words=True))

    @api.route('/api/statistics')
    def statistics():
        return jsonify(history_service.get_statistics())

    @api.route('/api/games/recent')
    def recent_games():
        """Most recent finished games, newest first."""
        limit = request.args.get('limit', type=int)
        if limit is not None and (limit < 1 or limit > MAX_RECENT_GAMES):
            return error(
                ErrorCode.INVALID_DATA,
                f'limit must be between 1 and {MAX_RECENT_GAMES}',
                400,
                {'limit': limit}
            )
        return jsonify({'games': history_service.get_recent_games(limit)})

    @api.route('/api/sessions/<session_id>')
    def session_state(session_id):
        session = session_manager.get_session(session_id.lower())
        if session is None:
            return error(ErrorCode.SESSION_NOT_FOUND, f'Session {session_id} not found', 404,
                         {'session_id': session_id})
        return jsonify(presenter.create_session_state(session))

    return api
