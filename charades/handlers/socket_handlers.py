"""
Socket.IO event handlers for the Charades game.

Provides the registration function and the connection/disconnection
handlers.
"""

import logging

from flask import request
from flask_socketio import emit

from .game_action_handler import GameActionHandler
from .session_handler import SessionHandler

logger = logging.getLogger(__name__)


def build_routes(session_handler: SessionHandler, game_handler: GameActionHandler):
    """Map Socket.IO event names to handler methods."""
    return {
        # Session membership and setup
        'create_session': session_handler.handle_create_session,
        'join_session': session_handler.handle_join_session,
        'leave_session': session_handler.handle_leave_session,
        'get_session_state': session_handler.handle_get_session_state,
        'add_player': session_handler.handle_add_player,
        'remove_player': session_handler.handle_remove_player,
        'move_player': session_handler.handle_move_player,
        'prefill_players': session_handler.handle_prefill_players,

        # Game flow
        'start_game': game_handler.handle_start_game,
        'start_timer': game_handler.handle_start_timer,
        'stop_timer': game_handler.handle_stop_timer,
        'mark_correct': game_handler.handle_mark_correct,
        'mark_incorrect': game_handler.handle_mark_incorrect,
        'end_turn': game_handler.handle_end_turn,
        'toggle_review': game_handler.handle_toggle_review,
        'commit_review': game_handler.handle_commit_review,
        'advance_turn': game_handler.handle_advance_turn,
        'end_round': game_handler.handle_end_round,
        'end_game': game_handler.handle_end_game,
        'reset_game': game_handler.handle_reset_game,
    }


def register_socket_handlers(socketio_instance, container=None):
    """Register all socket handlers with the SocketIO instance."""
    session_handler = SessionHandler(container)
    game_handler = GameActionHandler(container)

    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    routes = build_routes(session_handler, game_handler)
    for event_name, handler in routes.items():
        socketio_instance.on_event(event_name, handler)

    logger.info(f"Registered {len(routes)} socket event handlers")
    return routes


def handle_connect(auth=None):
    logger.info(f'Client connected: {request.sid}')  # type: ignore[attr-defined]
    emit('connected', {'status': 'Connected to Charades server'})


def handle_disconnect(reason=None):
    # Sessions outlive connections; a shared device may reconnect at any time.
    logger.info(f'Client disconnected: {request.sid}')  # type: ignore[attr-defined]
