"""
Broadcast Service - Centralized Socket.IO message broadcasting.

Every session has a Socket.IO room named after its session id; all state
changes are pushed to that room.
"""

import logging
from typing import Any, Dict, Optional

from charades.core.errors import ErrorCode
from charades.game_session import GameSession
from charades.models import GameSummary
from charades.services.session_state_presenter import SessionStatePresenter

logger = logging.getLogger(__name__)


class BroadcastService:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, session_manager, error_response_factory,
                 presenter: Optional[SessionStatePresenter] = None):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            session_manager: Source of live sessions
            error_response_factory: Builds error payloads
            presenter: Payload builder (a default one is created when omitted)
        """
        self.socketio = socketio
        self.session_manager = session_manager
        self.error_response_factory = error_response_factory
        self.presenter = presenter or SessionStatePresenter()

    # Core emission methods

    def emit_to_room(self, event: str, data: Dict[str, Any], session_id: str):
        """Emit an event to every client in a session."""
        try:
            self.socketio.emit(event, data, room=session_id)
            logger.debug(f'Emitted {event} to session {session_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to session {session_id}: {e}')

    def emit_to_player(self, event: str, data: Dict[str, Any], socket_id: str):
        try:
            self.socketio.emit(event, data, room=socket_id)
            logger.debug(f'Emitted {event} to client {socket_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to client {socket_id}: {e}')

    def emit_error_to_player(self, error_response: Dict[str, Any], socket_id: str):
        self.emit_to_player('error', error_response, socket_id)

    # High-level broadcast methods

    def broadcast_session_state(self, session_id: str):
        """Broadcast the current session state to every client in the session."""
        session = self.session_manager.get_session(session_id)
        if session is None:
            return
        self.emit_to_room('session_state', self.presenter.create_session_state(session), session_id)

    def send_session_state_to_player(self, session_id: str, socket_id: str):
        """Send the session state to a single client (initial join)."""
        session = self.session_manager.get_session(session_id)
        if session is None:
            error_response = self.error_response_factory.create_error_response(
                ErrorCode.SESSION_NOT_FOUND,
                f'Session {session_id} not found',
                {'session_id': session_id}
            )
            self.emit_error_to_player(error_response, socket_id)
            return
        self.emit_to_player('session_state', self.presenter.create_session_state(session), socket_id)

    def broadcast_timer_tick(self, session: GameSession):
        self.emit_to_room('timer_tick', self.presenter.create_timer_tick(session), session.session_id)

    def broadcast_turn_ended(self, session: GameSession):
        """Broadcast the end of a turn together with its review list."""
        self.emit_to_room('turn_ended', self.presenter.create_turn_ended(session), session.session_id)
        logger.debug(f'Broadcasted turn end to session {session.session_id}')

    def broadcast_game_ended(self, session_id: str, summary: GameSummary):
        self.emit_to_room('game_ended', self.presenter.create_game_summary(summary, session_id), session_id)
