"""
Base Handler Classes

This module provides the base class for Socket.IO handlers with common
patterns for service access, validation and response formatting.
"""

import logging
from typing import Any, Dict, Optional

from flask import request
from flask_socketio import emit, join_room, leave_room

from container import get_container
from charades.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class BaseHandler:
    """
    Base class for all Socket.IO handlers.

    Services are resolved lazily from the global container so handlers can
    be created before the container is fully wired.
    """

    def __init__(self, container=None):
        self._container = container or get_container()

    @property
    def session_manager(self):
        return self._container.get('SessionManager')

    @property
    def deck_manager(self):
        return self._container.get('DeckManager')

    @property
    def history_service(self):
        return self._container.get('HistoryService')

    @property
    def validation_service(self):
        return self._container.get('ValidationService')

    @property
    def error_response_factory(self):
        return self._container.get('ErrorResponseFactory')

    @property
    def broadcast_service(self):
        return self._container.get('BroadcastService')

    @property
    def turn_clock(self):
        return self._container.get('TurnClockService')

    def validate_data_dict(self, data: Any, required_fields: Optional[list] = None) -> Dict[str, Any]:
        """
        Validate that data is a dictionary and contains required fields.

        Raises:
            ValidationError: If validation fails
        """
        return self.validation_service.validate_request_data(data, required_fields)

    def require_session_id(self, data: Any) -> str:
        """
        Extract and validate the session id carried by every game event.

        Raises:
            ValidationError: If the id is missing, malformed or unknown
        """
        validated = self.validate_data_dict(data, ['session_id'])
        session_id = self.validation_service.validate_session_id(validated['session_id'])
        if not self.session_manager.session_exists(session_id):
            raise ValidationError(
                ErrorCode.SESSION_NOT_FOUND,
                f'Session {session_id} not found',
                {'session_id': session_id}
            )
        return session_id

    def current_socket_id(self) -> str:
        return request.sid  # type: ignore[attr-defined]

    def emit_success(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Emit a success response to the requesting client."""
        response = self.error_response_factory.create_success_response(data or {})
        emit(event_name, response)

    def join_session_room(self, session_id: str) -> None:
        """Subscribe the requesting client to a session's broadcasts."""
        join_room(session_id)
        logger.debug(f'Client {request.sid} joined session room: {session_id}')  # type: ignore[attr-defined]

    def leave_session_room(self, session_id: str) -> None:
        leave_room(session_id)
        logger.debug(f'Client {request.sid} left session room: {session_id}')  # type: ignore[attr-defined]

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        logger.info(f'{handler_name} called by client: {request.sid}')  # type: ignore[attr-defined]
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        log_msg = f'{handler_name} completed successfully for client: {request.sid}'  # type: ignore[attr-defined]
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)
