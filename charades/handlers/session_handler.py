"""
Session Handler

Handles Socket.IO events for creating and joining sessions and for team
setup before a game starts.
"""

import logging

from charades.services.error_response_factory import with_error_handling
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class SessionHandler(BaseHandler):
    """Handler for session membership and roster operations."""

    @with_error_handling
    def handle_create_session(self, data=None):
        """
        Create a session and subscribe the caller to it.

        Expected data format (all optional):
        {
            'session_id': 'living-room',
            'prefill_players': true
        }
        """
        self.log_handler_start('handle_create_session', data)
        data = data if isinstance(data, dict) else {}

        session = self.session_manager.create_session(data.get('session_id'))
        session_id = session.session_id

        prefilled = False
        if data.get('prefill_players'):
            prefilled = self.session_manager.prefill_last_players(session_id)

        self.join_session_room(session_id)
        self.log_handler_success('handle_create_session', f'Created session {session_id}')

        self.emit_success('session_created', {
            'session_id': session_id,
            'prefilled_players': prefilled
        })
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_join_session(self, data=None):
        """Subscribe the caller to an existing session's broadcasts."""
        self.log_handler_start('handle_join_session', data)
        session_id = self.require_session_id(data)

        self.join_session_room(session_id)
        self.emit_success('session_joined', {'session_id': session_id})
        self.broadcast_service.send_session_state_to_player(session_id, self.current_socket_id())

    @with_error_handling
    def handle_leave_session(self, data=None):
        session_id = self.require_session_id(data)
        self.leave_session_room(session_id)
        self.emit_success('session_left', {'session_id': session_id})

    @with_error_handling
    def handle_get_session_state(self, data=None):
        session_id = self.require_session_id(data)
        self.broadcast_service.send_session_state_to_player(session_id, self.current_socket_id())

    @with_error_handling
    def handle_add_player(self, data=None):
        """
        Add a player to a team.

        Expected data format:
        {
            'session_id': 'living-room',
            'team': 'blue',
            'name': 'Alice'
        }
        """
        self.log_handler_start('handle_add_player', data)
        session_id = self.require_session_id(data)
        self.validate_data_dict(data, ['team', 'name'])

        with self.session_manager.locked(session_id) as session:
            player = session.add_player(data['team'], data['name'])

        self.emit_success('player_added', {
            'player': player.to_dict(),
            'team': self.validation_service.validate_team(data['team']).value
        })
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_remove_player(self, data=None):
        self.log_handler_start('handle_remove_player', data)
        session_id = self.require_session_id(data)
        self.validate_data_dict(data, ['team', 'player_id'])

        with self.session_manager.locked(session_id) as session:
            session.remove_player(data['team'], data['player_id'])

        self.emit_success('player_removed', {'player_id': data['player_id']})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_move_player(self, data=None):
        """
        Move a player to the other team.

        Expected data format:
        {
            'session_id': 'living-room',
            'player_id': '...',
            'from_team': 'blue',
            'to_team': 'red'
        }
        """
        self.log_handler_start('handle_move_player', data)
        session_id = self.require_session_id(data)
        self.validate_data_dict(data, ['player_id', 'from_team', 'to_team'])

        with self.session_manager.locked(session_id) as session:
            session.move_player(data['player_id'], data['from_team'], data['to_team'])

        self.emit_success('player_moved', {'player_id': data['player_id']})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_prefill_players(self, data=None):
        """Load the rosters of the last recorded game into the session."""
        session_id = self.require_session_id(data)
        prefilled = self.session_manager.prefill_last_players(session_id)

        self.emit_success('players_prefilled', {'prefilled_players': prefilled})
        if prefilled:
            self.broadcast_service.broadcast_session_state(session_id)
