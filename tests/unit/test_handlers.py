"""
Handler Unit Tests

Socket.IO handlers exercised directly against an isolated container, with
the Flask-SocketIO request helpers patched out.
"""

import pytest
from unittest.mock import Mock, patch

from charades.core.errors import ErrorCode, ValidationError
from charades.handlers.base_handler import BaseHandler
from charades.handlers.game_action_handler import GameActionHandler
from charades.handlers.session_handler import SessionHandler
from charades.handlers.socket_handlers import build_routes, register_socket_handlers


@pytest.fixture
def socket_context():
    """Patch the request-bound helpers used by handlers."""
    with patch('charades.handlers.base_handler.request', Mock(sid='sid-1')), \
         patch('charades.handlers.base_handler.emit') as mock_emit, \
         patch('charades.handlers.base_handler.join_room') as mock_join, \
         patch('charades.handlers.base_handler.leave_room'), \
         patch('charades.services.error_response_factory.emit') as mock_error_emit:
        yield {'emit': mock_emit, 'join_room': mock_join, 'error_emit': mock_error_emit}


def _responses(mock_emit, event_name):
    return [c[0][1] for c in mock_emit.call_args_list if c[0][0] == event_name]


def _error_codes(mock_error_emit):
    return [c[0][1]['error']['code'] for c in mock_error_emit.call_args_list]


class TestBaseHandler:

    def setup_method(self):
        self.container = Mock()
        self.handler = BaseHandler(self.container)

    def test_services_resolved_from_container(self):
        self.handler.session_manager
        self.handler.turn_clock
        assert [c[0][0] for c in self.container.get.call_args_list] == ['SessionManager', 'TurnClockService']

    def test_require_session_id(self, container):
        handler = BaseHandler(container)
        container.get('SessionManager').create_session('room')
        assert handler.require_session_id({'session_id': ' ROOM '}) == 'room'

    def test_require_session_id_unknown(self, container):
        handler = BaseHandler(container)
        with pytest.raises(ValidationError) as exc_info:
            handler.require_session_id({'session_id': 'nope'})
        assert exc_info.value.code == ErrorCode.SESSION_NOT_FOUND

    def test_emit_success(self, container, socket_context):
        BaseHandler(container).emit_success('done', {'a': 1})
        socket_context['emit'].assert_called_once_with('done', {'success': True, 'data': {'a': 1}})


class TestSessionHandler:

    def test_create_session_joins_room(self, container, socket_context):
        handler = SessionHandler(container)
        handler.handle_create_session({'session_id': 'Party'})

        socket_context['join_room'].assert_called_once_with('party')
        created = _responses(socket_context['emit'], 'session_created')
        assert created == [{'success': True, 'data': {'session_id': 'party', 'prefilled_players': False}}]
        container.get('socketio').emit.assert_called()

    def test_add_player_missing_name(self, container, socket_context):
        container.get('SessionManager').create_session('party')
        SessionHandler(container).handle_add_player({'session_id': 'party', 'team': 'blue'})
        assert _error_codes(socket_context['error_emit']) == ['MISSING_PLAYER_NAME']

    def test_handler_without_data(self, container, socket_context):
        SessionHandler(container).handle_join_session()
        assert _error_codes(socket_context['error_emit']) == ['INVALID_DATA']


class TestGameActionHandler:

    def setup_method(self):
        self.session_id = 'party'

    def _session(self, container, words=('sol', 'luna')):
        session = container.get('SessionManager').create_session(self.session_id)
        session.add_player('blue', 'Alice')
        session.add_player('red', 'Carol')
        session.start_game(list(words))
        return session

    def test_start_game_without_loaded_decks(self, container, socket_context):
        session = container.get('SessionManager').create_session(self.session_id)
        session.add_player('blue', 'Alice')
        session.add_player('red', 'Carol')

        GameActionHandler(container).handle_start_game({'session_id': self.session_id, 'deck_id': 'animals'})
        assert _error_codes(socket_context['error_emit']) == ['SERVICE_UNAVAILABLE']

    def test_start_game_from_loaded_deck(self, container, socket_context):
        container.get('DeckManager').load_decks_from_data(
            {'decks': [{'id': 'animals', 'name': 'Animals', 'words': ['cat', 'dog']}]}
        )
        session = container.get('SessionManager').create_session(self.session_id)
        session.add_player('blue', 'Alice')
        session.add_player('red', 'Carol')

        GameActionHandler(container).handle_start_game({'session_id': self.session_id, 'deck_id': 'animals'})

        assert _responses(socket_context['emit'], 'game_started')[0]['data']['word_count'] == 2
        assert session.state.deck_id == 'animals'

    def test_start_timer_arms_clock(self, container, socket_context):
        self._session(container)
        GameActionHandler(container).handle_start_timer({'session_id': self.session_id})
        assert container.get('TurnClockService').get_handle(self.session_id).turn_number == 1

    def test_last_word_disarms_and_announces_turn_end(self, container, socket_context):
        session = self._session(container, words=('sol',))
        handler = GameActionHandler(container)
        handler.handle_start_timer({'session_id': self.session_id})

        handler.handle_mark_correct({'session_id': self.session_id})

        marked = _responses(socket_context['emit'], 'word_marked')[0]['data']
        assert marked == {'accepted': True, 'turn_ended': True, 'round_complete': True}
        assert container.get('TurnClockService').get_handle(self.session_id) is None
        emitted = [c[0][0] for c in container.get('socketio').emit.call_args_list]
        assert 'turn_ended' in emitted
        assert session.score('blue') == 1

    def test_advance_turn_reports_next_player(self, container, socket_context):
        self._session(container)
        handler = GameActionHandler(container)
        handler.handle_start_timer({'session_id': self.session_id})
        handler.handle_end_turn({'session_id': self.session_id})
        handler.handle_advance_turn({'session_id': self.session_id})

        advanced = _responses(socket_context['emit'], 'turn_advanced')[0]['data']
        assert advanced['turn_available'] is True
        assert advanced['current_player']['name'] == 'Carol'

    @pytest.mark.parametrize('method, extra, code', [
        ('handle_end_round', {}, 'ROUND_NOT_COMPLETE'),
        ('handle_end_game', {}, 'FINAL_ROUND_NOT_REACHED'),
        ('handle_start_game', {'words': ['mar']}, 'GAME_IN_PROGRESS'),
    ])
    def test_rejected_action_leaves_clock_armed(self, container, socket_context, method, extra, code):
        self._session(container)
        handler = GameActionHandler(container)
        handler.handle_start_timer({'session_id': self.session_id})

        getattr(handler, method)({'session_id': self.session_id, **extra})

        assert _error_codes(socket_context['error_emit']) == [code]
        assert container.get('TurnClockService').get_handle(self.session_id).turn_number == 1

    def test_toggle_review_by_index(self, container, socket_context):
        session = self._session(container, words=('sol', 'sol'))
        handler = GameActionHandler(container)
        handler.handle_start_timer({'session_id': self.session_id})
        handler.handle_mark_incorrect({'session_id': self.session_id})
        handler.handle_mark_incorrect({'session_id': self.session_id})

        handler.handle_toggle_review({'session_id': self.session_id, 'index': 1})

        toggled = _responses(socket_context['emit'], 'review_toggled')[0]['data']
        assert toggled == {'word': 'sol', 'index': 1, 'is_correct': True}
        assert [e.is_correct for e in session.review_entries] == [False, True]

    def test_state_errors_reported(self, container, socket_context):
        self._session(container)
        GameActionHandler(container).handle_end_game({'session_id': self.session_id})
        assert _error_codes(socket_context['error_emit']) == ['FINAL_ROUND_NOT_REACHED']


class TestSocketRegistration:

    def test_every_event_registered(self, container):
        socketio = Mock()
        routes = register_socket_handlers(socketio, container)

        registered = [c[0][0] for c in socketio.on_event.call_args_list]
        assert 'connect' in registered and 'disconnect' in registered
        for event_name in routes:
            assert event_name in registered
        assert len(routes) == 20

    def test_routes_point_at_handlers(self, container):
        routes = build_routes(SessionHandler(container), GameActionHandler(container))
        assert routes['mark_correct'].__name__ == 'handle_mark_correct'
        assert routes['create_session'].__name__ == 'handle_create_session'
