"""
Unit tests for SessionStatePresenter.
"""

from dataclasses import replace
from unittest.mock import PropertyMock, patch

from charades.game_session import GameSession
from charades.services.session_state_presenter import SessionStatePresenter
from tests.factories.session_factory import SessionFactory


class TestSessionStatePresenter:

    def setup_method(self):
        self.presenter = SessionStatePresenter()

    def test_state_before_game(self):
        session = SessionFactory.create_session(start=False)
        state = self.presenter.create_session_state(session)

        assert state['phase'] == 'not_started'
        assert state['round'] == 1
        assert state['total_rounds'] == 3
        assert [p['name'] for p in state['teams']['blue']['players']] == ['Alice', 'Bob']
        assert state['teams']['red']['score'] == 0
        assert 'turn' not in state
        assert 'round_rule' not in state

    def test_ready_turn_hides_word(self):
        session = SessionFactory.create_session()
        state = self.presenter.create_session_state(session)

        assert state['phase'] == 'in_progress'
        assert state['round_rule']['round'] == 1
        assert state['words_total'] == 3
        assert state['words_remaining'] == 3
        turn = state['turn']
        assert turn['phase'] == 'ready'
        assert turn['current_player']['name'] == 'Alice'
        assert turn['next_player']['name'] == 'Bob'
        assert turn['current_word'] is None
        assert 'review' not in turn

    def test_playing_turn_reveals_only_current_word(self):
        session = SessionFactory.create_playing_session()
        state = self.presenter.create_session_state(session)

        assert state['turn']['current_word'] == 'sol'
        assert 'word_queue' not in state
        assert 'luna' not in str(state)

    def test_review_turn_includes_review_list(self):
        session = SessionFactory.create_playing_session()
        session.mark_correct()
        session.end_turn()
        session.toggle_review('sol')

        turn = self.presenter.create_turn_data(session)
        assert turn['phase'] == 'review'
        assert turn['current_word'] is None
        assert turn['end_reason'] == 'ended_by_player'
        assert turn['review'] == [{'index': 0, 'word': 'sol', 'is_correct': False, 'changed': True}]

    def test_history_after_round(self):
        session = SessionFactory.create_session()
        SessionFactory.play_out_round(session)
        session.end_round()

        state = self.presenter.create_session_state(session)
        assert state['round'] == 2
        assert state['history'][0]['round_number'] == 1
        assert state['history'][0]['team_scores'] == {'blue': 3, 'red': 0}

    def test_timer_tick(self):
        session = SessionFactory.create_playing_session()
        session.tick()
        assert self.presenter.create_timer_tick(session) == {
            'session_id': 'local',
            'turn_number': 1,
            'timer': {'duration': 30, 'remaining': 29, 'running': True},
        }

    def test_turn_ended(self):
        session = SessionFactory.create_playing_session(words=['sol'])
        session.mark_correct()

        payload = self.presenter.create_turn_ended(session)
        assert payload['reason'] == 'words_exhausted'
        assert payload['round_complete'] is True
        assert payload['game_complete'] is False
        assert payload['review'] == [{'index': 0, 'word': 'sol', 'is_correct': True, 'changed': False}]

    def test_game_summary(self):
        session = SessionFactory.create_session()
        for _ in range(3):
            SessionFactory.play_out_round(session)
            session.end_round()
        summary = session.end_game()

        data = self.presenter.create_game_summary(summary, 'room')
        assert data['session_id'] == 'room'
        assert data['winner'] == 'blue'
        assert data['score_blue'] == 9
        assert len(data['rounds']) == 3
        assert 'session_id' not in self.presenter.create_game_summary(summary)

    def test_empty_session(self):
        state = self.presenter.create_session_state(GameSession(session_id='empty'))
        assert state['teams'] == {
            'blue': {'players': [], 'score': 0},
            'red': {'players': [], 'score': 0},
        }
        assert state['history'] == []

    def test_state_rendered_from_one_snapshot(self):
        session = SessionFactory.create_playing_session()

        def read_then_move_on():
            # another thread swaps in a new state right after the read
            snapshot = session._state
            session._state = replace(snapshot, current_player_index=1, timer=snapshot.timer.tick(5))
            return snapshot

        with patch.object(GameSession, 'state', new_callable=PropertyMock, side_effect=read_then_move_on) as state:
            payload = self.presenter.create_session_state(session)

        assert state.call_count == 1
        assert payload['turn']['current_player']['name'] == 'Alice'
        assert payload['turn']['next_player']['name'] == 'Bob'
        assert payload['turn']['timer']['remaining'] == 30
