"""
Session State Presenter - Canonical transformation of a game session into
client payloads.

Keeps payload shapes consistent between Socket.IO broadcasts and the REST
API, and hides the word queue from clients: only the word being acted out
is revealed, and only while a turn is being played.
"""

import logging
from typing import Any, Dict, List, Optional

from charades.core.game_phases import GamePhase, RoundRule, Team, TurnPhase
from charades.game_reducer import (
    TOTAL_ROUNDS, SessionState, current_player, is_game_complete, next_player
)
from charades.game_session import GameSession
from charades.models import GameSummary, Player

logger = logging.getLogger(__name__)


class SessionStatePresenter:
    """Transforms GameSession state into JSON-safe dictionaries.

    Each payload is rendered from a single SessionState snapshot, so a tick
    landing on another thread cannot mix two states into one payload.
    """

    def create_session_state(self, session: GameSession) -> Dict[str, Any]:
        """Create the full, client-safe state of a session.

        Args:
            session: Session to render

        Returns:
            Dict suitable for the `session_state` event
        """
        state = session.state

        payload = {
            'session_id': session.session_id,
            'phase': state.phase.value,
            'deck_id': state.deck_id,
            'round': state.current_round,
            'total_rounds': TOTAL_ROUNDS,
            'teams': self._team_list(state),
            'history': [outcome.to_dict() for outcome in state.history],
        }

        if state.phase == GamePhase.IN_PROGRESS:
            rule = RoundRule.for_round(state.current_round)
            payload.update({
                'round_rule': {'round': rule.value, 'description': rule.description},
                'turn': self._turn_data(state),
                'words_total': len(state.word_queue),
                'words_remaining': state.words_remaining,
                'round_complete': state.round_complete,
                'game_complete': is_game_complete(state),
            })

        return payload

    def create_team_list(self, session: GameSession) -> Dict[str, Any]:
        return self._team_list(session.state)

    def create_turn_data(self, session: GameSession) -> Dict[str, Any]:
        """Turn-level view: acting player, timer, presented word and review list."""
        return self._turn_data(session.state)

    def create_review_list(self, session: GameSession) -> List[Dict[str, Any]]:
        return self._review_list(session.state)

    def create_timer_tick(self, session: GameSession) -> Dict[str, Any]:
        state = session.state
        return {
            'session_id': session.session_id,
            'turn_number': state.turn_number,
            'timer': state.timer.to_dict(),
        }

    def create_turn_ended(self, session: GameSession) -> Dict[str, Any]:
        """Payload announcing the end of the acting player's turn."""
        state = session.state
        reason = state.last_turn_end_reason
        return {
            'session_id': session.session_id,
            'turn_number': state.turn_number,
            'reason': reason.value if reason else None,
            'round_complete': state.round_complete,
            'game_complete': state.round_complete and state.current_round >= TOTAL_ROUNDS,
            'review': self._review_list(state),
        }

    def create_game_summary(self, summary: GameSummary, session_id: Optional[str] = None) -> Dict[str, Any]:
        data = summary.to_dict()
        if session_id is not None:
            data['session_id'] = session_id
        return data

    @staticmethod
    def _team_list(state: SessionState) -> Dict[str, Any]:
        return {team.value: state.teams[team].to_dict() for team in Team}

    def _turn_data(self, state: SessionState) -> Dict[str, Any]:
        turn = {
            'number': state.turn_number,
            'phase': state.turn_phase.value,
            'team': state.current_team.value,
            'available': state.turn_available,
            'current_player': self._player_data(current_player(state)),
            'next_player': self._player_data(next_player(state)),
            'timer': state.timer.to_dict(),
            'end_reason': state.last_turn_end_reason.value if state.last_turn_end_reason else None,
            'current_word': None,
        }

        if state.turn_phase == TurnPhase.PLAYING:
            turn['current_word'] = state.current_word

        if state.turn_phase == TurnPhase.REVIEW:
            turn['review'] = self._review_list(state)

        return turn

    @staticmethod
    def _review_list(state: SessionState) -> List[Dict[str, Any]]:
        return [
            {'index': index, 'word': entry.word, 'is_correct': entry.is_correct, 'changed': entry.changed}
            for index, entry in enumerate(state.review)
        ]

    @staticmethod
    def _player_data(player: Optional[Player]) -> Optional[Dict[str, Any]]:
        return player.to_dict() if player else None
