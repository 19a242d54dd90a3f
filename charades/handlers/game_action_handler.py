"""
Game Action Handler

This module handles Socket.IO events that drive a game: starting it,
running the turn timer, judging words, reviewing, and moving through
turns and rounds.
"""

import logging

from charades.core.errors import ErrorCode, ValidationError
from charades.core.events import ToggleReview
from charades.game_reducer import review_index
from charades.services.error_response_factory import with_error_handling
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseHandler):
    """Handler for in-game actions."""

    @with_error_handling
    def handle_start_game(self, data=None):
        """
        Start a game from a deck or an explicit word list.

        Expected data format:
        {
            'session_id': 'living-room',
            'deck_id': 'animals'          # or
            'words': ['sol', 'luna', 'mar']
        }
        """
        self.log_handler_start('handle_start_game', data)
        session_id = self.require_session_id(data)

        deck_id = data.get('deck_id')
        if deck_id:
            words = self._get_deck_words(deck_id)
        else:
            words = data.get('words')

        with self.session_manager.locked(session_id) as session:
            session.start_game(words, deck_id=deck_id)
            self.turn_clock.disarm(session_id)
            word_count = len(session.word_queue)

        self.log_handler_success('handle_start_game', f'Started game in session {session_id}')
        self.emit_success('game_started', {'session_id': session_id, 'word_count': word_count})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_start_timer(self, data=None):
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            session.start_timer()
            self.turn_clock.arm(session_id, session.turn_number)

        self.emit_success('timer_started', {'session_id': session_id})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_stop_timer(self, data=None):
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            session.stop_timer()
            self.turn_clock.disarm(session_id)

        self.emit_success('timer_stopped', {'session_id': session_id})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_mark_correct(self, data=None):
        """
        Credit the presented word to the acting team.

        Expected data format:
        {
            'session_id': 'living-room',
            'word': 'sol'     # optional, must match the presented word
        }
        """
        self._judge(data, correct=True)

    @with_error_handling
    def handle_mark_incorrect(self, data=None):
        """Skip the presented word."""
        self._judge(data, correct=False)

    @with_error_handling
    def handle_end_turn(self, data=None):
        """The acting player gives up the rest of their turn."""
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            status = session.end_turn()
            self.turn_clock.disarm(session_id)
            self.broadcast_service.broadcast_turn_ended(session)

        self.emit_success('turn_end_accepted', {
            'reason': status.reason.value if status.reason else None,
            'round_complete': status.round_complete
        })
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_toggle_review(self, data=None):
        """
        Flip one reviewed word.

        Expected data format:
        {
            'session_id': 'living-room',
            'index': 2,       # position in the review list, and/or
            'word': 'sol'
        }
        """
        session_id = self.require_session_id(data)
        word = data.get('word')
        index = data.get('index')
        if word is None and index is None:
            raise ValidationError(ErrorCode.MISSING_DATA, 'Either word or index is required')
        if index is not None and (isinstance(index, bool) or not isinstance(index, int)):
            raise ValidationError(ErrorCode.INVALID_DATA, 'index must be an integer', {'index': index})

        with self.session_manager.locked(session_id) as session:
            is_correct = session.toggle_review(word, index=index)
            if index is None:
                index = review_index(session.review_entries, ToggleReview(word=word))
            word = session.review_entries[index].word

        self.emit_success('review_toggled', {'word': word, 'index': index, 'is_correct': is_correct})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_commit_review(self, data=None):
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            session.commit_review()

        self.emit_success('review_committed', {'session_id': session_id})
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_advance_turn(self, data=None):
        """Hand the turn to the next player; reports when the round cannot continue."""
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            available = session.advance_turn()
            self.turn_clock.disarm(session_id)
            player = session.current_player()

        self.emit_success('turn_advanced', {
            'turn_available': available,
            'current_player': player.to_dict() if player and available else None
        })
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_end_round(self, data=None):
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            outcome = session.end_round()
            self.turn_clock.disarm(session_id)
            game_complete = session.is_game_complete()

        self.emit_success('round_ended', {
            'outcome': outcome.to_dict(),
            'game_complete': game_complete
        })
        self.broadcast_service.broadcast_session_state(session_id)

    @with_error_handling
    def handle_end_game(self, data=None):
        """Finish the game, record it, and announce the summary."""
        session_id = self.require_session_id(data)

        summary = self.session_manager.finish_game(session_id)
        self.turn_clock.disarm(session_id)

        self.log_handler_success('handle_end_game', f'Game finished in session {session_id}')
        self.emit_success('game_finished', {'session_id': session_id})
        self.broadcast_service.broadcast_game_ended(session_id, summary)

    @with_error_handling
    def handle_reset_game(self, data=None):
        session_id = self.require_session_id(data)

        with self.session_manager.locked(session_id) as session:
            session.reset_game()
            self.turn_clock.disarm(session_id)

        self.emit_success('game_reset', {'session_id': session_id})
        self.broadcast_service.broadcast_session_state(session_id)

    def _judge(self, data, correct: bool) -> None:
        session_id = self.require_session_id(data)
        word = data.get('word')

        with self.session_manager.locked(session_id) as session:
            if correct:
                result = session.mark_correct(word)
            else:
                result = session.mark_incorrect(word)
            if result.turn_ended:
                self.turn_clock.disarm(session_id)
            if result.accepted and result.turn_ended:
                self.broadcast_service.broadcast_turn_ended(session)

        self.emit_success('word_marked', {
            'accepted': result.accepted,
            'turn_ended': result.turn_ended,
            'round_complete': result.round_complete
        })
        self.broadcast_service.broadcast_session_state(session_id)

    def _get_deck_words(self, deck_id: str) -> list:
        if not self.deck_manager.is_loaded():
            raise ValidationError(ErrorCode.SERVICE_UNAVAILABLE, 'No word decks are loaded')
        if self.deck_manager.get_deck(deck_id) is None:
            raise ValidationError(
                ErrorCode.DECK_NOT_FOUND,
                f'Deck {deck_id} not found',
                {'deck_id': deck_id}
            )
        return self.deck_manager.get_words(deck_id)
