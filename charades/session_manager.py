"""
Session Manager for the Charades game

Owns every live GameSession under a session id and serializes access to
each one with a per-session lock, so the turn clock thread and client
requests never mutate the same session concurrently.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from charades.config.game_settings import get_game_settings
from charades.core.errors import ErrorCode, ValidationError
from charades.game_session import GameSession
from charades.models import GameSummary
from charades.services.validation_service import ValidationService

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, looks up and retires game sessions with thread-safe operations."""

    def __init__(self, validation_service: Optional[ValidationService] = None,
                 history_service=None, game_settings=None):
        """
        Args:
            validation_service: Validator shared with the sessions
            history_service: Receives finished games; optional
            game_settings: Source of turn duration, rounds and skip penalty
        """
        self.validation_service = validation_service or ValidationService()
        self.history_service = history_service
        self.game_settings = game_settings or get_game_settings()
        self._sessions: Dict[str, GameSession] = {}
        self._session_locks: Dict[str, threading.RLock] = {}
        self._locks_lock = threading.Lock()

    def create_session(self, session_id: Optional[str] = None) -> GameSession:
        """
        Create a new, empty game session.

        Args:
            session_id: Requested id; a random one is generated when omitted

        Returns:
            The new GameSession

        Raises:
            ValidationError: If the id is invalid or already in use
        """
        if session_id is None:
            session_id = uuid.uuid4().hex[:8]
        session_id = self.validation_service.validate_session_id(session_id)

        with self._locks_lock:
            if session_id in self._sessions:
                raise ValidationError(
                    ErrorCode.SESSION_ALREADY_EXISTS,
                    f"Session {session_id} already exists",
                    {"session_id": session_id}
                )
            session = GameSession(
                session_id=session_id,
                turn_duration=self.game_settings.turn_duration,
                skip_penalty_seconds=self.game_settings.skip_penalty_seconds,
                validation_service=self.validation_service,
            )
            self._sessions[session_id] = session
            self._session_locks[session_id] = threading.RLock()

        logger.info(f"Created session {session_id}")
        return session

    def get_session(self, session_id: str) -> Optional[GameSession]:
        with self._locks_lock:
            return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> GameSession:
        """
        Get a session, raising if it does not exist.

        Raises:
            ValidationError: SESSION_NOT_FOUND
        """
        session = self.get_session(session_id)
        if session is None:
            raise ValidationError(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} not found",
                {"session_id": session_id}
            )
        return session

    def session_exists(self, session_id: str) -> bool:
        with self._locks_lock:
            return session_id in self._sessions

    def get_all_session_ids(self) -> List[str]:
        with self._locks_lock:
            return list(self._sessions.keys())

    def remove_session(self, session_id: str) -> bool:
        """
        Forget a session and its lock.

        Returns:
            True if the session existed
        """
        with self._locks_lock:
            existed = self._sessions.pop(session_id, None) is not None
            self._session_locks.pop(session_id, None)
        if existed:
            logger.info(f"Removed session {session_id}")
        return existed

    def _get_lock(self, session_id: str) -> threading.RLock:
        with self._locks_lock:
            lock = self._session_locks.get(session_id)
        if lock is None:
            raise ValidationError(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} not found",
                {"session_id": session_id}
            )
        return lock

    @contextmanager
    def locked(self, session_id: str) -> Iterator[GameSession]:
        """
        Context manager for thread-safe session operations.

        Yields:
            The session, held exclusively for the duration of the block

        Raises:
            ValidationError: SESSION_NOT_FOUND
        """
        lock = self._get_lock(session_id)
        with lock:
            yield self.require_session(session_id)

    def finish_game(self, session_id: str) -> GameSummary:
        """
        End the game, hand the summary to the history service and clear the session.

        A failure to persist is logged and never propagated.

        Returns:
            The GameSummary of the finished game
        """
        with self.locked(session_id) as session:
            summary = session.end_game()

        if self.history_service is not None:
            try:
                self.history_service.record_game(summary)
            except Exception as e:
                logger.error(f"Failed to persist game for session {session_id}: {e}", exc_info=True)

        self.remove_session(session_id)
        return summary

    def prefill_last_players(self, session_id: str) -> bool:
        """
        Load the rosters of the last persisted game into a session in setup.

        Returns:
            True if a previous game was found and its players were loaded
        """
        if self.history_service is None:
            return False
        rosters = self.history_service.get_last_game_players()
        if not rosters:
            return False

        with self.locked(session_id) as session:
            session.load_roster(rosters.get('blue', []), rosters.get('red', []))
        logger.info(f"Session {session_id}: prefilled players from last game")
        return True

    def clear(self) -> None:
        with self._locks_lock:
            self._sessions.clear()
            self._session_locks.clear()

    def get_session_count(self) -> int:
        with self._locks_lock:
            return len(self._sessions)
