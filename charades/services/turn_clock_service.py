"""
Turn Clock Service - Drives the per-turn countdown of every live session.

This service handles:
- One tick handle per session, bound to the turn it was armed for
- One-second countdown ticks delivered under the session lock
- Broadcasting timer updates and turn expiry
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from charades.core.errors import ValidationError
from charades.core.game_phases import TurnPhase
from charades.services.base_service import BaseService

TICK_SECONDS = 1


@dataclass
class TickHandle:
    """Registration of one session's running turn with the clock."""
    session_id: str
    turn_number: int
    next_tick_at: float


class TurnClockService(BaseService):
    """Background scheduler that ticks running turn timers."""

    def __init__(self, session_manager, broadcast_service,
                 config: Optional[Dict[str, Any]] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            session_manager: Source of sessions and their locks
            broadcast_service: Used to push tick and expiry events
            config: Optional overrides (e.g. clock_tick_interval)
            clock: Monotonic time source, injectable for tests
        """
        self.session_manager = session_manager
        self.broadcast_service = broadcast_service
        self._clock = clock
        super().__init__(config)

    def _initialize(self) -> None:
        self.check_interval = self.get_config_value('clock_tick_interval', 1.0)
        self._handles: Dict[str, TickHandle] = {}
        self._handles_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # Handle management

    def arm(self, session_id: str, turn_number: int) -> TickHandle:
        """Register (or replace) the tick handle for a session's running turn."""
        handle = TickHandle(
            session_id=session_id,
            turn_number=turn_number,
            next_tick_at=self._clock() + TICK_SECONDS,
        )
        with self._handles_lock:
            previous = self._handles.get(session_id)
            self._handles[session_id] = handle
        if previous is not None and previous.turn_number != turn_number:
            self.log_debug(
                f"Replaced tick handle for session {session_id} (turn {previous.turn_number} -> {turn_number})"
            )
        return handle

    def disarm(self, session_id: str) -> bool:
        with self._handles_lock:
            return self._handles.pop(session_id, None) is not None

    def get_handle(self, session_id: str) -> Optional[TickHandle]:
        with self._handles_lock:
            return self._handles.get(session_id)

    def armed_session_ids(self) -> List[str]:
        with self._handles_lock:
            return list(self._handles.keys())

    def _discard(self, handle: TickHandle) -> None:
        """Remove a handle only if it has not been replaced meanwhile."""
        with self._handles_lock:
            if self._handles.get(handle.session_id) is handle:
                del self._handles[handle.session_id]

    # Ticking

    def tick_due(self, now: Optional[float] = None) -> List[str]:
        """
        Tick every session whose next tick is due.

        Args:
            now: Current clock reading; read from the clock when omitted

        Returns:
            Ids of the sessions that were ticked
        """
        if now is None:
            now = self._clock()

        with self._handles_lock:
            due = [h for h in self._handles.values() if h.next_tick_at <= now]

        ticked = []
        for handle in due:
            seconds = int((now - handle.next_tick_at) // TICK_SECONDS) + 1
            handle.next_tick_at += seconds * TICK_SECONDS
            try:
                if self._tick_session(handle, seconds):
                    ticked.append(handle.session_id)
            except Exception as e:
                self.handle_service_error('tick', e, session_id=handle.session_id)
                self._discard(handle)
        return ticked

    def _tick_session(self, handle: TickHandle, seconds: int) -> bool:
        try:
            with self.session_manager.locked(handle.session_id) as session:
                if session.turn_number != handle.turn_number:
                    self.log_debug(f"Discarding stale tick handle for session {handle.session_id}")
                    self._discard(handle)
                    return False
                if not session.timer.running:
                    self._discard(handle)
                    return False

                session.tick(seconds)
                expired = session.turn_phase == TurnPhase.REVIEW

                self.broadcast_service.broadcast_timer_tick(session)
                if expired:
                    self._discard(handle)
                    self.log_info(f"Turn {session.turn_number} expired in session {handle.session_id}")
                    self.broadcast_service.broadcast_turn_ended(session)
                    self.broadcast_service.broadcast_session_state(handle.session_id)
                return True
        except ValidationError:
            # Session no longer exists
            self._discard(handle)
            return False

    # Background loop

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._timer_loop, name='turn-clock', daemon=True)
        self._thread.start()
        self.log_info("TurnClockService started")

    def stop(self) -> None:
        """Stop the background loop and wait for it to exit."""
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=2)
        self._thread = None
        self.log_info("TurnClockService stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _timer_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.tick_due()
            except Exception as e:
                self.handle_service_error('timer loop', e)
            self._stop_event.wait(self.check_interval)

    def _cleanup(self) -> None:
        self.stop()
        with self._handles_lock:
            self._handles.clear()
