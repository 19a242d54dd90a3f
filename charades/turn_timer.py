"""
Turn Timer

Countdown for the active turn. The timer never drives itself: a single
external scheduler calls tick() once per second while it is running.
"""

from dataclasses import dataclass, replace

DEFAULT_TURN_DURATION = 30  # seconds


@dataclass(frozen=True)
class TurnTimer:
    """Immutable countdown state; every operation returns a new timer."""
    duration: int = DEFAULT_TURN_DURATION
    remaining: int = DEFAULT_TURN_DURATION
    running: bool = False

    @classmethod
    def fresh(cls, duration: int = DEFAULT_TURN_DURATION) -> 'TurnTimer':
        return cls(duration=duration, remaining=duration, running=False)

    @property
    def expired(self) -> bool:
        return self.remaining <= 0

    def start(self) -> 'TurnTimer':
        """stopped -> running. An expired timer cannot be restarted without reset()."""
        if self.expired:
            return self
        return replace(self, running=True)

    def stop(self) -> 'TurnTimer':
        return replace(self, running=False)

    def reset(self) -> 'TurnTimer':
        """Back to the full duration and stopped, regardless of current state."""
        return TurnTimer.fresh(self.duration)

    def tick(self, seconds: int = 1) -> 'TurnTimer':
        """
        Decrement remaining time while running.

        Reaching zero auto-stops the timer; callers detect expiry through
        the ``expired`` property.
        """
        if not self.running:
            return self
        remaining = max(0, self.remaining - seconds)
        return replace(self, remaining=remaining, running=remaining > 0)

    def penalize(self, seconds: int) -> 'TurnTimer':
        """Remove time without requiring a tick (used for skip penalties)."""
        if seconds <= 0:
            return self
        remaining = max(0, self.remaining - seconds)
        return replace(self, remaining=remaining, running=self.running and remaining > 0)

    def to_dict(self):
        return {
            'duration': self.duration,
            'remaining': self.remaining,
            'running': self.running
        }
