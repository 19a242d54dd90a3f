"""
Core error definitions for the Charades game engine

Provides error codes and exceptions that don't depend on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Request data errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_DATA = "MISSING_DATA"

    # Session errors
    MISSING_SESSION_ID = "MISSING_SESSION_ID"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_ALREADY_EXISTS = "SESSION_ALREADY_EXISTS"
    NOT_IN_SESSION = "NOT_IN_SESSION"

    # Roster errors
    MISSING_PLAYER_NAME = "MISSING_PLAYER_NAME"
    PLAYER_NAME_TOO_LONG = "PLAYER_NAME_TOO_LONG"
    PLAYER_NAME_TAKEN = "PLAYER_NAME_TAKEN"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    INVALID_TEAM = "INVALID_TEAM"
    TEAM_FULL = "TEAM_FULL"
    EMPTY_TEAM = "EMPTY_TEAM"

    # Deck errors
    DECK_NOT_FOUND = "DECK_NOT_FOUND"
    NO_WORDS = "NO_WORDS"
    INVALID_WORD = "INVALID_WORD"

    # Game flow errors
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    GAME_IN_PROGRESS = "GAME_IN_PROGRESS"
    GAME_ALREADY_ENDED = "GAME_ALREADY_ENDED"
    TURN_NOT_ACTIVE = "TURN_NOT_ACTIVE"
    TIMER_NOT_RUNNING = "TIMER_NOT_RUNNING"
    TIMER_EXPIRED = "TIMER_EXPIRED"
    WORD_MISMATCH = "WORD_MISMATCH"
    WORD_NOT_IN_REVIEW = "WORD_NOT_IN_REVIEW"
    REVIEW_NOT_OPEN = "REVIEW_NOT_OPEN"
    ROUND_NOT_COMPLETE = "ROUND_NOT_COMPLETE"
    ROUND_ALREADY_RECORDED = "ROUND_ALREADY_RECORDED"
    FINAL_ROUND_NOT_REACHED = "FINAL_ROUND_NOT_REACHED"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class GameStateError(ValidationError):
    """Raised when an operation is not valid in the current lifecycle state."""
    pass
