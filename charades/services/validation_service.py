"""
Validation Service for the Charades game

Provides input validation and sanitization functionality separated from error response handling.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from charades.core.errors import ErrorCode, ValidationError
from charades.core.game_phases import Team

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for input validation and sanitization."""

    # Validation constants
    MAX_SESSION_ID_LENGTH = 50
    MAX_PLAYER_NAME_LENGTH = 20
    MAX_PLAYERS_PER_TEAM = 10
    MAX_WORD_LENGTH = 60

    # Session ID pattern: alphanumeric, hyphens, underscores
    SESSION_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

    def __init__(self):
        """Initialize ValidationService with configuration"""
        self._config = None

    def _config_value(self, key: str, default: Any) -> Any:
        """Read a limit from the loaded configuration, falling back to the class default."""
        try:
            from config_factory import get_config
            return getattr(get_config(), key, default)
        except Exception:
            return default

    def get_max_player_name_length(self) -> int:
        return self._config_value('max_player_name_length', self.MAX_PLAYER_NAME_LENGTH)

    def get_max_players_per_team(self) -> int:
        return self._config_value('max_players_per_team', self.MAX_PLAYERS_PER_TEAM)

    def validate_session_id(self, session_id: str) -> str:
        """
        Validate and sanitize session ID.

        Args:
            session_id: Raw session ID string

        Returns:
            Sanitized session ID

        Raises:
            ValidationError: If session ID is invalid
        """
        if not session_id or not isinstance(session_id, str):
            raise ValidationError(
                ErrorCode.MISSING_SESSION_ID,
                "Session ID is required"
            )

        session_id = session_id.strip()

        if not session_id:
            raise ValidationError(
                ErrorCode.MISSING_SESSION_ID,
                "Session ID cannot be empty"
            )

        if len(session_id) > self.MAX_SESSION_ID_LENGTH:
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f"Session ID must be {self.MAX_SESSION_ID_LENGTH} characters or less",
                {"max_length": self.MAX_SESSION_ID_LENGTH, "actual_length": len(session_id)}
            )

        if not self.SESSION_ID_PATTERN.match(session_id):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Session ID can only contain letters, numbers, hyphens, and underscores"
            )

        return session_id.lower()

    def validate_player_name(self, player_name: str) -> str:
        """
        Validate and sanitize player name.

        Args:
            player_name: Raw player name string

        Returns:
            Sanitized player name

        Raises:
            ValidationError: If player name is invalid
        """
        if not player_name or not isinstance(player_name, str):
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                "Player name is required"
            )

        player_name = " ".join(player_name.split())

        if not player_name:
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                "Player name cannot be empty"
            )

        max_length = self.get_max_player_name_length()
        if len(player_name) > max_length:
            raise ValidationError(
                ErrorCode.PLAYER_NAME_TOO_LONG,
                f"Player name must be {max_length} characters or less",
                {"max_length": max_length, "actual_length": len(player_name)}
            )

        return player_name

    def validate_team(self, team: Any) -> Team:
        """Resolve a team identity from user input."""
        if isinstance(team, Team):
            return team
        if not isinstance(team, str) or not team.strip():
            raise ValidationError(ErrorCode.INVALID_TEAM, "Team is required")
        try:
            return Team(team.strip().lower())
        except ValueError:
            raise ValidationError(
                ErrorCode.INVALID_TEAM,
                f"Unknown team: {team}",
                {"valid_teams": [t.value for t in Team]}
            )

    def validate_team_capacity(self, current_size: int) -> None:
        max_players = self.get_max_players_per_team()
        if current_size >= max_players:
            raise ValidationError(
                ErrorCode.TEAM_FULL,
                f"A team can have at most {max_players} players",
                {"max_players": max_players}
            )

    def validate_word_list(self, words: Optional[Iterable[str]]) -> List[str]:
        """
        Validate the words a game is started with.

        Args:
            words: Words supplied by the word source

        Returns:
            A new list of stripped words, in the given order

        Raises:
            ValidationError: If the list is empty or contains blank/non-string entries
        """
        if words is None or isinstance(words, (str, bytes)):
            raise ValidationError(ErrorCode.NO_WORDS, "A list of words is required")

        cleaned = []
        for index, word in enumerate(words):
            if not isinstance(word, str) or not word.strip():
                raise ValidationError(
                    ErrorCode.INVALID_WORD,
                    f"Word {index} must be a non-empty string",
                    {"index": index}
                )
            word = word.strip()
            if len(word) > self.MAX_WORD_LENGTH:
                raise ValidationError(
                    ErrorCode.INVALID_WORD,
                    f"Word {index} must be {self.MAX_WORD_LENGTH} characters or less",
                    {"index": index, "max_length": self.MAX_WORD_LENGTH}
                )
            cleaned.append(word)

        if not cleaned:
            raise ValidationError(ErrorCode.NO_WORDS, "At least one word is required to start a game")
        return cleaned

    def validate_request_data(self, data: Any, required_fields: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Validate that Socket.IO data is a dictionary with the required fields.

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(data, dict):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Invalid data format - expected dictionary"
            )

        for field in required_fields or []:
            if field not in data or data[field] is None:
                if field == 'session_id':
                    raise ValidationError(ErrorCode.MISSING_SESSION_ID, "Session ID is required")
                if field == 'name':
                    raise ValidationError(ErrorCode.MISSING_PLAYER_NAME, "Player name is required")
                raise ValidationError(
                    ErrorCode.MISSING_DATA,
                    f"Missing required field: {field}"
                )

        return data
