"""
Game rule settings (turn length, skip penalty) read from the
application configuration, with the engine's own constants as fallbacks
when no configuration has been loaded.
"""

import logging

from charades.game_reducer import DEFAULT_SKIP_PENALTY
from charades.turn_timer import DEFAULT_TURN_DURATION
from config_factory import get_config, ConfigError

logger = logging.getLogger(__name__)


class GameSettings:
    """Read-only view of the rule settings a new session is created with."""

    def __init__(self, app_config=None):
        if app_config is None:
            try:
                app_config = get_config()
            except ConfigError as e:
                logger.warning(f"{e}; falling back to built-in game rules")
        self._config = app_config

    def _setting(self, name, fallback):
        if self._config is None:
            return fallback
        return getattr(self._config, name)

    @property
    def turn_duration(self) -> int:
        """Seconds on the clock at the start of every turn."""
        return self._setting('turn_duration_seconds', DEFAULT_TURN_DURATION)

    @property
    def skip_penalty_seconds(self) -> int:
        """Seconds removed from the turn when a word is skipped in round 1."""
        return self._setting('skip_penalty_seconds', DEFAULT_SKIP_PENALTY)

    @property
    def clock_tick_interval(self) -> float:
        return self._setting('clock_tick_interval', 1.0)

    @property
    def recent_games_limit(self) -> int:
        return self._setting('recent_games_limit', 10)


_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """Shared GameSettings; passing `app_config` replaces it."""
    global _game_settings_instance
    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)
    return _game_settings_instance


def reset_game_settings():
    global _game_settings_instance
    _game_settings_instance = None
