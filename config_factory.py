"""
Configuration for the Charades server.

Settings come from environment variables (optionally prefixed), or from a
plain dictionary in tests. A single ConfigurationFactory holds the active
AppConfig so services and the game settings read the same values.
"""

import os
import logging
from typing import Any, Dict, Optional, Type
from enum import Enum
from dataclasses import dataclass, asdict, replace

DEV_SECRET_KEY = 'dev-secret-key-change-in-production'
LOG_LEVELS = ('debug', 'info', 'warning', 'error', 'critical')


class Environment(Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"

    @classmethod
    def from_flask_env(cls, flask_env: str) -> 'Environment':
        """Map FLASK_ENV to an environment; anything unrecognised is production."""
        try:
            return cls(flask_env)
        except ValueError:
            return cls.PRODUCTION


class ConfigError(Exception):
    """Raised for missing or out-of-range configuration."""
    pass


# Inclusive bounds checked on every validation
_BOUNDS = {
    'port': (1, 65535),
    'turn_duration_seconds': (5, 300),
    'max_player_name_length': (1, 100),
    'max_players_per_team': (1, 50),
    'recent_games_limit': (1, 1000),
}


@dataclass
class AppConfig:
    """Server, game and history settings for one running instance."""

    secret_key: str = DEV_SECRET_KEY
    debug: bool = False
    flask_env: str = 'development'

    host: str = '0.0.0.0'
    port: int = 5000

    # Game rules
    turn_duration_seconds: int = 30
    skip_penalty_seconds: int = 5  # round 1 only
    max_player_name_length: int = 20
    max_players_per_team: int = 10

    clock_tick_interval: float = 1.0
    recent_games_limit: int = 10
    decks_file: str = 'decks.yaml'
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        self._validate()

    def _validate(self):
        for name, (low, high) in _BOUNDS.items():
            value = getattr(self, name)
            if not low <= value <= high:
                raise ConfigError(f"{name} must be between {low} and {high}, got {value}")

        if not 0 <= self.skip_penalty_seconds < self.turn_duration_seconds:
            raise ConfigError(
                f"skip_penalty_seconds must be shorter than a turn, got {self.skip_penalty_seconds}"
            )

        if not 0 < self.clock_tick_interval <= 10:
            raise ConfigError(f"clock_tick_interval out of range: {self.clock_tick_interval}")

        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log_level '{self.log_level}'")

        if self.is_production and self.secret_key == DEV_SECRET_KEY:
            raise ConfigError("SECRET_KEY must be set when running in production")

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


# (AppConfig field, environment variable, type)
_ENV_SETTINGS = (
    ('secret_key', 'SECRET_KEY', str),
    ('host', 'HOST', str),
    ('port', 'PORT', int),
    ('turn_duration_seconds', 'TURN_DURATION_SECONDS', int),
    ('skip_penalty_seconds', 'SKIP_PENALTY_SECONDS', int),
    ('max_player_name_length', 'MAX_PLAYER_NAME_LENGTH', int),
    ('max_players_per_team', 'MAX_PLAYERS_PER_TEAM', int),
    ('clock_tick_interval', 'CLOCK_TICK_INTERVAL', float),
    ('recent_games_limit', 'RECENT_GAMES_LIMIT', int),
    ('decks_file', 'DECKS_FILE', str),
    ('log_level', 'LOG_LEVEL', str),
)


class ConfigurationFactory:
    """
    Process-wide holder of the active AppConfig.

    Every instantiation returns the same factory. Overrides set through
    override_setting() are remembered and re-applied when the configuration
    is loaded again from the environment.
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, '_initialized'):
            self._logger = logging.getLogger(__name__)
            self._overrides: Dict[str, Any] = {}
            self._initialized = True

    def _read_env(self, name: str, var_type: Type, default: Any) -> Any:
        raw = os.environ.get(name)
        if raw is None:
            return default
        if var_type == bool:
            return raw.lower() in ('true', '1', 'yes', 'on')
        if var_type in (int, float):
            try:
                return var_type(raw)
            except ValueError:
                self._logger.warning(f"Ignoring {name}={raw!r}: not a valid {var_type.__name__}")
                return default
        return raw

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Build the configuration from environment variables.

        Args:
            env_prefix: Prefix for every variable name, e.g. 'CHARADES_'

        Returns:
            The newly active AppConfig
        """
        defaults = AppConfig()
        flask_env = self._read_env(f'{env_prefix}FLASK_ENV', str, 'development')
        environment = Environment.from_flask_env(flask_env)

        values = {
            field_name: self._read_env(f'{env_prefix}{env_name}', var_type, getattr(defaults, field_name))
            for field_name, env_name, var_type in _ENV_SETTINGS
        }
        values['flask_env'] = flask_env
        values['environment'] = environment
        values['debug'] = self._read_env(f'{env_prefix}DEBUG', bool, environment != Environment.PRODUCTION)
        values.update({k: v for k, v in self._overrides.items() if k in values})

        self._config = AppConfig(**values)
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build the configuration from explicit values; unspecified fields keep their defaults."""
        values = dict(config_dict)
        if isinstance(values.get('environment'), str):
            values['environment'] = Environment(values['environment'])
        self._config = AppConfig(**values)
        return self._config

    def override_setting(self, key: str, value: Any) -> 'ConfigurationFactory':
        """
        Replace one setting on the active configuration and remember it for later reloads.

        The value is validated against a copy first; a rejected value leaves
        both the active configuration and the remembered overrides untouched.

        Raises:
            ConfigError: If the new value fails validation
        """
        if self._config is not None and hasattr(self._config, key):
            replace(self._config, **{key: value})
            setattr(self._config, key, value)
        self._overrides[key] = value
        return self

    def get_config(self) -> AppConfig:
        if self._config is None:
            raise ConfigError("Configuration not loaded; call load_from_environment() or load_from_dict()")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Forget the active configuration and any overrides."""
        self._config = None
        self._overrides.clear()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain-value copy of the active configuration, used as service container config."""
        data = asdict(self.get_config())
        data['environment'] = self._config.environment.value
        return data

    def get_flask_config(self) -> Dict[str, Any]:
        """Keys for Flask's app.config."""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'TURN_DURATION_SECONDS': config.turn_duration_seconds,
            'SKIP_PENALTY_SECONDS': config.skip_penalty_seconds,
            'MAX_PLAYERS_PER_TEAM': config.max_players_per_team,
            'DECKS_FILE': config.decks_file,
        }


_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    return _config_factory.load_from_environment(env_prefix)


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    return _config_factory.load_from_dict(config_dict)


def override_config(key: str, value: Any) -> ConfigurationFactory:
    return _config_factory.override_setting(key, value)


def reset_config() -> ConfigurationFactory:
    return _config_factory.reset()
