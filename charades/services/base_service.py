"""
Shared plumbing for the long-lived services held by the container
(game store, history, turn clock).
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from config_factory import get_config, AppConfig, ConfigError


class BaseService(ABC):
    """
    A service with its own logger, layered settings and a one-shot shutdown.

    Subclasses set up their state in `_initialize()` and release it in
    `_cleanup()`.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(f"charades.services.{self.__class__.__name__}")
        self._overrides = dict(config or {})
        try:
            self._app_config: Optional[AppConfig] = get_config()
        except ConfigError:
            self._app_config = None
        self._shutdown = False

        self._initialize()
        self._logger.debug(f"{self.__class__.__name__} ready")

    @abstractmethod
    def _initialize(self) -> None:
        pass

    def _cleanup(self) -> None:
        pass

    def get_config_value(self, key: str, default: Any = None) -> Any:
        """Constructor overrides win over the application config, which wins over `default`."""
        if key in self._overrides:
            return self._overrides[key]
        return getattr(self._app_config, key, default) if self._app_config else default

    def _log(self, level: int, message: str, context: Dict[str, Any], exc_info: bool = False) -> None:
        self._logger.log(level, message, extra={'service': self.__class__.__name__, **context}, exc_info=exc_info)

    def log_info(self, message: str, **context) -> None:
        self._log(logging.INFO, message, context)

    def log_debug(self, message: str, **context) -> None:
        self._log(logging.DEBUG, message, context)

    def handle_service_error(self, operation: str, exception: Exception, **context) -> None:
        """Log `exception` with a traceback, tagged with the failed operation."""
        self._log(logging.ERROR, f"{operation} failed: {exception}", {'operation': operation, **context},
                  exc_info=True)

    def shutdown(self) -> None:
        """Run `_cleanup()` once; later calls do nothing."""
        if self._shutdown:
            return
        self._shutdown = True
        self._logger.info(f"Shutting down {self.__class__.__name__}")
        try:
            self._cleanup()
        except Exception as e:
            self.handle_service_error('cleanup', e)

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shutdown={self._shutdown})"
