"""
Service container for the Charades server.

Services are registered by name together with the names of the services
they need; the container builds them on first use and hands the shared
instances to handlers and routes.
"""

from typing import Dict, Any, List, Optional, Callable
import inspect
from enum import Enum


class ServiceLifecycle(Enum):
    SINGLETON = "singleton"  # built once, shared
    TRANSIENT = "transient"  # built on every get()


class ServiceDefinition:
    """A registered factory and what it needs."""

    def __init__(
        self,
        name: str,
        factory: Callable,
        dependencies: List[str] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Dict[str, Any] = None
    ):
        self.name = name
        self.factory = factory
        self.dependencies = list(dependencies or [])
        self.lifecycle = lifecycle
        self.config = dict(config or {})

    def build(self, resolved: List[Any]) -> Any:
        # classes take dependencies only; function factories also get their config
        if inspect.isclass(self.factory):
            return self.factory(*resolved)
        return self.factory(*resolved, **self.config)


class CircularDependencyError(Exception):
    pass


class ServiceNotFoundError(Exception):
    pass


class ServiceContainer:
    """
    Name-based registry that builds services and their dependencies on demand.

    Framework objects that are created elsewhere, such as the Flask-SocketIO
    server, are added with set_external_dependency() and resolve like any
    other service.
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._resolving: List[str] = []
        self._config: Dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Callable,
        dependencies: List[str] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Dict[str, Any] = None
    ) -> 'ServiceContainer':
        """
        Add a service.

        Args:
            name: Key used with get()
            factory: Class or callable producing the service
            dependencies: Service names resolved and passed positionally to the factory
            lifecycle: SINGLETON (default) or TRANSIENT
            config: Keyword arguments for callable (non-class) factories

        Raises:
            ValueError: On a duplicate name or a non-callable factory
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")
        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(name, factory, dependencies, lifecycle, config)
        return self

    def configure_services(self) -> 'ServiceContainer':
        """Register the game services. Expects 'socketio' to be provided externally."""
        from charades.deck_manager import DeckManager
        from charades.session_manager import SessionManager
        from charades.services.validation_service import ValidationService
        from charades.services.error_response_factory import ErrorResponseFactory
        from charades.services.game_store import GameStore
        from charades.services.history_service import HistoryService
        from charades.services.session_state_presenter import SessionStatePresenter
        from charades.services.broadcast_service import BroadcastService
        from charades.services.turn_clock_service import TurnClockService

        decks_file = self._config.get('decks_file', 'decks.yaml')

        graph = (
            ('ValidationService', ValidationService, []),
            ('ErrorResponseFactory', ErrorResponseFactory, []),
            ('SessionStatePresenter', SessionStatePresenter, []),
            ('GameStore', GameStore, []),
            ('HistoryService', HistoryService, ['GameStore']),
            ('SessionManager', SessionManager, ['ValidationService', 'HistoryService']),
            ('BroadcastService', BroadcastService,
             ['socketio', 'SessionManager', 'ErrorResponseFactory', 'SessionStatePresenter']),
            ('TurnClockService', TurnClockService, ['SessionManager', 'BroadcastService']),
        )
        for name, service_class, dependencies in graph:
            self.register(name, service_class, dependencies=dependencies)

        self.register('DeckManager', lambda decks_file: DeckManager(decks_file),
                      config={'decks_file': decks_file})
        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Provide an already-built object under `name`."""
        self._instances[name] = instance
        return self

    def set_config(self, config: Dict[str, Any]) -> 'ServiceContainer':
        self._config.update(config)
        return self

    def get_config(self, name: str, default: Any = None) -> Any:
        return self._config.get(name, default)

    def get(self, name: str) -> Any:
        """
        Return the service registered as `name`, building it if needed.

        Raises:
            ServiceNotFoundError: Nothing is registered under `name`
            CircularDependencyError: `name` depends on itself through its dependencies
        """
        if name in self._instances:
            return self._instances[name]
        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")
        return self._build(name)

    def _build(self, name: str) -> Any:
        if name in self._resolving:
            chain = ' -> '.join(self._resolving[self._resolving.index(name):] + [name])
            raise CircularDependencyError(f"Circular dependency detected: {chain}")

        definition = self._services[name]
        self._resolving.append(name)
        try:
            instance = definition.build([self.get(dep) for dep in definition.dependencies])
        finally:
            self._resolving.pop()

        if definition.lifecycle == ServiceLifecycle.SINGLETON:
            self._instances[name] = instance
        return instance

    def has_service(self, name: str) -> bool:
        return name in self._services or name in self._instances

    def get_service_names(self) -> List[str]:
        return list(self._services)

    def validate_dependencies(self) -> Dict[str, List[str]]:
        """Map each service to the dependency names that cannot be resolved; empty when the graph is complete."""
        missing = {}
        for name, definition in self._services.items():
            unresolved = [dep for dep in definition.dependencies if not self.has_service(dep)]
            if unresolved:
                missing[name] = unresolved
        return missing

    def shutdown(self) -> None:
        """Call shutdown() on every built instance that has one."""
        for instance in list(self._instances.values()):
            if not inspect.isclass(instance) and hasattr(instance, 'shutdown'):
                instance.shutdown()

    def clear(self) -> 'ServiceContainer':
        """Drop registrations, instances and config."""
        self._services.clear()
        self._instances.clear()
        self._resolving.clear()
        self._config.clear()
        return self

    def __repr__(self) -> str:
        return f"ServiceContainer(registered={len(self._services)}, built={len(self._instances)})"


_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    global _app_container
    _app_container = None


def configure_container(socketio=None, config=None) -> ServiceContainer:
    """
    Rebuild the global container for the application.

    Args:
        socketio: The Flask-SocketIO server, registered as 'socketio'
        config: Flat settings dictionary (see ConfigurationFactory.to_dict)
    """
    container = get_container().clear()
    if socketio is not None:
        container.set_external_dependency('socketio', socketio)
    if config is not None:
        container.set_config(config)
    return container.configure_services()
