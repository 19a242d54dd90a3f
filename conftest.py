"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os
from unittest.mock import Mock

# Ensure testing environment
os.environ['TESTING'] = '1'


@pytest.fixture(scope="function", autouse=True)
def reset_configuration():
    """Reload configuration from the environment before each test."""
    from config_factory import ConfigurationFactory
    from charades.config.game_settings import reset_game_settings

    factory = ConfigurationFactory()
    factory.reset()
    factory.load_from_environment()
    reset_game_settings()

    yield

    factory.reset()
    factory.load_from_environment()
    reset_game_settings()


@pytest.fixture(scope="session")
def app():
    """Create Flask app for testing."""
    from app import app as flask_app
    return flask_app


@pytest.fixture(scope="session")
def socketio():
    """Create SocketIO instance for testing."""
    from app import socketio as socketio_instance
    return socketio_instance


@pytest.fixture(scope="function")
def app_container(app):
    """The application's own container, with live sessions and stored games cleared."""
    from app import container as application_container
    application_container.get('SessionManager').clear()
    application_container.get('GameStore').clear()
    yield application_container
    application_container.get('SessionManager').clear()
    application_container.get('GameStore').clear()


@pytest.fixture(scope="function")
def container():
    """Create an isolated service container with a mocked Socket.IO instance."""
    from container import ServiceContainer
    from config_factory import ConfigurationFactory

    test_container = ServiceContainer()
    test_container.set_external_dependency('socketio', Mock())
    test_container.set_config(ConfigurationFactory().to_dict())
    test_container.configure_services()
    return test_container


@pytest.fixture(scope="function")
def session_manager(container):
    """Provide SessionManager through dependency injection."""
    return container.get('SessionManager')


@pytest.fixture(scope="function")
def game_store(container):
    return container.get('GameStore')


@pytest.fixture(scope="function")
def history_service(container):
    return container.get('HistoryService')


@pytest.fixture(scope="function")
def broadcast_service(container):
    return container.get('BroadcastService')


@pytest.fixture(scope="function")
def turn_clock(container):
    """Provide TurnClockService (its background thread is never started here)."""
    return container.get('TurnClockService')


@pytest.fixture(scope="function")
def validation_service(container):
    return container.get('ValidationService')


@pytest.fixture(scope="function")
def error_response_factory(container):
    return container.get('ErrorResponseFactory')
