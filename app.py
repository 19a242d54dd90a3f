"""
Charades - a two-team word-guessing party game.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import os
import logging
import atexit
import sys
import yaml

from charades.deck_manager import ContentValidationError
from container import configure_container
from config_factory import load_config, ConfigurationFactory

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# Configure logging
logging.basicConfig(level=getattr(logging, app_config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# In production, restrict to origins listed in SOCKETIO_CORS_ALLOWED_ORIGINS (comma-separated)
allowed_origins_env = os.environ.get('SOCKETIO_CORS_ALLOWED_ORIGINS', '')
if app_config.is_production:
    _cors_allowed = [o.strip() for o in allowed_origins_env.split(',') if o.strip()]
    socketio = SocketIO(app, cors_allowed_origins=_cors_allowed or [], async_mode='threading')
else:
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# Configure service container with dependencies
container = configure_container(socketio=socketio, config=config_factory.to_dict())

services = {
    'deck_manager': container.get('DeckManager'),
    'session_manager': container.get('SessionManager'),
    'history_service': container.get('HistoryService'),
    'broadcast_service': container.get('BroadcastService'),
    'turn_clock': container.get('TurnClockService'),
    'session_state_presenter': container.get('SessionStatePresenter'),
    'error_response_factory': container.get('ErrorResponseFactory'),
}

# Load decks on startup
try:
    services['deck_manager'].load_decks_from_yaml()
    logger.info(f"Loaded {services['deck_manager'].get_deck_count()} decks from YAML")
except (FileNotFoundError, yaml.YAMLError, ContentValidationError) as e:
    logger.critical(f"FATAL: Deck file validation failed, which is critical for game play. Server shutting down. Error: {e}")
    sys.exit(1)

# Register REST endpoints
from charades.routes.api import create_api_blueprint
app.register_blueprint(create_api_blueprint(services))

# Register Socket.IO handlers
from charades.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio, container)

# Start the turn clock (tests drive it manually through tick_due)
if os.environ.get('TESTING') != '1':
    services['turn_clock'].start()


def cleanup_on_exit():
    """Clean up resources on application exit."""
    logger.info("Shutting down Charades server...")
    services['turn_clock'].stop()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    logger.info(f"Starting Charades server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug,
                     allow_unsafe_werkzeug=True)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    finally:
        cleanup_on_exit()
