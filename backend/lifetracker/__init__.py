from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _cors_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config, registry=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _cors_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Each app owns its rooms; tests may hand in their own registry
    from lifetracker.services.rooms.registry import RoomRegistry
    if registry is None:
        registry = RoomRegistry(
            max_players=flask_app.config.get('MAX_PLAYERS', 6),
            code_length=flask_app.config.get('ROOM_CODE_LENGTH', 6),
            starting_life=flask_app.config.get('STARTING_LIFE', 40),
            max_log_entries=flask_app.config.get('MAX_LOG_ENTRIES', 50),
        )
    flask_app.extensions['room_registry'] = registry

    from lifetracker.main import main
    flask_app.register_blueprint(main)

    from lifetracker.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    return flask_app
