import json
import os
import sys
import pytest

# Ensure the backend root (containing the `lifetracker` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from lifetracker import create_app, socketio

NAMESPACE = '/ws'


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = '*'
    ALLOW_UNSAFE_WERKZEUG = False
    STARTING_LIFE = 40
    MAX_PLAYERS = 6
    MAX_LOG_ENTRIES = 50
    ROOM_CODE_LENGTH = 6


class WsClient:
    """Thin wrapper over the Socket.IO test client speaking JSON text frames."""

    def __init__(self, test_client):
        self.raw = test_client

    def send(self, **payload):
        self.raw.send(json.dumps(payload), namespace=NAMESPACE)

    def send_text(self, text):
        self.raw.send(text, namespace=NAMESPACE)

    def messages(self):
        """Drain and decode everything received since the last call."""
        out = []
        for pkt in self.raw.get_received(NAMESPACE):
            if pkt['name'] not in ('message', 'json'):
                continue
            args = pkt['args']
            if isinstance(args, list):
                args = args[0]
            out.append(json.loads(args) if isinstance(args, str) else args)
        return out

    def last(self, message_type):
        matches = [m for m in self.messages() if m['type'] == message_type]
        assert matches, f"no {message_type} received"
        return matches[-1]

    def disconnect(self):
        self.raw.disconnect(namespace=NAMESPACE)

    def is_connected(self):
        return self.raw.is_connected(NAMESPACE)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['room_registry']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def ws_factory(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=NAMESPACE,
        )
        ws = WsClient(test_client)
        created.append(ws)
        return ws

    yield _make
    for ws in created:
        try:
            if ws.is_connected():
                ws.disconnect()
        except Exception:
            pass


@pytest.fixture()
def host(ws_factory):
    """A connection that has already created a room."""
    ws = ws_factory()
    ws.send(type='CREATE_ROOM')
    created = ws.last('ROOM_CREATED')
    ws.code = created['roomCode']
    ws.player_id = created['playerId']
    return ws
