import os
import random

import pytest

from backend.duodraw.game.models import Room
from backend.duodraw.game.service import SessionCoordinator
from backend.duodraw.game.words import WordSource
from backend.duodraw.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get("SECRET_KEY", "test-secret")
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    ADMIN_TOKEN = "test-admin-token"
    LOG_LEVEL = "DEBUG"
    ROOM_ID = "main-room"
    ROUND_DURATION_SEC = 60
    GUESS_DURATION_SEC = 10
    CORRECT_GUESS_POINTS = 10
    CLOCK_POLL_SEC = 0.05


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingBroadcaster:
    def __init__(self) -> None:
        self.sent = []

    def send(self, sid, event, payload):
        self.sent.append((sid, event, payload))

    def events(self, sid=None, name=None):
        return [
            payload
            for (to, event, payload) in self.sent
            if (sid is None or to == sid) and (name is None or event == name)
        ]

    def names(self, sid=None):
        return [event for (to, event, _payload) in self.sent if sid is None or to == sid]

    def clear(self):
        self.sent = []


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def coordinator(clock, broadcaster):
    return SessionCoordinator(
        Room(id="main-room"),
        broadcaster=broadcaster,
        words=WordSource(["cat"], rng=random.Random(0)),
        clock=clock,
    )


@pytest.fixture()
def playing(coordinator, broadcaster):
    """A room with drawer A and guesser B, mid-round, word 'cat'."""
    coordinator.join("A", "Alice")
    coordinator.join("B", "Bob")
    broadcaster.clear()
    return coordinator


@pytest.fixture()
def flask_app():
    application, _socketio = create_app(TestConfig)
    yield application


@pytest.fixture()
def socketio(flask_app):
    # create_app returns the SocketIO instance; recover it from the extension slot
    return flask_app.extensions["socketio"]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app, socketio):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
