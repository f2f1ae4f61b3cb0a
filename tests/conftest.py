import os
import sys
import pytest

# Ensure the project root (containing `config` and the `livequiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from config import Config
from livequiz import create_app, socketio
from livequiz.models import Quiz
from livequiz.services.games.scheduler import ManualScheduler
from livequiz.services.games.session import Session


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    RESULTS_DISPLAY_SEC = 5
    GAME_CODE_LENGTH = 6
    CLOSE_WHEN_ALL_ANSWERED = True
    SOCKETIO_NAMESPACE = '/'


def quiz_data(limits=(30, 20), correct=1):
    return {
        'title': 'Capitals',
        'description': 'Warm-up round',
        'questions': [
            {
                'id': f'q{i + 1}',
                'text': f'Question {i + 1}?',
                'options': ['A', 'B', 'C', 'D'],
                'correctAnswer': correct,
                'explanation': f'Because of reason {i + 1}',
                'timeLimit': limit,
            }
            for i, limit in enumerate(limits)
        ],
    }


@pytest.fixture()
def make_quiz_data():
    return quiz_data


@pytest.fixture()
def scheduler():
    return ManualScheduler()


class EventRecorder:
    def __init__(self):
        self.events = []

    def __call__(self, session, event):
        self.events.append(event)

    def names(self):
        return [e.name for e in self.events]


@pytest.fixture()
def recorder():
    return EventRecorder()


@pytest.fixture()
def make_session(scheduler, recorder):
    def _make(limits=(30, 20), host='host-1', **kwargs):
        return Session(
            'ABC123',
            Quiz.from_dict(quiz_data(limits)),
            host,
            scheduler=scheduler,
            clock=scheduler.clock,
            on_event=recorder,
            **kwargs,
        )
    return _make


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler, clock=scheduler.clock)
    yield application


@pytest.fixture()
def hub(flask_app):
    return flask_app.extensions['livequiz']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


class SocketClient:
    """Thin wrapper over the Flask-SocketIO test client that keeps a backlog."""

    def __init__(self, flask_app):
        self.raw = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        self.backlog = []
        self.sid = self.take('connected')[0]['id']

    def emit(self, name, *args):
        self.raw.emit(name, *args)

    def _pull(self):
        self.backlog.extend(self.raw.get_received())

    def take(self, name):
        """Remove and return the payloads of every received event called ``name``."""
        self._pull()
        matched = [pkt['args'][0] for pkt in self.backlog if pkt['name'] == name]
        self.backlog = [pkt for pkt in self.backlog if pkt['name'] != name]
        return matched

    def names(self):
        self._pull()
        return [pkt['name'] for pkt in self.backlog]

    def clear(self):
        self._pull()
        self.backlog = []

    def disconnect(self):
        if self.raw.is_connected():
            self.raw.disconnect()


@pytest.fixture()
def connect(flask_app):
    clients = []

    def _connect():
        c = SocketClient(flask_app)
        clients.append(c)
        return c

    yield _connect
    for c in clients:
        try:
            c.disconnect()
        except Exception:
            pass
