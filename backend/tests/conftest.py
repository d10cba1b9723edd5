import logging
import os
import sys
import pytest

# Ensure the backend root (containing the `trivia` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from trivia import create_app, socketio
from trivia.models import Question
from trivia.questions import QuestionBank
from trivia.services.contests import SessionRegistry
from trivia.services.contests.scheduler import TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    QUESTIONS_FILE = os.path.join(CURRENT_DIR, 'fixtures', 'questions.json')
    QUESTION_DURATION_SEC = 60
    REVEAL_DURATION_SEC = 3
    SKIP_DURATION_SEC = 2
    POINTS_PER_CORRECT = 10
    DEFAULT_QUESTION_COUNT = 10
    MAX_QUESTION_COUNT = 50
    ROOM_CODE_LENGTH = 5
    ROOM_CODE_ATTEMPTS = 20


class ManualScheduler:
    """Collects timers instead of sleeping; tests fire them explicitly."""

    def __init__(self):
        self.timers = []

    def call_later(self, delay, callback, *args):
        handle = TimerHandle(delay, callback, args)
        self.timers.append(handle)
        return handle

    @property
    def live(self):
        return [t for t in self.timers if not t.cancelled]

    def fire(self, handle):
        # Fires even a cancelled handle: simulates a wakeup racing its cancellation
        if handle in self.timers:
            self.timers.remove(handle)
        handle.callback(*handle.args)

    def fire_next(self):
        live = self.live
        assert live, 'no live timers to fire'
        self.fire(live[0])
        return live[0]


class RecordingGateway:
    def __init__(self):
        self.sent = []
        self.closed_rooms = []

    def to_room(self, room_id, event, payload):
        self.sent.append(('room', room_id, event, payload))

    def to_connection(self, connection_id, event, payload):
        self.sent.append(('sid', connection_id, event, payload))

    def close_room(self, room_id):
        self.closed_rooms.append(room_id)

    def events(self, name=None):
        return [s for s in self.sent if name is None or s[2] == name]

    def payloads(self, name):
        return [s[3] for s in self.events(name)]

    def clear(self):
        self.sent.clear()


def make_question(qid='q-sum'):
    return Question(qid, 'What is 2+2?', ['3', '4', '5', '6'], 1)


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def bank():
    return QuestionBank([make_question()])


@pytest.fixture()
def registry(bank, gateway, scheduler):
    settings = {k: getattr(TestConfig, k) for k in dir(TestConfig) if k.isupper()}
    return SessionRegistry(
        questions=bank,
        gateway=gateway,
        scheduler=scheduler,
        settings=settings,
        logger=logging.getLogger('trivia.tests'),
        code_factory=lambda length: 'ABCDE',
    )


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app)
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
