import os
import sys
import pytest

# Ensure the project root (containing the `scorekeeper` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from scorekeeper import create_app
from scorekeeper.services.scoreboard.persistence import MemoryStore, PersistenceAdapter


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SCOREBOARD_STORE = 'memory'
    SCOREBOARD_KEY = 'scoreTrackerData'
    SCOREBOARD_TTL_HOURS = 2
    DEFAULT_ROSTER_SIZE = 2
    QUICK_SCORE_VALUES = [1, 2]
    RECENT_HISTORY_LIMIT = 2
    CORS_ORIGINS = ['http://localhost:5173']


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, hours=0, seconds=0):
        self.now += hours * 3600 + seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return MemoryStore(clock)


@pytest.fixture()
def persistence(store):
    return PersistenceAdapter(store)


@pytest.fixture()
def flask_app(store):
    application = create_app(TestConfig, store=store)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()
