import os
import sys
import pytest

# Ensure the repo root (containing the `knifefight` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from knifefight import create_app, socketio
from knifefight.models import clear_sessions
from knifefight.services.games import scheduler
from knifefight import socketio_events


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    ROTATION_SPEED = 0.5
    COLLISION_MODE = 'geometric'
    ANGLE_THRESHOLD_DEG = 20
    BLOCK_SIZE = 200
    DOT_SIZE = 10
    POINTS_PER_PLACEMENT = 10
    TAP_DEBOUNCE_MS = 0
    SESSION_GRACE_SEC = 0


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    clear_sessions()
    scheduler._frame_publishers.clear()
    scheduler._running_clocks.clear()
    socketio_events._sid_to_ctx.clear()
    socketio_events._member_count.clear()
    socketio_events._end_deadline.clear()
    socketio_events._last_tap.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
