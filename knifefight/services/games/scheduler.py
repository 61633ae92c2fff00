import time
from typing import Callable, Dict, Set

from knifefight import socketio
from knifefight.models import get_session


_running_clocks: Set[str] = set()
_frame_publishers: Dict[str, Callable[[], None]] = {}

DEFAULT_FRAME_INTERVAL_SEC = 1 / 30


def attach_frame_publisher(game_code: str) -> None:
    """Push a 'frame' with the full render feed to the game's room on every clock advance."""
    session = get_session(game_code)
    if not session or session.game_code in _frame_publishers:
        return
    room = f"game:{session.game_code}"

    def _publish(angle: float) -> None:
        socketio.emit('frame', session.to_dict(), to=room, namespace='/ws')

    _frame_publishers[session.game_code] = session.clock.subscribe(_publish)


def detach_frame_publisher(game_code: str) -> None:
    unsubscribe = _frame_publishers.pop(game_code.upper(), None)
    if unsubscribe:
        unsubscribe()


def start_rotation(app, game_code: str) -> None:
    """Start the background task that keeps the session's disc spinning.

    - Attaches the frame publisher so every advance reaches the room
    - No-ops in TESTING mode (tests drive the clock through /advance)
    - Ensures a single worker per game code
    - The worker keeps running through game over and stops once the session is removed
    """
    attach_frame_publisher(game_code)

    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    code = game_code.upper()
    if code in _running_clocks:
        app.logger.info(f"[clock-skip] game={code} already running")
        return

    interval = float(app.config.get('FRAME_INTERVAL_SEC', DEFAULT_FRAME_INTERVAL_SEC))
    if not interval > 0:
        app.logger.warning(f"[clock-config] FRAME_INTERVAL_SEC={interval} invalid, using {DEFAULT_FRAME_INTERVAL_SEC:.4f}")
        interval = DEFAULT_FRAME_INTERVAL_SEC

    _running_clocks.add(code)
    app.logger.info(f"[clock-start] game={code} interval={interval:.4f}s")

    def _worker(gid: str, delay: float):
        hb = float(app.config.get('CLOCK_HEARTBEAT_SEC', 0) or 0)
        last = time.monotonic()
        last_beat = last
        while True:
            socketio.sleep(delay)
            session = get_session(gid)
            if session is None:
                _running_clocks.discard(gid)
                app.logger.info(f"[clock-stop] game={gid} session ended")
                return
            now = time.monotonic()
            angle = session.advance(now - last)
            last = now
            if hb > 0 and now - last_beat >= hb:
                last_beat = now
                app.logger.info(
                    f"[clock-heartbeat] game={gid} angle={angle:.1f} score={session.state.score} status={session.state.status.value}"
                )

    socketio.start_background_task(_worker, code, interval)
