from flask_socketio import join_room, leave_room, emit
from knifefight import socketio
from flask import current_app, request
from knifefight.models import get_session, remove_session
from knifefight.services.games.scheduler import detach_frame_publisher
from typing import Dict, Any
import time


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # When the last socket watching a game goes away, end that game
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if ctx:
        _release_member(ctx['game_code'])


def handle_join_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    session = get_session(game_code)
    if not session:
        emit('error', {'message': f'Game {game_code.upper()} not found'})
        return
    room = f"game:{session.game_code}"
    join_room(room)
    sid = _get_sid()
    previous = _sid_to_ctx.get(sid)
    if not previous or previous['game_code'] != session.game_code:
        # Track room membership per socket; switching games releases the old one
        _sid_to_ctx[sid] = {'game_code': session.game_code}
        _member_count[session.game_code] = _member_count.get(session.game_code, 0) + 1
        _cancel_scheduled_end(session.game_code)
        if previous:
            leave_room(f"game:{previous['game_code']}")
            _release_member(previous['game_code'])
    emit('joined', {'room': room, 'state': session.to_dict()})


def handle_leave_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = f"game:{game_code.upper()}"
    leave_room(room)
    emit('left', {'room': room})
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx['game_code'] == game_code.upper():
        _sid_to_ctx.pop(_get_sid(), None)
        _release_member(ctx['game_code'])


def handle_tap(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        ctx = _sid_to_ctx.get(_get_sid())
        game_code = ctx.get('game_code') if ctx else None
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    session = get_session(game_code)
    if not session:
        emit('error', {'message': f'Game {game_code.upper()} not found'})
        return
    if tap_debounced(session.game_code):
        emit('tap_result', {'outcome': 'debounced', 'state': session.to_dict()})
        return

    outcome, state = session.handle_tap()
    current_app.logger.info(
        f"[tap] game={session.game_code} outcome={outcome.value} angle={state['current_angle']:.1f} score={state['score']} via=ws"
    )
    emit('tap_result', {'outcome': outcome.value, 'state': state})
    socketio.emit('state_update', state, to=f"game:{session.game_code}", namespace='/ws')


def handle_ping(data):
    emit('pong', data or {})

# ---- Session lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_member_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}
_last_tap: Dict[str, float] = {}

def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def tap_debounced(game_code: str) -> bool:
    """True if a tap on this game lands inside TAP_DEBOUNCE_MS of the last accepted one."""
    try:
        debounce_ms = int(current_app.config.get('TAP_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms <= 0:
        return False
    key = game_code.upper()
    now = time.time() * 1000.0
    last = _last_tap.get(key, 0)
    if now - last < debounce_ms:
        return True
    _last_tap[key] = now
    return False

def end_session(game_code: str) -> None:
    """End the session: stop publishing frames, notify clients and drop it from the registry."""
    detach_frame_publisher(game_code)
    _member_count.pop(game_code, None)
    _end_deadline.pop(game_code, None)
    _last_tap.pop(game_code, None)
    session = remove_session(game_code)
    # Use socketio.emit since this may be called outside a socket handler
    socketio.emit('session_ended', {'game_code': game_code}, to=f"game:{game_code}", namespace='/ws')
    if session:
        current_app.logger.info(f"[session-end] game={game_code} final_score={session.state.score}")

def _release_member(game_code: str) -> None:
    remaining = _member_count.get(game_code, 0) - 1
    if remaining > 0:
        _member_count[game_code] = remaining
        return
    _member_count.pop(game_code, None)
    if not get_session(game_code):
        return
    grace = float(current_app.config.get('SESSION_GRACE_SEC', 0) or 0)
    if grace <= 0:
        end_session(game_code)
        return
    _schedule_end_if_empty(current_app._get_current_object(), game_code, grace)

def _schedule_end_if_empty(app, game_code: str, delay_sec: float) -> None:
    _end_deadline[game_code] = time.time() + delay_sec
    app.logger.info(f"[session-grace] game={game_code} ending in {delay_sec}s unless a socket rejoins")

    def _runner(code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _member_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            with app.app_context():
                end_session(code)

    socketio.start_background_task(_runner, game_code, _end_deadline[game_code])

def _cancel_scheduled_end(game_code: str) -> None:
    _end_deadline.pop(game_code, None)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    # Primary namespace
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('disconnect', handle_disconnect, namespace='/ws')
    socketio.on_event('join_game', handle_join_game, namespace='/ws')
    socketio.on_event('leave_game', handle_leave_game, namespace='/ws')
    socketio.on_event('tap', handle_tap, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('disconnect', handle_disconnect, namespace='/')
        socketio.on_event('join_game', handle_join_game, namespace='/')
        socketio.on_event('leave_game', handle_leave_game, namespace='/')
        socketio.on_event('tap', handle_tap, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
