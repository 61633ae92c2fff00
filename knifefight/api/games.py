from flask import Blueprint, jsonify, request, current_app
from knifefight import socketio
from knifefight.models import create_session, get_session
from knifefight.services.games.state import COLLISION_MODES
from knifefight.services.games.scheduler import start_rotation
from knifefight.socketio_events import end_session, tap_debounced
import math


games = Blueprint('games', __name__)


def _not_found(game_code: str):
    return jsonify({'error': f'Game {game_code.upper()} not found'}), 404


@games.route('/create', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    mode = data.get('collision_mode')
    if mode is not None and mode not in COLLISION_MODES:
        return jsonify({'error': f'collision_mode must be one of {list(COLLISION_MODES)}'}), 400

    session = create_session(current_app.config, collision_mode=mode)
    current_app.logger.info(
        f"[create] game={session.game_code} mode={session.state.variant.mode} speed={session.clock.rotation_speed}"
    )
    start_rotation(current_app._get_current_object(), session.game_code)
    return jsonify(session.to_dict()), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    session = get_session(game_code)
    if not session:
        return _not_found(game_code)
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/tap', methods=['POST'])
def tap(game_code):
    session = get_session(game_code)
    if not session:
        return _not_found(game_code)
    if tap_debounced(session.game_code):
        return jsonify({'message': 'debounced'}), 202

    outcome, state = session.handle_tap()
    current_app.logger.info(
        f"[tap] game={session.game_code} outcome={outcome.value} angle={state['current_angle']:.1f} score={state['score']}"
    )
    socketio.emit('state_update', state, to=f"game:{session.game_code}", namespace='/ws')
    payload = dict(state)
    payload['outcome'] = outcome.value
    return jsonify(payload)


@games.route('/<string:game_code>/advance', methods=['POST'])
def advance_clock(game_code):
    """Move the disc forward by ``elapsed`` time units.

    Lets a renderer that owns its own frame clock drive the rotation.
    """
    session = get_session(game_code)
    if not session:
        return _not_found(game_code)

    data = request.get_json(silent=True) or {}
    elapsed = data.get('elapsed')
    if isinstance(elapsed, bool) or not isinstance(elapsed, (int, float)):
        return jsonify({'error': 'elapsed must be a number'}), 400
    if not math.isfinite(elapsed) or elapsed < 0:
        return jsonify({'error': 'elapsed must be a finite, non-negative number'}), 400

    session.advance(elapsed)
    return jsonify(session.to_dict())


@games.route('/<string:game_code>', methods=['DELETE'])
def end_game(game_code):
    if not get_session(game_code):
        return _not_found(game_code)
    end_session(game_code.upper())
    return jsonify({'message': f'Game {game_code.upper()} ended'})
