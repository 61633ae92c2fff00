import random
import string
import threading
import time
from typing import Dict, List, Optional, Tuple

from knifefight.services.games.clock import RotationClock
from knifefight.services.games.geometry import angle_to_point, normalize_angle
from knifefight.services.games.state import GameState, TapOutcome, build_variant

GAME_OVER_OVERLAY = {'title': 'Game Over!', 'subtitle': 'Tap to restart'}

_sessions: Dict[str, 'GameSession'] = {}
_sessions_lock = threading.Lock()


class GameSession:
    """One running disc: its clock, its game state and the lock serialising them.

    Clock advances and taps both take ``_lock``, so a tap always sees one
    consistent angle and its collision check and append happen as one step.
    """

    def __init__(self, game_code: str, clock: RotationClock, state: GameState,
                 radius: float, marker_diameter: float):
        self.game_code = game_code
        self.clock = clock
        self.state = state
        self.radius = float(radius)
        self.marker_diameter = float(marker_diameter)
        self.created_at = time.time()
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, game_code: str, cfg, collision_mode: Optional[str] = None) -> 'GameSession':
        block_size = float(cfg.get('BLOCK_SIZE', 200))
        dot_size = float(cfg.get('DOT_SIZE', 10))
        # Marker centres sit one marker size inside the rim
        radius = block_size / 2 - dot_size
        variant = build_variant(
            collision_mode or cfg.get('COLLISION_MODE', 'geometric'),
            threshold_deg=float(cfg.get('ANGLE_THRESHOLD_DEG', 20)),
            radius=radius,
            marker_diameter=dot_size,
        )
        clock = RotationClock(rotation_speed=float(cfg.get('ROTATION_SPEED', 0.5)))
        state = GameState(variant, points_per_placement=int(cfg.get('POINTS_PER_PLACEMENT', 10)))
        return cls(game_code, clock, state, radius=radius, marker_diameter=dot_size)

    def advance(self, elapsed: float) -> float:
        with self._lock:
            return self.clock.advance(elapsed)

    def handle_tap(self) -> Tuple[TapOutcome, dict]:
        with self._lock:
            outcome = self.state.handle_tap(self.clock.current_angle)
            return outcome, self.to_dict()

    def _placements_serialized(self, current_angle: float) -> List[dict]:
        serialized = []
        for index, placement in enumerate(self.state.placements):
            absolute = normalize_angle(placement.angle + current_angle)
            x, y = angle_to_point(absolute, self.radius)
            serialized.append({
                'index': index,
                'angle': placement.angle,
                'absolute_angle': absolute,
                'x': x,
                'y': y,
            })
        return serialized

    def to_dict(self) -> dict:
        with self._lock:
            current_angle = self.clock.current_angle
            return {
                'game_code': self.game_code,
                'status': self.state.status.value,
                'is_over': self.state.is_over,
                'score': self.state.score,
                'current_angle': current_angle,
                'rotation_speed': self.clock.rotation_speed,
                'collision_mode': self.state.variant.mode,
                'radius': self.radius,
                'marker_diameter': self.marker_diameter,
                'placements': self._placements_serialized(current_angle),
                'overlay': dict(GAME_OVER_OVERLAY) if self.state.is_over else None,
            }


def generate_game_code(length=4):
    """Generate a short game code not used by any live session."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _sessions:
            return code


def create_session(cfg, collision_mode: Optional[str] = None) -> GameSession:
    with _sessions_lock:
        code = generate_game_code()
        session = GameSession.from_config(code, cfg, collision_mode=collision_mode)
        _sessions[code] = session
    return session


def get_session(game_code: str) -> Optional[GameSession]:
    if not game_code:
        return None
    return _sessions.get(game_code.upper())


def remove_session(game_code: str) -> Optional[GameSession]:
    with _sessions_lock:
        return _sessions.pop(game_code.upper(), None)


def clear_sessions() -> None:
    with _sessions_lock:
        _sessions.clear()
