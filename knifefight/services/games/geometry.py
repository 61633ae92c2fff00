import math
from typing import Tuple

FULL_TURN = 360.0


def normalize_angle(angle: float) -> float:
    """Fold an angle in degrees into [0, 360).

    Raises ValueError for NaN or infinite input.
    """
    if not math.isfinite(angle):
        raise ValueError(f"Angle must be finite, got {angle!r}")
    folded = angle % FULL_TURN
    # -1e-20 % 360 rounds up to exactly 360.0
    if folded >= FULL_TURN:
        folded = 0.0
    return folded


def angle_to_point(angle: float, radius: float) -> Tuple[float, float]:
    """Point on a circle of ``radius`` for an angle measured clockwise from up.

    Screen coordinates: y grows downward, so "up" is negative y.
    """
    theta = math.radians(normalize_angle(angle))
    return radius * math.sin(theta), -radius * math.cos(theta)


def distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])
