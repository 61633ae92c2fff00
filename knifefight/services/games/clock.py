import logging
import math
from typing import Callable, List

from .geometry import FULL_TURN, normalize_angle

logger = logging.getLogger(__name__)

AngleListener = Callable[[float], None]


class RotationClock:
    """Continuously rotating disc angle.

    The angle advances by ``rotation_speed`` full turns per unit of elapsed
    time and wraps at 360. Each accepted advance pushes the new angle to all
    subscribers in subscription order.
    """

    def __init__(self, rotation_speed: float = 0.5, start_angle: float = 0.0):
        rotation_speed = float(rotation_speed)
        if not math.isfinite(rotation_speed) or rotation_speed <= 0:
            raise ValueError(f"rotation_speed must be a positive number, got {rotation_speed!r}")
        self.rotation_speed = rotation_speed
        self._angle = normalize_angle(start_angle)
        self._listeners: List[AngleListener] = []

    @property
    def current_angle(self) -> float:
        return self._angle

    @property
    def period(self) -> float:
        """Time for one full turn."""
        return 1.0 / self.rotation_speed

    def advance(self, elapsed: float) -> float:
        try:
            elapsed = float(elapsed)
        except (TypeError, ValueError):
            logger.warning("Ignoring clock update with non-numeric elapsed=%r", elapsed)
            return self._angle
        if not math.isfinite(elapsed) or elapsed < 0:
            logger.warning("Ignoring clock update with elapsed=%r", elapsed)
            return self._angle

        self._angle = normalize_angle(self._angle + self.rotation_speed * elapsed * FULL_TURN)
        for listener in list(self._listeners):
            listener(self._angle)
        return self._angle

    def subscribe(self, listener: AngleListener) -> Callable[[], None]:
        """Register ``listener`` for angle updates; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
