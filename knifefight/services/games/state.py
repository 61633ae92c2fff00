import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Tuple, Union

from .collision import AngularDifferenceDetector, MetricDistanceDetector
from .placement import Placement, place_counter_rotated, place_live

logger = logging.getLogger(__name__)

ANGULAR = 'angular'
GEOMETRIC = 'geometric'
COLLISION_MODES = (ANGULAR, GEOMETRIC)


class GameStatus(str, Enum):
    PLAYING = 'playing'
    GAME_OVER = 'game_over'


class TapOutcome(str, Enum):
    PLACED = 'placed'
    GAME_OVER = 'game_over'
    RESET = 'reset'


Detector = Union[AngularDifferenceDetector, MetricDistanceDetector]


@dataclass(frozen=True)
class Variant:
    """A placement rule and the collision test that matches it.

    The two are only meaningful together; a game never mixes rules from
    different variants.
    """
    mode: str
    place: Callable[[float], Placement]
    detector: Detector


def build_variant(mode: str = GEOMETRIC, *, threshold_deg: float = 20.0,
                  radius: float = 90.0, marker_diameter: float = 10.0) -> Variant:
    if mode == ANGULAR:
        if threshold_deg <= 0:
            raise ValueError(f"threshold_deg must be positive, got {threshold_deg!r}")
        return Variant(ANGULAR, place_live, AngularDifferenceDetector(threshold_deg))
    if mode == GEOMETRIC:
        if radius <= 0 or marker_diameter <= 0:
            raise ValueError(
                f"radius and marker_diameter must be positive, got {radius!r}, {marker_diameter!r}"
            )
        return Variant(GEOMETRIC, place_counter_rotated, MetricDistanceDetector(radius, marker_diameter))
    raise ValueError(f"Unknown collision mode {mode!r}; expected one of {COLLISION_MODES}")


class GameState:
    """Score, placed markers and the playing/game-over state machine.

    playing   + tap, no collision -> playing (marker appended, score += points)
    playing   + tap, collision    -> game_over
    game_over + tap               -> playing (full reset)
    """

    def __init__(self, variant: Variant, points_per_placement: int = 10):
        self.variant = variant
        self.points_per_placement = int(points_per_placement)
        self.score = 0
        self._placements: List[Placement] = []
        self.status = GameStatus.PLAYING

    @property
    def is_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    @property
    def placements(self) -> Tuple[Placement, ...]:
        return tuple(self._placements)

    def reset(self) -> None:
        self.score = 0
        self._placements = []
        self.status = GameStatus.PLAYING

    def handle_tap(self, current_angle: float) -> TapOutcome:
        if self.is_over:
            self.reset()
            return TapOutcome.RESET

        placement = self.variant.place(current_angle)
        if self.variant.detector.collides(placement, self._placements, current_angle):
            self.status = GameStatus.GAME_OVER
            logger.info("Collision at angle %.2f after %d placements, final score %d",
                        current_angle, len(self._placements), self.score)
            return TapOutcome.GAME_OVER

        self._placements.append(placement)
        self.score += self.points_per_placement
        return TapOutcome.PLACED
