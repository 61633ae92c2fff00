from typing import Iterable

from .geometry import FULL_TURN, angle_to_point, distance, normalize_angle
from .placement import Placement


class AngularDifferenceDetector:
    """Collision by angular separation alone.

    Pairs with placements recorded at the live disc angle. Two placements
    collide when they are closer than ``threshold_deg`` going either way
    round the circle. Marker size is ignored, so this only approximates
    real overlap.
    """

    def __init__(self, threshold_deg: float = 20.0):
        self.threshold_deg = float(threshold_deg)

    def collides(self, new: Placement, existing: Iterable[Placement], current_angle: float) -> bool:
        new_angle = normalize_angle(new.angle)
        for placed in existing:
            diff = abs(normalize_angle(placed.angle) - new_angle)
            if diff < self.threshold_deg or (FULL_TURN - diff) < self.threshold_deg:
                return True
        return False


class MetricDistanceDetector:
    """Collision by true overlap of round markers on the disc rim.

    Pairs with placements recorded in the disc's rotating frame. Each stored
    angle is combined with the live rotation to get its world position on a
    circle of ``radius``; markers of ``marker_diameter`` overlap when their
    centres are closer than one diameter.
    """

    def __init__(self, radius: float, marker_diameter: float):
        self.radius = float(radius)
        self.marker_diameter = float(marker_diameter)

    def absolute_angle(self, placement: Placement, current_angle: float) -> float:
        return normalize_angle(placement.angle + current_angle + FULL_TURN)

    def position(self, placement: Placement, current_angle: float):
        return angle_to_point(self.absolute_angle(placement, current_angle), self.radius)

    def collides(self, new: Placement, existing: Iterable[Placement], current_angle: float) -> bool:
        new_point = self.position(new, current_angle)
        for placed in existing:
            if distance(new_point, self.position(placed, current_angle)) < self.marker_diameter:
                return True
        return False
