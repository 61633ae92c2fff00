from dataclasses import dataclass


@dataclass(frozen=True)
class Placement:
    """A marker stuck into the disc, stored as the angle recorded at tap time."""
    angle: float


def place_live(current_angle: float) -> Placement:
    """Record the disc's live angle as-is."""
    return Placement(angle=float(current_angle))


def place_counter_rotated(current_angle: float) -> Placement:
    """Record the angle in the disc's own rotating frame.

    Negating the live angle means the marker, drawn rotated by its stored
    angle inside the spinning disc, lands directly above the stationary
    indicator at the moment of the tap.
    """
    return Placement(angle=-float(current_angle))
