"""
Undirected Meridians

A meridian is a line through the dial centre, so 0° and 180° are the same
meridian. Averaging uses the doubled-angle (power vector) representation:
double each angle, sum the unit vectors, take atan2, halve the result back
into [0, 180). A plain arithmetic mean of {10°, 170°} gives 90°, the
perpendicular of the right answer.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..config import settings
from ..errors import InvalidMeridianError

_EPS = 1e-9


def normalize(angle_deg: float) -> float:
    """Fold any angle into [0, 180)."""
    a = float(angle_deg) % 180.0
    # -1e-17 % 180 rounds to 180.0
    return 0.0 if a >= 180.0 else a


@dataclass(frozen=True)
class Meridian:
    degrees: float

    def __post_init__(self):
        if not math.isfinite(self.degrees):
            raise InvalidMeridianError(f"meridian angle must be finite, got {self.degrees}")
        object.__setattr__(self, "degrees", normalize(self.degrees))

    def to_vector(self) -> Tuple[float, float]:
        """Unit vector of the doubled angle."""
        th = math.radians(2 * self.degrees)
        return (math.cos(th), math.sin(th))

    @classmethod
    def from_vector(cls, x: float, y: float) -> "Meridian":
        return cls(math.degrees(math.atan2(y, x)) / 2.0)

    def perpendicular(self) -> "Meridian":
        return Meridian(self.degrees + 90.0)

    def distance(self, other: "Meridian") -> float:
        d = abs(self.degrees - other.degrees)
        return min(d, 180.0 - d)


def meridian_distance(a: float, b: float) -> float:
    """Wrap-aware separation of two meridians, in [0, 90]."""
    return Meridian(a).distance(Meridian(b))


def resultant(angles: Iterable[float]) -> Tuple[float, float, int]:
    sx = sy = 0.0
    n = 0
    for a in angles:
        x, y = Meridian(a).to_vector()
        sx += x
        sy += y
        n += 1
    return sx, sy, n


def circular_mean(angles: Iterable[float]) -> Optional[float]:
    """
    Mean meridian of a set of angles, in [0, 180).

    Returns None for an empty set. When the doubled-angle vectors cancel
    exactly (e.g. {0°, 90°}) there is no preferred direction; the smallest
    input angle is returned so the result stays deterministic.
    """
    angles = sorted(normalize(a) for a in angles)
    sx, sy, n = resultant(angles)
    if n == 0:
        return None
    if math.hypot(sx, sy) < _EPS * n:
        return angles[0]
    return Meridian.from_vector(sx, sy).degrees


def mean_resultant_length(angles: Iterable[float]) -> float:
    """Concentration of the angles, 1.0 for all equal, 0.0 for balanced."""
    sx, sy, n = resultant(angles)
    return 0.0 if n == 0 else math.hypot(sx, sy) / n


def dial_meridians(step_deg: Optional[float] = None) -> Tuple[float, ...]:
    step = settings.dial_step_deg if step_deg is None else step_deg
    count = int(round(180.0 / step))
    return tuple(i * step for i in range(count))


def snap_to_dial(angle_deg: float, step_deg: Optional[float] = None) -> float:
    """Nearest dial meridian to a raw tap angle."""
    step = settings.dial_step_deg if step_deg is None else step_deg
    return normalize(round(normalize(angle_deg) / step) * step)


def meridian_from_point(dx: float, dy: float, step_deg: Optional[float] = None) -> float:
    """
    Dial meridian under a tap, from its offset to the dial centre.

    Screen coordinates grow downwards, so dy is negated to get the usual
    counter-clockwise angle from the 3 o'clock direction.
    """
    if dx == 0 and dy == 0:
        raise InvalidMeridianError("tap at the dial centre has no direction")
    return snap_to_dial(math.degrees(math.atan2(-dy, dx)), step_deg)


def to_meridian(angle_deg: float) -> float:
    """Fold a flagged angle into [0, 180); only non-numeric or non-finite input is rejected."""
    try:
        a = float(angle_deg)
    except (TypeError, ValueError) as e:
        raise InvalidMeridianError(f"invalid meridian angle {angle_deg!r}") from e
    return Meridian(a).degrees
