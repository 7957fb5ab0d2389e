"""
Physical-Unit Calibration

Converts clinically defined optotype sizes into on-screen logical units.

Key relations:
- Visual angle: height = 2 · tan(θ/2) · distance
- Reference acuity (6/6) subtends 5 arc-minutes; θ scales linearly with the
  Snellen ratio, so the 6/12 row subtends 10 arc-minutes
- At 6 m the 6/6 letter is 8.73 mm tall; at 3 m the same visual angle needs
  half that height, i.e. height_mm = ratio × 8.73 / 2

The units-per-mm factor comes from the display layer (device pixel density);
this module never inspects the device.
"""

import logging
import math
from dataclasses import dataclass
from typing import Literal

from ..config import settings
from ..errors import InvalidResponseError

log = logging.getLogger(__name__)

# 1 N-point is 1/72 inch of type body; cap height is about 0.375 mm
N_POINT_MM = 0.375

TestMode = Literal["distance", "near"]
Instruction = Literal["move_further", "hold_still", "too_far"]


@dataclass(frozen=True)
class DistanceTarget:
    target_cm: float
    tolerance_cm: float
    label: str


DISTANCE_TARGETS: dict[str, DistanceTarget] = {
    "near": DistanceTarget(target_cm=40, tolerance_cm=5, label="40 cm"),
    "distance": DistanceTarget(target_cm=300, tolerance_cm=50, label="3 metres"),
}


# Spoken guidance for each positioning instruction
INSTRUCTION_PROMPTS: dict[str, str] = {
    "move_further": "Keep moving away.",
    "hold_still": "Perfect distance. Hold steady.",
    "too_far": "Too far. Move the phone a little closer.",
}


@dataclass(frozen=True)
class DistanceReading:
    distance_cm: float
    in_range: bool
    instruction: Instruction

    @property
    def prompt(self) -> str:
        return INSTRUCTION_PROMPTS[self.instruction]


@dataclass(frozen=True)
class DisplaySize:
    """Logical size to render, and whether it had to be clamped."""
    requested_units: float
    logical_units: float
    clamped: bool


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidResponseError(f"{name} must be finite, got {value}")


def physical_mm_to_logical_units(mm: float, units_per_mm: float) -> float:
    """Linear conversion from millimetres to logical display units."""
    _require_finite("physical size", mm)
    _require_finite("units_per_mm", units_per_mm)
    if units_per_mm <= 0:
        raise InvalidResponseError(f"units_per_mm must be positive, got {units_per_mm}")
    if mm < 0:
        raise InvalidResponseError(f"physical size must be non-negative, got {mm}")
    return mm * units_per_mm


def visual_angle_height_mm(angle_arcmin: float, distance_mm: float) -> float:
    """
    Height subtending a visual angle at a viewing distance.

    Args:
        angle_arcmin: Full visual angle in arc-minutes
        distance_mm: Viewing distance in mm

    Returns:
        Object height in mm
    """
    _require_finite("visual angle", angle_arcmin)
    _require_finite("distance", distance_mm)
    if distance_mm <= 0:
        raise InvalidResponseError(f"distance must be positive, got {distance_mm}")
    theta = math.radians(angle_arcmin / 60.0)
    return 2.0 * math.tan(theta / 2.0) * distance_mm


def snellen_ratio(denominator: str | float) -> float:
    """
    Size ratio of a Snellen line relative to the reference line.

    "6/12" -> 2.0, "20/40" -> 2.0, "6/7.5" -> 1.25. A bare number is taken as
    the ratio itself.
    """
    if isinstance(denominator, (int, float)):
        ratio = float(denominator)
    else:
        text = denominator.strip()
        try:
            if "/" in text:
                num, den = text.split("/", 1)
                ratio = float(den) / float(num)
            else:
                ratio = float(text)
        except (ValueError, ZeroDivisionError) as e:
            raise InvalidResponseError(f"invalid Snellen fraction {denominator!r}") from e
    _require_finite("Snellen ratio", ratio)
    if ratio <= 0:
        raise InvalidResponseError(f"Snellen ratio must be positive, got {ratio}")
    return ratio


def decimal_score(denominator: str | float) -> float:
    """Decimal acuity (6/12 -> 0.5)."""
    return 1.0 / snellen_ratio(denominator)


def required_height_mm(denominator: str | float, test_distance_mm: float,
                       reference_angle_arcmin: float | None = None) -> float:
    """
    Physical letter height for a Snellen line at a test distance.

    θ = reference angle × Snellen ratio, height = 2 · tan(θ/2) · distance.
    """
    ref = settings.reference_angle_arcmin if reference_angle_arcmin is None else reference_angle_arcmin
    return visual_angle_height_mm(ref * snellen_ratio(denominator), test_distance_mm)


def n_point_height_mm(n_point: float) -> float:
    """Cap height of N-point print used by the near chart."""
    if n_point <= 0:
        raise InvalidResponseError(f"N-point size must be positive, got {n_point}")
    return n_point * N_POINT_MM


def fit_to_display(mm: float, units_per_mm: float, max_units: float) -> DisplaySize:
    """
    Convert to logical units and clamp to the available screen space.

    Clamping is a valid outcome (small screens at short distances) but callers
    must know about it, since the rendered optotype no longer subtends the
    intended angle.
    """
    _require_finite("max_units", max_units)
    if max_units <= 0:
        raise InvalidResponseError(f"max_units must be positive, got {max_units}")
    requested = physical_mm_to_logical_units(mm, units_per_mm)
    if requested > max_units:
        log.warning(f"Optotype of {mm:.2f} mm needs {requested:.1f} units, clamped to {max_units:.1f}")
        return DisplaySize(requested_units=requested, logical_units=max_units, clamped=True)
    return DisplaySize(requested_units=requested, logical_units=requested, clamped=False)


def evaluate_test_distance(distance_cm: float, mode: TestMode) -> DistanceReading:
    """Decide whether the user stands at the right distance for a protocol."""
    try:
        target = DISTANCE_TARGETS[mode]
    except KeyError:
        raise InvalidResponseError(f"unknown test mode {mode!r}") from None
    _require_finite("distance", distance_cm)
    diff = distance_cm - target.target_cm

    if abs(diff) <= target.tolerance_cm:
        return DistanceReading(distance_cm, True, "hold_still")
    if diff > target.tolerance_cm:
        return DistanceReading(distance_cm, False, "too_far")
    return DistanceReading(distance_cm, False, "move_further")
