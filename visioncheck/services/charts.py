"""
Optotype Charts

Distance (Snellen, Sloan letters) and near (Jaeger / N-point) rows with the
physical heights the calibration layer derives for them.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..config import settings
from ..errors import ChartError, InvalidResponseError
from .calibration import decimal_score, n_point_height_mm, required_height_mm
from .rng import SeededRandom

# Sloan letters have near-equal legibility
SLOAN_LETTERS: Tuple[str, ...] = ("C", "D", "E", "F", "H", "K", "N", "O", "P", "R", "S", "V", "Z")


@dataclass(frozen=True)
class AcuityLevel:
    line: int
    denominator: str
    decimal_score: float
    required_height_mm: float
    letters: Tuple[str, ...]


@dataclass(frozen=True)
class NearVisionLevel:
    level: str
    equivalent: str
    required_height_mm: float
    sample_text: str
    decimal_equivalent: float


_DISTANCE_ROWS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("6/60", ("E",)),
    ("6/36", ("F", "P")),
    ("6/24", ("D", "O", "Z")),
    ("6/18", ("N", "P", "E", "H")),
    ("6/12", ("P", "E", "C", "F", "D")),
    ("6/9", ("E", "D", "F", "C", "Z", "P")),
    ("6/7.5", ("F", "E", "K", "O", "P", "Z", "D")),
    ("6/6", ("D", "E", "F", "P", "O", "N", "E", "C")),
)

# (Jaeger, N-point, sample, Snellen decimal equivalent at 40 cm)
# Reading distance at which N-point sizes are quoted
NEAR_REFERENCE_MM = 400.0

_NEAR_ROWS: Tuple[Tuple[str, int, str, float], ...] = (
    ("J10", 36, "THE QUICK BROWN FOX", 0.1),
    ("J8", 24, "THE QUICK BROWN FOX JUMPS", 0.2),
    ("J6", 18, "THE QUICK BROWN FOX JUMPS OVER", 0.29),
    ("J5", 12, "The quick brown fox jumps over the lazy", 0.4),
    ("J3", 8, "The quick brown fox jumps over the lazy dog", 0.5),
    ("J2", 6, "The quick brown fox jumps over the lazy dog nearby", 0.67),
    ("J1", 5, "The quick brown fox jumps over the lazy dog in the field", 0.8),
)


def build_distance_chart(test_distance_mm: float | None = None) -> Tuple[AcuityLevel, ...]:
    """Snellen rows sized for the given test distance (default: settings)."""
    distance = settings.distance_test_mm if test_distance_mm is None else test_distance_mm
    chart = tuple(
        AcuityLevel(
            line=i + 1,
            denominator=den,
            decimal_score=round(decimal_score(den), 2),
            required_height_mm=required_height_mm(den, distance),
            letters=letters,
        )
        for i, (den, letters) in enumerate(_DISTANCE_ROWS)
    )
    validate_distance_chart(chart)
    return chart


def build_near_chart(test_distance_mm: float | None = None) -> Tuple[NearVisionLevel, ...]:
    """Jaeger rows; N-point heights are nominal at 40 cm and scaled to the test distance."""
    distance = settings.near_test_mm if test_distance_mm is None else test_distance_mm
    if not distance > 0:
        raise InvalidResponseError(f"near test distance must be positive, got {distance}")
    scale = distance / NEAR_REFERENCE_MM
    chart = tuple(
        NearVisionLevel(
            level=level,
            equivalent=f"N{n}",
            required_height_mm=n_point_height_mm(n) * scale,
            sample_text=text,
            decimal_equivalent=dec,
        )
        for level, n, text, dec in _NEAR_ROWS
    )
    validate_near_chart(chart)
    return chart


def validate_distance_chart(chart: Sequence[AcuityLevel]) -> None:
    if not chart:
        raise ChartError("distance chart is empty")
    for prev, cur in zip(chart, chart[1:]):
        if not (cur.required_height_mm < prev.required_height_mm and cur.decimal_score > prev.decimal_score):
            raise ChartError(f"{cur.denominator} is not smaller than {prev.denominator}")
    for level in chart:
        if not level.letters:
            raise ChartError(f"{level.denominator} has no letters")
        stray = set(level.letters) - set(SLOAN_LETTERS)
        if stray:
            raise ChartError(f"{level.denominator} uses non-Sloan letters {sorted(stray)}")


def validate_near_chart(chart: Sequence[NearVisionLevel]) -> None:
    if not chart:
        raise ChartError("near chart is empty")
    for prev, cur in zip(chart, chart[1:]):
        if cur.required_height_mm >= prev.required_height_mm:
            raise ChartError(f"{cur.level} is not smaller than {prev.level}")


def sloan_choices(correct: str, rng: SeededRandom, count: int = 4) -> list[str]:
    """Answer buttons for one letter: the correct letter plus distractors, shuffled."""
    if correct not in SLOAN_LETTERS:
        raise InvalidResponseError(f"{correct!r} is not a Sloan letter")
    if not 1 <= count <= len(SLOAN_LETTERS):
        raise InvalidResponseError(f"choice count must be in 1..{len(SLOAN_LETTERS)}, got {count}")
    pool = rng.shuffled([l for l in SLOAN_LETTERS if l != correct])
    return rng.shuffled([correct, *pool[:count - 1]])


DISTANCE_CHART = build_distance_chart()
NEAR_CHART = build_near_chart()
