"""
Astigmatic Dial Interpretation

Each eye is tested in two independent rounds. In each round the user flags the
dial meridians that look darker or sharper than the rest, or reports that all
lines look equal (an empty round).

Per eye:
- uniform iff round 1 is empty
- suspected axis = circular mean of the round-1 meridians rotated by 90°
  (the astigmatic axis is perpendicular to the line seen as different)
- rounds consistent when at least half of the smaller round finds a partner
  within the match tolerance in the other round
- severity from the number of round-1 flags and consistency; a single
  inconsistent flag stays mild

Across eyes the worse severity wins.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ..config import settings
from ..errors import SessionFinishedError
from ..models.schema import (
    ASTIGMATISM_SEVERITY_ORDER,
    AstigmatismSeverity,
    Eye,
    EyeAstigmatismResult,
    OverallAstigmatismResult,
)
from .meridians import Meridian, circular_mean, meridian_distance, to_meridian

log = logging.getLogger(__name__)

AstigmatismRound = frozenset

RECOMMENDATIONS: dict[str, str] = {
    "none": "No signs of astigmatism detected. All lines appear equally clear.",
    "mild": "Mild astigmatism may be present. Consider a professional eye exam for confirmation.",
    "moderate": "Moderate astigmatism indicators detected. We recommend scheduling an eye exam with an optometrist.",
    "significant": ("Significant astigmatism indicators detected. Please consult an eye care professional "
                    "for a comprehensive examination and possible corrective lenses."),
}


def make_round(angles: Iterable[float]) -> AstigmatismRound:
    """Fold flagged angles into [0, 180); duplicates (incl. 0°/180°) collapse."""
    return frozenset(to_meridian(a) for a in angles)


def rounds_consistent(round_one: Iterable[float], round_two: Iterable[float],
                      tolerance_deg: Optional[float] = None) -> bool:
    """
    Check round-to-round agreement.

    Two empty rounds agree; exactly one empty round does not.
    """
    tol = settings.meridian_tolerance_deg if tolerance_deg is None else tolerance_deg
    r1, r2 = list(round_one), list(round_two)
    if not r1 and not r2:
        return True
    if not r1 or not r2:
        return False
    matches = sum(1 for a in r1 if any(meridian_distance(a, b) <= tol for b in r2))
    return matches * 2 >= min(len(r1), len(r2))


def grade_severity(flag_count: int, consistent: bool) -> AstigmatismSeverity:
    if flag_count <= 0:
        return "none"
    if flag_count == 1:
        return "mild"
    if not consistent:
        return "significant"
    return "moderate" if flag_count == 2 else "significant"


def suspected_axis(round_one: Iterable[float]) -> Optional[float]:
    mean = circular_mean(round_one)
    if mean is None:
        return None
    return Meridian(mean).perpendicular().degrees


def evaluate_eye(round_one: Iterable[float], round_two: Iterable[float], eye: Optional[Eye] = None,
                 tolerance_deg: Optional[float] = None) -> EyeAstigmatismResult:
    """
    Diagnose one eye from its two rounds.

    Args:
        round_one: Meridians flagged in round 1 (empty = all lines equal)
        round_two: Meridians flagged in round 2
        eye: Eye label carried into the result
        tolerance_deg: Max separation for a round-1 flag to match round 2

    Returns:
        EyeAstigmatismResult
    """
    r1, r2 = make_round(round_one), make_round(round_two)
    consistent = rounds_consistent(r1, r2, tolerance_deg)

    if not r1:
        result = EyeAstigmatismResult(
            eye=eye, is_uniform=True, suspected_axis_degrees=None,
            severity="none", rounds_consistent=consistent,
        )
    else:
        result = EyeAstigmatismResult(
            eye=eye,
            is_uniform=False,
            suspected_axis_degrees=suspected_axis(r1),
            severity=grade_severity(len(r1), consistent),
            rounds_consistent=consistent,
            flagged_meridians=sorted(r1),
        )
    log.info(f"Astigmatism: {result.severity}, axis {result.suspected_axis_degrees}, "
             f"consistent={consistent}", extra={"eye": eye or "-"})
    return result


# ─── Per-eye procedure ───────────────────────────────────────────────

@dataclass(frozen=True)
class AwaitingRound:
    eye: Optional[Eye]
    round_number: int
    round_one: Optional[AstigmatismRound] = None


AstigmatismStep = Union[AwaitingRound, EyeAstigmatismResult]


def start_eye(eye: Optional[Eye] = None) -> AwaitingRound:
    return AwaitingRound(eye=eye, round_number=1)


def submit_round(step: AstigmatismStep, angles: Iterable[float]) -> AstigmatismStep:
    """Record one round; the second round produces the eye's result."""
    if isinstance(step, EyeAstigmatismResult):
        raise SessionFinishedError("both astigmatism rounds already recorded for this eye")
    flagged = make_round(angles)
    if step.round_number == 1:
        log.debug(f"Round 1: {sorted(flagged)}", extra={"eye": step.eye or "-"})
        return AwaitingRound(eye=step.eye, round_number=2, round_one=flagged)
    return evaluate_eye(step.round_one or frozenset(), flagged, eye=step.eye)


def worse_severity(a: AstigmatismSeverity, b: AstigmatismSeverity) -> AstigmatismSeverity:
    return a if ASTIGMATISM_SEVERITY_ORDER[a] >= ASTIGMATISM_SEVERITY_ORDER[b] else b


def aggregate(od: EyeAstigmatismResult, os: EyeAstigmatismResult) -> OverallAstigmatismResult:
    overall = worse_severity(od.severity, os.severity)
    return OverallAstigmatismResult(
        od=od, os=os, overall_suspicion=overall, recommendation=RECOMMENDATIONS[overall],
    )
