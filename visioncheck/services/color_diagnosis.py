"""
Colour Vision Diagnosis

Rule-based classification of plate answers:

1. Tritan errors ≥ 1 with at most one red-green error → blue-yellow
2. No red-green errors → normal
3. Otherwise red-green; the diagnostic-axis plate separates type A (protan,
   red-weak) from type B (deutan, green-weak)

Type B is the default whenever the diagnostic plate does not show the protan
answer. Deutan defects are the more common ones, but this is a screening
heuristic, not a clinical determination.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..errors import InvalidResponseError
from ..models.schema import ColorSeverity, ColorVisionDiagnosis
from .plates import CATALOGUE, NO_NUMBER, SCREENING_CATEGORIES, IshiharaPlate, PlateCategory, get_plate

log = logging.getLogger(__name__)

# Red-green error ratio bands
MILD_MAX_RATIO = 0.25
MODERATE_MAX_RATIO = 0.6


@dataclass(frozen=True)
class PlateResponse:
    plate_id: int
    answer: str
    is_correct: bool


def normalize_answer(answer: Optional[str]) -> str:
    """Digits as typed, anything blank or 'no number' becomes 'none'."""
    if answer is None:
        return NO_NUMBER
    if not isinstance(answer, str):
        raise InvalidResponseError(f"plate answer must be a string, got {answer!r}")
    text = answer.strip().lower()
    if text in ("", NO_NUMBER, "no number", "nothing"):
        return NO_NUMBER
    if not text.isdigit():
        raise InvalidResponseError(f"plate answer must be digits or 'none', got {answer!r}")
    return text


def score_response(plate_id: int, answer: Optional[str],
                   catalogue: Optional[Dict[int, IshiharaPlate]] = None) -> PlateResponse:
    plate = get_plate(plate_id, catalogue)
    normalized = normalize_answer(answer)
    return PlateResponse(plate.id, normalized, normalized == plate.correct_answer)


def score_responses(answers: Iterable[Tuple[int, Optional[str]]],
                    catalogue: Optional[Dict[int, IshiharaPlate]] = None) -> list[PlateResponse]:
    return [score_response(pid, ans, catalogue) for pid, ans in answers]


def red_green_severity(errors: int, plates: int) -> ColorSeverity:
    if errors <= 0 or plates <= 0:
        return "none"
    ratio = errors / plates
    if ratio <= MILD_MAX_RATIO:
        return "mild"
    if ratio <= MODERATE_MAX_RATIO:
        return "moderate"
    return "strong"


def tritan_severity(errors: int) -> ColorSeverity:
    if errors <= 0:
        return "none"
    if errors == 1:
        return "mild"
    if errors == 2:
        return "moderate"
    return "strong"


def diagnose_color_vision(responses: Sequence[PlateResponse],
                          catalogue: Optional[Dict[int, IshiharaPlate]] = None) -> ColorVisionDiagnosis:
    """
    Classify a complete sequence of plate responses.

    Correctness is re-derived from the catalogue; each plate may be answered
    once.

    Args:
        responses: Scored answers in presentation order
        catalogue: Plate definitions (defaults to the built-in set)

    Returns:
        Deficiency type, severity and overall score
    """
    if not responses:
        raise InvalidResponseError("cannot diagnose colour vision from zero plate responses")
    catalogue = CATALOGUE if catalogue is None else catalogue

    rg_plates = rg_errors = tritan_errors = correct = 0
    incorrect: list[int] = []
    axis_answer: Optional[str] = None
    axis_plate: Optional[IshiharaPlate] = None
    control_failed = False

    seen: set[int] = set()
    for resp in responses:
        plate = get_plate(resp.plate_id, catalogue)
        if plate.id in seen:
            raise InvalidResponseError(f"plate {plate.id} answered more than once")
        seen.add(plate.id)
        answer = normalize_answer(resp.answer)
        is_correct = answer == plate.correct_answer
        if is_correct:
            correct += 1
        else:
            incorrect.append(plate.id)

        if plate.category in SCREENING_CATEGORIES:
            rg_plates += 1
            rg_errors += 0 if is_correct else 1
        elif plate.category is PlateCategory.TRITAN_SCREENING:
            tritan_errors += 0 if is_correct else 1
        elif plate.category is PlateCategory.DIAGNOSTIC_AXIS:
            axis_plate, axis_answer = plate, answer
        elif plate.category is PlateCategory.DEMONSTRATION and not is_correct:
            control_failed = True

    if control_failed:
        log.warning("Demonstration plate answered incorrectly; results may reflect testing conditions")

    if tritan_errors >= 1 and rg_errors <= 1:
        deficiency, severity = "blue_yellow", tritan_severity(tritan_errors)
    elif rg_errors == 0:
        deficiency, severity = "none", "none"
    else:
        if axis_plate is not None and axis_plate.alternate_answer is not None and axis_answer == axis_plate.alternate_answer:
            deficiency = "red_green_type_a"
        else:
            deficiency = "red_green_type_b"
        severity = red_green_severity(rg_errors, rg_plates)

    diagnosis = ColorVisionDiagnosis(
        deficiency_type=deficiency,
        severity=severity,
        score_percent=math.floor(correct * 100 / len(responses) + 0.5),
        correct_count=correct,
        total_plates=len(responses),
        red_green_errors=rg_errors,
        tritan_errors=tritan_errors,
        incorrect_plates=incorrect,
        control_failed=control_failed,
    )
    log.info(f"Colour vision: {deficiency} ({severity}), score {diagnosis.score_percent}%")
    return diagnosis
