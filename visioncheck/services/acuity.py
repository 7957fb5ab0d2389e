"""
Acuity Progression

Staged test logic for one eye under one protocol, expressed as immutable state
values and pure transition functions.

Distance (Snellen) protocol:
- Rows of decreasing size, several letters per row
- A correct answer resets the consecutive-error counter
- Two consecutive wrong answers end the test at the previous row
- A wrong answer on the last letter of a row ends the test at the previous row
- "Cannot see" ends the test at the previous row immediately

Near (Jaeger) protocol: one item per row, binary can/cannot read, ending at the
previous row on the first "cannot read".

Failing the largest row is a valid outcome: the result is the largest row with
`below_chart` set.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence, Union

from ..errors import InvalidResponseError, SessionFinishedError
from ..models.schema import Eye, EyeAcuityResult
from .charts import DISTANCE_CHART, NEAR_CHART, AcuityLevel, NearVisionLevel

log = logging.getLogger(__name__)

MAX_CONSECUTIVE_ERRORS = 2


@dataclass(frozen=True)
class AcuitySessionState:
    level_index: int = 0
    letter_index: int = 0
    consecutive_errors: int = 0


@dataclass(frozen=True)
class AwaitingAnswer:
    state: AcuitySessionState
    eye: Optional[Eye] = None


@dataclass(frozen=True)
class Finished:
    result: EyeAcuityResult


AcuityStep = Union[AwaitingAnswer, Finished]


def _awaiting(step: AcuityStep) -> AwaitingAnswer:
    if isinstance(step, Finished):
        raise SessionFinishedError(f"{step.result.protocol} test already finished at {step.result.level_label}")
    return step


def _finish_distance(step: AwaitingAnswer, chart: Sequence[AcuityLevel], best_index: int,
                     below_chart: bool = False) -> Finished:
    best = chart[best_index]
    result = EyeAcuityResult(
        eye=step.eye,
        protocol="distance",
        level_label=best.denominator,
        decimal_score=best.decimal_score,
        levels_passed=0 if below_chart else best_index + 1,
        below_chart=below_chart,
    )
    log.info(f"Distance acuity finished at {best.denominator}"
             f"{' (below chart)' if below_chart else ''}", extra={"eye": step.eye or "-"})
    return Finished(result)


def _fail_row(step: AwaitingAnswer, chart: Sequence[AcuityLevel]) -> Finished:
    level = step.state.level_index
    if level == 0:
        return _finish_distance(step, chart, 0, below_chart=True)
    return _finish_distance(step, chart, level - 1)


# ─── Distance protocol ───────────────────────────────────────────────

def start_distance_test(eye: Optional[Eye] = None) -> AwaitingAnswer:
    return AwaitingAnswer(AcuitySessionState(), eye)


def current_level(step: AcuityStep, chart: Sequence[AcuityLevel] = DISTANCE_CHART) -> AcuityLevel:
    return chart[_awaiting(step).state.level_index]


def current_letter(step: AcuityStep, chart: Sequence[AcuityLevel] = DISTANCE_CHART) -> str:
    s = _awaiting(step).state
    return chart[s.level_index].letters[s.letter_index]


def record_distance_response(step: AcuityStep, correct: bool,
                             chart: Sequence[AcuityLevel] = DISTANCE_CHART) -> AcuityStep:
    """
    Advance the distance protocol by one answer.

    Args:
        step: Current state (must not be finished)
        correct: Whether the letter was identified
        chart: Snellen rows, largest first

    Returns:
        The next AwaitingAnswer, or Finished with the eye's result
    """
    step = _awaiting(step)
    s = step.state
    row = chart[s.level_index]
    more_letters = s.letter_index < len(row.letters) - 1

    if not correct:
        errors = s.consecutive_errors + 1
        if errors >= MAX_CONSECUTIVE_ERRORS or not more_letters:
            return _fail_row(step, chart)
        log.debug(f"Miss on {row.denominator} letter {s.letter_index}", extra={"eye": step.eye or "-"})
        return replace(step, state=replace(s, letter_index=s.letter_index + 1, consecutive_errors=errors))

    if more_letters:
        return replace(step, state=replace(s, letter_index=s.letter_index + 1, consecutive_errors=0))
    if s.level_index < len(chart) - 1:
        log.debug(f"Row {row.denominator} passed", extra={"eye": step.eye or "-"})
        return replace(step, state=AcuitySessionState(level_index=s.level_index + 1))
    return _finish_distance(step, chart, len(chart) - 1)


def submit_letter(step: AcuityStep, letter: str,
                  chart: Sequence[AcuityLevel] = DISTANCE_CHART) -> AcuityStep:
    """Compare a tapped letter with the one on screen and advance."""
    if not isinstance(letter, str) or not letter.strip():
        raise InvalidResponseError(f"letter answer must be a non-empty string, got {letter!r}")
    correct = letter.strip().upper() == current_letter(step, chart)
    return record_distance_response(step, correct, chart)


def cannot_see(step: AcuityStep, chart: Sequence[AcuityLevel] = DISTANCE_CHART) -> Finished:
    return _fail_row(_awaiting(step), chart)


def run_distance_test(letters: Iterable[Optional[str]], eye: Optional[Eye] = None,
                      chart: Sequence[AcuityLevel] = DISTANCE_CHART) -> EyeAcuityResult:
    """
    Fold a sequence of tapped letters into a result.

    None stands for "cannot see". The sequence must drive the test to its end.
    """
    step: AcuityStep = start_distance_test(eye)
    for letter in letters:
        step = cannot_see(step, chart) if letter is None else submit_letter(step, letter, chart)
    if not isinstance(step, Finished):
        raise InvalidResponseError("distance responses ended before the test finished")
    return step.result


# ─── Near protocol ───────────────────────────────────────────────────

def _finish_near(step: AwaitingAnswer, chart: Sequence[NearVisionLevel], best_index: int,
                 below_chart: bool = False) -> Finished:
    best = chart[best_index]
    result = EyeAcuityResult(
        eye=step.eye,
        protocol="near",
        level_label=best.level,
        equivalent=best.equivalent,
        decimal_score=best.decimal_equivalent,
        levels_passed=0 if below_chart else best_index + 1,
        below_chart=below_chart,
    )
    log.info(f"Near acuity finished at {best.level} ({best.equivalent})"
             f"{' (below chart)' if below_chart else ''}", extra={"eye": step.eye or "-"})
    return Finished(result)


def start_near_test(eye: Optional[Eye] = None) -> AwaitingAnswer:
    return AwaitingAnswer(AcuitySessionState(), eye)


def current_near_level(step: AcuityStep, chart: Sequence[NearVisionLevel] = NEAR_CHART) -> NearVisionLevel:
    return chart[_awaiting(step).state.level_index]


def record_near_response(step: AcuityStep, can_read: bool,
                         chart: Sequence[NearVisionLevel] = NEAR_CHART) -> AcuityStep:
    step = _awaiting(step)
    level = step.state.level_index
    if can_read:
        if level < len(chart) - 1:
            return replace(step, state=AcuitySessionState(level_index=level + 1))
        return _finish_near(step, chart, len(chart) - 1)
    if level == 0:
        return _finish_near(step, chart, 0, below_chart=True)
    return _finish_near(step, chart, level - 1)


def run_near_test(answers: Iterable[bool], eye: Optional[Eye] = None,
                  chart: Sequence[NearVisionLevel] = NEAR_CHART) -> EyeAcuityResult:
    step: AcuityStep = start_near_test(eye)
    for can_read in answers:
        step = record_near_response(step, can_read, chart)
    if not isinstance(step, Finished):
        raise InvalidResponseError("near responses ended before the test finished")
    return step.result
