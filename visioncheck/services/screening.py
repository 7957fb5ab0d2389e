"""
Screening Report

Collects whichever test results a session produced into one record. The
caller passes timestamps in; nothing here reads the clock.
"""

import logging
from typing import Optional

from ..errors import InvalidResponseError
from ..models.schema import (
    ColorVisionDiagnosis,
    EyeAcuityResult,
    OverallAstigmatismResult,
    ScreeningReport,
)
from .interpretation import interpret_acuity

log = logging.getLogger(__name__)


def _check_protocol(result: Optional[EyeAcuityResult], protocol: str, name: str) -> None:
    if result is not None and result.protocol != protocol:
        raise InvalidResponseError(f"{name} must be a {protocol} result, got {result.protocol}")


def build_report(distance_od: Optional[EyeAcuityResult] = None,
                 distance_os: Optional[EyeAcuityResult] = None,
                 near_od: Optional[EyeAcuityResult] = None,
                 near_os: Optional[EyeAcuityResult] = None,
                 color_vision: Optional[ColorVisionDiagnosis] = None,
                 astigmatism: Optional[OverallAstigmatismResult] = None,
                 completed_at: Optional[str] = None,
                 duration_s: Optional[int] = None) -> ScreeningReport:
    _check_protocol(distance_od, "distance", "distance_od")
    _check_protocol(distance_os, "distance", "distance_os")
    _check_protocol(near_od, "near", "near_od")
    _check_protocol(near_os, "near", "near_os")

    completed = []
    acuity = (distance_od, distance_os, near_od, near_os)
    if all(r is not None for r in acuity):
        completed.append("visual_acuity")
        interpretation = interpret_acuity(*acuity)
    else:
        interpretation = None
    if color_vision is not None:
        completed.append("color_vision")
    if astigmatism is not None:
        completed.append("astigmatism")

    log.info(f"Screening report: completed {', '.join(completed) or 'nothing'}")
    return ScreeningReport(
        distance_od=distance_od,
        distance_os=distance_os,
        near_od=near_od,
        near_os=near_os,
        acuity_interpretation=interpretation,
        color_vision=color_vision,
        astigmatism=astigmatism,
        completed_tests=completed,
        completed_at=completed_at,
        duration_s=duration_s,
    )
