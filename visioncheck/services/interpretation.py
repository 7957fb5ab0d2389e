"""
Acuity Interpretation

Rating labels per chart row, and a combined reading of distance and near
results (best eye of each) into a likely refractive pattern.
"""

from typing import Optional

from ..models.schema import AcuityInterpretation, EyeAcuityResult

DISTANCE_RATINGS: dict[str, str] = {
    "6/6": "Excellent",
    "6/7.5": "Very Good",
    "6/9": "Good",
    "6/12": "Fair",
    "6/18": "Poor",
    "6/24": "Poor",
    "6/36": "Very Poor",
    "6/60": "Very Poor",
}

NEAR_RATINGS: dict[str, str] = {
    "J1": "Excellent",
    "J2": "Very Good",
    "J3": "Good",
    "J5": "Fair",
    "J6": "Fair",
    "J8": "Poor",
    "J10": "Very Poor",
}

# Jaeger number, larger means larger print needed
JAEGER_NUMBERS: dict[str, int] = {"J1": 1, "J2": 2, "J3": 3, "J5": 5, "J6": 6, "J8": 8, "J10": 10}


def distance_rating(result: Optional[EyeAcuityResult]) -> str:
    if result is None:
        return "Not tested"
    if result.below_chart:
        return "Very Poor"
    return DISTANCE_RATINGS.get(result.level_label, "Not tested")


def near_rating(result: Optional[EyeAcuityResult]) -> str:
    if result is None:
        return "Not tested"
    if result.below_chart:
        return "Very Poor"
    return NEAR_RATINGS.get(result.level_label, "Not tested")


def _jaeger(result: Optional[EyeAcuityResult]) -> int:
    if result is None:
        return 1
    if result.below_chart:
        return JAEGER_NUMBERS["J10"] + 1
    return JAEGER_NUMBERS.get(result.level_label, 1)


def _decimal(result: Optional[EyeAcuityResult]) -> float:
    return 1.0 if result is None else result.decimal_score


def interpret_acuity(distance_od: Optional[EyeAcuityResult], distance_os: Optional[EyeAcuityResult],
                     near_od: Optional[EyeAcuityResult], near_os: Optional[EyeAcuityResult]) -> AcuityInterpretation:
    """
    Classify the better eye's distance and near acuity.

    Untested eyes count as normal so that a partial screening does not
    manufacture a finding.
    """
    best_dist = max(_decimal(distance_od), _decimal(distance_os))
    best_near = min(_jaeger(near_od), _jaeger(near_os))

    if best_dist < 0.5 and best_near <= 4:
        return AcuityInterpretation(
            condition="Likely Myopia (Nearsightedness)",
            severity="Moderate to Severe" if best_dist < 0.33 else "Mild to Moderate",
            description="Nearby objects are seen clearly but distant objects are not. This is consistent with myopia.",
            recommendation="Visit an optometrist for a comprehensive refraction test. Distance glasses or contact lenses will likely help.",
            urgency="urgent" if best_dist < 0.2 else "within_1_month",
        )

    if best_dist >= 0.5 and best_near >= 6:
        return AcuityInterpretation(
            condition="Likely Hypermetropia (Farsightedness)",
            severity="Moderate to Severe" if best_near >= 8 else "Mild to Moderate",
            description="Distant objects are seen well but reading and close-up tasks are difficult. This is consistent with hypermetropia.",
            recommendation="Visit an optometrist for near vision correction. Reading glasses or bifocals may help.",
            urgency="urgent" if best_near >= 10 else "within_1_month",
        )

    if best_dist < 0.5 and best_near >= 6:
        return AcuityInterpretation(
            condition="Significant Vision Impairment",
            severity="Requires Professional Assessment",
            description="Both distance and near vision show significant limitations.",
            recommendation="Please visit an eye care professional as soon as possible for a comprehensive examination.",
            urgency="urgent",
        )

    if best_dist >= 0.67 and best_near <= 4:
        return AcuityInterpretation(
            condition="Normal Vision",
            severity="No Significant Issues",
            description="Distance and near vision are both within the normal range.",
            recommendation="Continue routine eye checkups every 1-2 years.",
            urgency="low",
        )

    return AcuityInterpretation(
        condition="Borderline Vision",
        severity="Minor Concerns",
        description="Vision shows minor limitations that could be early refractive error or temporary fatigue.",
        recommendation="Monitor your vision and retest in 3-6 months. Consider a professional checkup if symptoms persist.",
        urgency="low",
    )
