from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

Eye = Literal["OD", "OS"]
Protocol = Literal["distance", "near"]
DeficiencyType = Literal["none", "red_green_type_a", "red_green_type_b", "blue_yellow"]
ColorSeverity = Literal["none", "mild", "moderate", "strong"]
AstigmatismSeverity = Literal["none", "mild", "moderate", "significant"]

ASTIGMATISM_SEVERITY_ORDER: dict[str, int] = {
    "none": 0,
    "mild": 1,
    "moderate": 2,
    "significant": 3,
}


class EyeAcuityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    eye: Optional[Eye] = None
    protocol: Protocol
    level_label: str = Field(description="Snellen fraction (6/12) or Jaeger level (J5)")
    equivalent: Optional[str] = Field(None, description="N-point equivalent for near levels")
    decimal_score: float = Field(ge=0.0, le=1.0)
    levels_passed: int = Field(0, ge=0)
    below_chart: bool = Field(False, description="largest row was not passed")


class ColorVisionDiagnosis(BaseModel):
    model_config = ConfigDict(frozen=True)

    deficiency_type: DeficiencyType
    severity: ColorSeverity
    score_percent: int = Field(ge=0, le=100)
    correct_count: int
    total_plates: int
    red_green_errors: int = 0
    tritan_errors: int = 0
    incorrect_plates: list[int] = Field(default_factory=list)
    control_failed: bool = False


class EyeAstigmatismResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    eye: Optional[Eye] = None
    is_uniform: bool
    suspected_axis_degrees: Optional[float] = Field(None, description="degrees [0, 180)")
    severity: AstigmatismSeverity
    rounds_consistent: bool
    flagged_meridians: list[float] = Field(default_factory=list)

    @property
    def has_astigmatism(self) -> bool:
        return self.severity != "none"


class OverallAstigmatismResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    od: EyeAstigmatismResult
    os: EyeAstigmatismResult
    overall_suspicion: AstigmatismSeverity
    recommendation: str


class AcuityInterpretation(BaseModel):
    model_config = ConfigDict(frozen=True)

    condition: str
    severity: str
    description: str
    recommendation: str
    urgency: Literal["urgent", "within_1_month", "low"]


class ScreeningReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_od: Optional[EyeAcuityResult] = None
    distance_os: Optional[EyeAcuityResult] = None
    near_od: Optional[EyeAcuityResult] = None
    near_os: Optional[EyeAcuityResult] = None
    acuity_interpretation: Optional[AcuityInterpretation] = None
    color_vision: Optional[ColorVisionDiagnosis] = None
    astigmatism: Optional[OverallAstigmatismResult] = None
    completed_tests: list[str] = Field(default_factory=list)
    completed_at: Optional[str] = None
    duration_s: Optional[int] = None
