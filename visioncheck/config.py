import os
from pydantic import BaseModel


class Settings(BaseModel):
    log_level: str = os.getenv("VISIONCHECK_LOG_LEVEL", "INFO")
    # Snellen rows are defined by visual angle; the phone test runs at 3 m
    distance_test_mm: float = float(os.getenv("DISTANCE_TEST_MM", "3000"))
    # near print sizes are nominal at 40 cm and scale linearly with distance
    near_test_mm: float = float(os.getenv("NEAR_TEST_MM", "400"))
    reference_angle_arcmin: float = float(os.getenv("REFERENCE_ANGLE_ARCMIN", "5.0"))
    plate_dot_spacing: float = float(os.getenv("PLATE_DOT_SPACING", "0.028"))
    plate_jitter: float = float(os.getenv("PLATE_JITTER", "0.18"))
    plate_radius_variance: float = float(os.getenv("PLATE_RADIUS_VARIANCE", "0.25"))
    meridian_tolerance_deg: float = float(os.getenv("MERIDIAN_TOLERANCE_DEG", "15.0"))
    dial_step_deg: float = float(os.getenv("DIAL_STEP_DEG", "15.0"))

settings = Settings()
