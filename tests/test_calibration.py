import math

import pytest

from visioncheck.errors import InvalidResponseError
from visioncheck.services.calibration import (
    INSTRUCTION_PROMPTS,
    decimal_score,
    evaluate_test_distance,
    fit_to_display,
    n_point_height_mm,
    physical_mm_to_logical_units,
    required_height_mm,
    snellen_ratio,
    visual_angle_height_mm,
)


def test_reference_letter_is_8_73_mm_at_six_metres():
    assert abs(required_height_mm("6/6", 6000) - 8.73) < 0.01


def test_half_distance_halves_height():
    # at 3 m the 6/12 row needs the same height as 6/6 at 6 m
    assert abs(required_height_mm("6/12", 3000) - 8.73) < 0.01
    for den in ("6/60", "6/24", "6/9", "6/6"):
        assert required_height_mm(den, 3000) == pytest.approx(required_height_mm(den, 6000) / 2)


def test_collapsed_formula_at_three_metres():
    for den in ("6/60", "6/36", "6/24", "6/18", "6/12", "6/9", "6/7.5", "6/6"):
        expected = snellen_ratio(den) * required_height_mm("6/6", 6000) / 2
        assert required_height_mm(den, 3000) == pytest.approx(expected, rel=1e-3)


@pytest.mark.parametrize("distance_mm", [400, 1000, 2500, 4000, 6000])
def test_general_visual_angle_relation(distance_mm):
    for den in ("6/60", "6/12", "20/40", "6/6"):
        theta = math.radians(5 * snellen_ratio(den) / 60)
        assert required_height_mm(den, distance_mm) == pytest.approx(2 * math.tan(theta / 2) * distance_mm)


def test_height_strictly_decreases_with_decimal_score():
    dens = ["6/60", "6/36", "6/24", "6/18", "6/12", "6/9", "6/7.5", "6/6", "6/4.5"]
    ordered = sorted(dens, key=decimal_score)
    heights = [required_height_mm(d, 3000) for d in ordered]
    assert all(b < a for a, b in zip(heights, heights[1:]))


def test_snellen_fraction_parsing():
    assert snellen_ratio("6/12") == 2.0
    assert snellen_ratio("20/40") == 2.0
    assert snellen_ratio("6/7.5") == 1.25
    assert snellen_ratio(3) == 3.0
    assert decimal_score("6/12") == 0.5


@pytest.mark.parametrize("bad", ["abc", "0/6", "6/0", "", -2])
def test_invalid_snellen_fraction_raises(bad):
    with pytest.raises(InvalidResponseError):
        snellen_ratio(bad)


def test_linear_conversion():
    assert physical_mm_to_logical_units(10, 6.3) == pytest.approx(63.0)
    assert physical_mm_to_logical_units(0, 6.3) == 0.0


def test_conversion_rejects_invalid_factor():
    with pytest.raises(InvalidResponseError):
        physical_mm_to_logical_units(10, 0)
    with pytest.raises(ValueError):
        physical_mm_to_logical_units(-1, 6.3)


def test_fit_to_display_reports_clamping():
    big = fit_to_display(43.65, 6.3, 200)
    assert big.clamped
    assert big.logical_units == 200
    assert big.requested_units == pytest.approx(274.995)

    small = fit_to_display(4.37, 6.3, 200)
    assert not small.clamped
    assert small.logical_units == small.requested_units == pytest.approx(27.531)


def test_fit_to_display_rejects_non_positive_limit():
    with pytest.raises(InvalidResponseError):
        fit_to_display(5, 6.3, 0)


def test_visual_angle_rejects_zero_distance():
    with pytest.raises(InvalidResponseError):
        visual_angle_height_mm(5, 0)


def test_n_point_heights():
    assert n_point_height_mm(36) == pytest.approx(13.5)
    assert n_point_height_mm(5) == pytest.approx(1.875)


class TestDistanceCheck:
    def test_in_range(self):
        r = evaluate_test_distance(310, "distance")
        assert r.in_range and r.instruction == "hold_still"
        assert evaluate_test_distance(36, "near").in_range

    def test_too_far(self):
        r = evaluate_test_distance(400, "distance")
        assert not r.in_range and r.instruction == "too_far"

    def test_too_close(self):
        r = evaluate_test_distance(200, "distance")
        assert not r.in_range and r.instruction == "move_further"
        assert evaluate_test_distance(20, "near").instruction == "move_further"

    def test_unknown_mode(self):
        with pytest.raises(InvalidResponseError):
            evaluate_test_distance(300, "far")

    def test_prompts(self):
        assert evaluate_test_distance(300, "distance").prompt == "Perfect distance. Hold steady."
        assert evaluate_test_distance(500, "distance").prompt == INSTRUCTION_PROMPTS["too_far"]
        assert evaluate_test_distance(10, "near").prompt == "Keep moving away."

    def test_non_finite_distance(self):
        with pytest.raises(InvalidResponseError):
            evaluate_test_distance(math.nan, "near")


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_sizes_rejected(bad):
    with pytest.raises(InvalidResponseError):
        fit_to_display(bad, 6.3, 200)
    with pytest.raises(InvalidResponseError):
        fit_to_display(5, bad, 200)
    with pytest.raises(InvalidResponseError):
        fit_to_display(5, 6.3, bad)
    with pytest.raises(InvalidResponseError):
        physical_mm_to_logical_units(bad, 6.3)
    with pytest.raises(InvalidResponseError):
        visual_angle_height_mm(5, bad)
    with pytest.raises(InvalidResponseError):
        snellen_ratio(bad)
