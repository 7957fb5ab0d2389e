import pytest

from visioncheck.config import settings
from visioncheck.errors import ChartError, InvalidResponseError
from visioncheck.services.charts import (
    DISTANCE_CHART,
    NEAR_CHART,
    SLOAN_LETTERS,
    AcuityLevel,
    NearVisionLevel,
    build_distance_chart,
    build_near_chart,
    sloan_choices,
    validate_distance_chart,
    validate_near_chart,
)
from visioncheck.services.rng import LcgRandom, NumpyRandom


def test_distance_rows_in_order():
    assert [l.denominator for l in DISTANCE_CHART] == [
        "6/60", "6/36", "6/24", "6/18", "6/12", "6/9", "6/7.5", "6/6"]
    assert [l.decimal_score for l in DISTANCE_CHART] == [0.1, 0.17, 0.25, 0.33, 0.5, 0.67, 0.8, 1.0]
    assert [l.line for l in DISTANCE_CHART] == list(range(1, 9))


def test_distance_heights_match_three_metre_table():
    expected = [43.65, 26.19, 17.46, 13.10, 8.73, 6.55, 5.46, 4.37]
    for level, mm in zip(DISTANCE_CHART, expected):
        assert abs(level.required_height_mm - mm) < 0.05, f"{level.denominator}: {level.required_height_mm}"


def test_rows_get_longer_and_use_sloan_letters():
    assert [len(l.letters) for l in DISTANCE_CHART] == list(range(1, 9))
    for level in DISTANCE_CHART:
        assert set(level.letters) <= set(SLOAN_LETTERS)


def test_chart_for_other_distance_scales_heights():
    six_metres = build_distance_chart(6000)
    for near, far in zip(DISTANCE_CHART, six_metres):
        assert far.required_height_mm == pytest.approx(2 * near.required_height_mm)
        assert far.decimal_score == near.decimal_score


def test_near_chart():
    assert [l.level for l in NEAR_CHART] == ["J10", "J8", "J6", "J5", "J3", "J2", "J1"]
    assert [l.equivalent for l in NEAR_CHART] == ["N36", "N24", "N18", "N12", "N8", "N6", "N5"]
    assert NEAR_CHART[0].required_height_mm == pytest.approx(13.5)
    assert NEAR_CHART[-1].required_height_mm == pytest.approx(1.875)
    assert NEAR_CHART[-1].decimal_equivalent == 0.8


def test_validation_rejects_reversed_chart():
    with pytest.raises(ChartError):
        validate_distance_chart(tuple(reversed(DISTANCE_CHART)))
    with pytest.raises(ChartError):
        validate_near_chart(tuple(reversed(NEAR_CHART)))


def test_validation_rejects_bad_rows():
    with pytest.raises(ChartError):
        validate_distance_chart(())
    with pytest.raises(ChartError):
        validate_distance_chart((AcuityLevel(1, "6/60", 0.1, 43.6, ("A",)),))
    with pytest.raises(ChartError):
        validate_distance_chart((AcuityLevel(1, "6/60", 0.1, 43.6, ()),))
    with pytest.raises(ChartError):
        validate_near_chart((NearVisionLevel("J1", "N5", 1.9, "x", 0.8), NearVisionLevel("J2", "N6", 2.2, "x", 0.67)))


class TestSloanChoices:
    def test_contains_correct_letter(self):
        choices = sloan_choices("E", LcgRandom(7))
        assert "E" in choices
        assert len(choices) == len(set(choices)) == 4
        assert set(choices) <= set(SLOAN_LETTERS)

    def test_same_seed_same_buttons(self):
        assert sloan_choices("D", LcgRandom(3)) == sloan_choices("D", LcgRandom(3))
        assert sloan_choices("D", NumpyRandom(3)) == sloan_choices("D", NumpyRandom(3))

    def test_invalid_input(self):
        with pytest.raises(InvalidResponseError):
            sloan_choices("A", LcgRandom(1))
        with pytest.raises(InvalidResponseError):
            sloan_choices("E", LcgRandom(1), count=0)


def test_near_chart_follows_test_distance(monkeypatch):
    at_80cm = build_near_chart(800)
    for nominal, scaled in zip(NEAR_CHART, at_80cm):
        assert scaled.required_height_mm == pytest.approx(2 * nominal.required_height_mm)

    monkeypatch.setattr(settings, "near_test_mm", 200.0)
    assert build_near_chart()[0].required_height_mm == pytest.approx(13.5 / 2)

    with pytest.raises(InvalidResponseError):
        build_near_chart(0)
