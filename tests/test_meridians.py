import math

import pytest

from visioncheck.errors import InvalidMeridianError
from visioncheck.services.meridians import (
    Meridian,
    circular_mean,
    dial_meridians,
    mean_resultant_length,
    meridian_distance,
    meridian_from_point,
    normalize,
    snap_to_dial,
    to_meridian,
)


def test_normalize():
    assert normalize(180) == 0.0
    assert normalize(-15) == 165.0
    assert normalize(195) == 15.0


def test_mean_wraps_around_zero():
    mean = circular_mean([10, 170])
    assert meridian_distance(mean, 0) < 1e-6, "arithmetic mean would give 90"


def test_mean_simple_and_wrapped():
    assert circular_mean([30, 60]) == pytest.approx(45)
    assert circular_mean([170, 20]) == pytest.approx(5)
    assert circular_mean([45]) == pytest.approx(45)
    assert circular_mean([]) is None


def test_mean_of_balanced_set_is_deterministic():
    assert circular_mean([90, 0]) == 0.0


def test_resultant_length():
    assert mean_resultant_length([45, 45]) == pytest.approx(1.0)
    assert mean_resultant_length([0, 90]) == pytest.approx(0.0, abs=1e-12)
    assert mean_resultant_length([]) == 0.0


def test_distance_wraps():
    assert meridian_distance(10, 170) == pytest.approx(20)
    assert meridian_distance(0, 90) == pytest.approx(90)
    assert meridian_distance(45, 50) == pytest.approx(5)


def test_meridian_value():
    m = Meridian(200)
    assert m.degrees == pytest.approx(20)
    assert m.perpendicular().degrees == pytest.approx(110)
    with pytest.raises(InvalidMeridianError):
        Meridian(math.nan)


def test_dial():
    dial = dial_meridians()
    assert len(dial) == 12
    assert dial[0] == 0 and dial[-1] == 165
    assert snap_to_dial(44) == 45
    assert snap_to_dial(172) == 165
    assert snap_to_dial(176) == 0


def test_point_to_meridian():
    assert meridian_from_point(10, 0) == 0
    assert meridian_from_point(0, -10) == 90
    assert meridian_from_point(10, -10) == 45
    assert meridian_from_point(-10, -10) == 135
    # opposite ends of a line are the same meridian
    assert meridian_from_point(-10, 10) == 45
    with pytest.raises(InvalidMeridianError):
        meridian_from_point(0, 0)


def test_to_meridian():
    assert to_meridian(180) == 0
    assert to_meridian(50) == 50
    assert to_meridian(-10) == 170
    for bad in (math.nan, math.inf, "north", None):
        with pytest.raises(InvalidMeridianError):
            to_meridian(bad)
