import math

import pytest

from providers.utils import haversine_miles, miles_to_meters, validate_coordinates

BOSTON = (42.3601, -71.0589)
NEW_YORK = (40.7128, -74.0060)


@pytest.mark.parametrize("point", [BOSTON, NEW_YORK, (0.0, 0.0), (89.9, 179.9), (-45.5, -120.25)])
def test_distance_to_self_is_zero(point):
    assert haversine_miles(*point, *point) == 0


def test_distance_is_symmetric():
    assert haversine_miles(*BOSTON, *NEW_YORK) == pytest.approx(haversine_miles(*NEW_YORK, *BOSTON))


def test_boston_to_new_york():
    assert haversine_miles(*BOSTON, *NEW_YORK) == pytest.approx(190, abs=2)


def test_antipodal_points_are_half_circumference():
    d = haversine_miles(0.0, 0.0, 0.0, 180.0)
    assert not math.isnan(d)
    assert d == pytest.approx(math.pi * 3958.8, rel=1e-9)


def test_miles_to_meters_rounds_to_nearest_integer():
    assert miles_to_meters(10) == 16093
    assert miles_to_meters(1) == 1609
    assert miles_to_meters(0.5) == 805
    assert isinstance(miles_to_meters(2.5), int)


def test_validate_coordinates():
    assert validate_coordinates(42.1, -72.6)
    assert not validate_coordinates(91, 0)
    assert not validate_coordinates(0, -181)
    assert not validate_coordinates(float("nan"), 0)
