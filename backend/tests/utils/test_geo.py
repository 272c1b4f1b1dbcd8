import pytest

from place_search.utils.geo import distance_km, has_coordinates


def test_distance_zero_for_same_point():
    assert distance_km(12.9716, 77.5946, 12.9716, 77.5946) == 0.0


def test_distance_bangalore_to_chennai():
    # ~290 km great-circle
    assert distance_km(12.9716, 77.5946, 13.0827, 80.2707) == pytest.approx(290.2, abs=1.0)


def test_distance_rounded_to_two_decimals():
    value = distance_km(12.97, 77.59, 12.99, 77.61)
    assert value == round(value, 2)
    assert 0 < value < 5


def test_distance_is_symmetric():
    assert distance_km(12.97, 77.59, 28.61, 77.21) == distance_km(28.61, 77.21, 12.97, 77.59)


@pytest.mark.parametrize(
    "lat,lng,expected",
    [(12.9, 77.5, True), (0.0, 0.0, True), (None, 77.5, False), (12.9, None, False), (None, None, False)],
)
def test_has_coordinates(lat, lng, expected):
    assert has_coordinates(lat, lng) is expected
