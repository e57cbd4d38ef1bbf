"""Tests for coordinate validation and haversine distance."""

import math

import pytest

from app.core.exceptions import InvalidCoordinateError
from app.utils.geo import ServiceArea, haversine_meters, validate_coordinate

from conftest import INDIA, NEW_DELHI


class TestValidateCoordinate:

    def test_valid_coordinate_returned_as_floats(self):
        coordinate = validate_coordinate(28, 77)
        assert coordinate.latitude == 28.0
        assert coordinate.longitude == 77.0
        assert isinstance(coordinate.latitude, float)

    def test_boundaries_are_inclusive(self):
        validate_coordinate(-90, -180)
        validate_coordinate(90, 180)

    @pytest.mark.parametrize("lat,lng", [(90.0001, 0), (-91, 0), (0, 180.5), (0, -181)])
    def test_out_of_range(self, lat, lng):
        with pytest.raises(InvalidCoordinateError) as exc:
            validate_coordinate(lat, lng)
        assert exc.value.error_code == "INVALID_COORDINATE_RANGE"

    @pytest.mark.parametrize("lat,lng", [("28.6", 77.2), (None, 77.2), (28.6, [77.2]), (True, 77.2)])
    def test_non_numeric(self, lat, lng):
        with pytest.raises(InvalidCoordinateError) as exc:
            validate_coordinate(lat, lng)
        assert exc.value.error_code == "INVALID_COORDINATE_TYPE"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite(self, value):
        with pytest.raises(InvalidCoordinateError):
            validate_coordinate(value, 77.2)

    def test_outside_service_area(self):
        with pytest.raises(InvalidCoordinateError) as exc:
            validate_coordinate(45, 10, INDIA)
        assert exc.value.error_code == "OUTSIDE_SERVICE_AREA"

    def test_inside_service_area(self):
        coordinate = validate_coordinate(*NEW_DELHI, service_area=INDIA)
        assert (coordinate.latitude, coordinate.longitude) == NEW_DELHI

    def test_service_area_contains(self):
        area = ServiceArea(south=0, west=0, north=10, east=10)
        assert area.contains(5, 5)
        assert area.contains(10, 0)
        assert not area.contains(-0.1, 5)


class TestHaversine:

    def test_identity(self):
        assert haversine_meters(*NEW_DELHI, *NEW_DELHI) == 0

    @pytest.mark.parametrize("a,b", [
        ((28.6139, 77.2090), (19.0760, 72.8777)),
        ((0, 0), (0.5, -0.5)),
        ((-33.86, 151.21), (51.5, -0.12)),
    ])
    def test_symmetry(self, a, b):
        assert haversine_meters(*a, *b) == haversine_meters(*b, *a)

    def test_one_degree_of_latitude(self):
        expected = 6371000 * math.pi / 180
        assert haversine_meters(0, 0, 1, 0) == pytest.approx(expected, rel=1e-9)

    def test_delhi_to_mumbai(self):
        distance = haversine_meters(28.6139, 77.2090, 19.0760, 72.8777)
        assert 1_140_000 < distance < 1_160_000

    def test_antipodal_points_are_finite(self):
        distance = haversine_meters(0, 0, 0, 180)
        assert math.isfinite(distance)
        assert distance == pytest.approx(math.pi * 6371000)

    def test_nan_input_never_returns_nan(self):
        distance = haversine_meters(float("nan"), 0, 0, 0)
        assert not math.isnan(distance)
