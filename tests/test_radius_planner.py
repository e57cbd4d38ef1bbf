"""Tests for search radius planning."""

import pytest

from app.models.location_priority import AreaType
from app.services.location_priority.radius_planner import SearchRadiusPlanner


@pytest.fixture
def planner():
    return SearchRadiusPlanner()


class TestSearchRadiusPlanner:

    @pytest.mark.parametrize("area_type,density,expected", [
        (AreaType.DENSE_URBAN, 85, 560),
        (AreaType.URBAN, 45, 1200),
        (AreaType.URBAN, 50, 1200),
        (AreaType.URBAN, 51, 840),
        (AreaType.SUBURBAN, 5, 3000),
        (AreaType.SUBURBAN, 20, 2000),
        (AreaType.RURAL, 0, 5000),
        (AreaType.UNKNOWN, 0, 2250),
    ])
    def test_area_and_density(self, planner, area_type, density, expected):
        assert planner.plan(area_type, density) == expected

    @pytest.mark.parametrize("accuracy,expected", [
        (0, 1200),
        (100, 1200),
        (150, 1275),
        (2000, 1700),
    ])
    def test_accuracy_padding(self, planner, accuracy, expected):
        assert planner.plan(AreaType.URBAN, 45, accuracy) == expected

    def test_padding_can_exceed_band_max(self, planner):
        assert planner.plan(AreaType.RURAL, 0, 300) == 5150

    def test_nan_accuracy_is_ignored(self, planner):
        assert planner.plan(AreaType.URBAN, 45, float("nan")) == 1200

    def test_deterministic(self, planner):
        results = {planner.plan(AreaType.SUBURBAN, 7, 333) for _ in range(10)}
        assert len(results) == 1
        assert isinstance(results.pop(), int)

    def test_effective_radius_is_capped_by_type(self):
        assert SearchRadiusPlanner.effective_radius(1200, 1000) == 1000
        assert SearchRadiusPlanner.effective_radius(1200, 3000) == 1200
