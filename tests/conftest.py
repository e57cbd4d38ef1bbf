"""Shared fixtures for the location priority test suite.

FakePlacesClient stands in for the places directory: each directory type
keyword maps to a list of places, an exception to raise, or a list of those
(one entry per successive call). Every call is recorded.
"""

import math

import pytest

from app.services.location_priority.engine import LocationPriorityEngine
from app.services.places.base import FacilityQueryClient, GeoPoint, RawPlace
from app.utils.geo import ServiceArea

NEW_DELHI = (28.6139, 77.2090)
INDIA = ServiceArea(south=6.4, west=68.1, north=37.6, east=97.25, name="service area (India)")


def offset(origin, north_m=0.0, east_m=0.0):
    """Shift a (lat, lng) point by meters (good enough for a few km)."""
    lat, lng = origin
    dlat = north_m / 111_195.0
    dlng = east_m / (111_195.0 * math.cos(math.radians(lat)))
    return lat + dlat, lng + dlng


def make_place(name, at, types=(), open_now=None, place_id=None, rating=None):
    return RawPlace(
        name=name,
        external_id=place_id or name.lower().replace(" ", "-"),
        location=GeoPoint(lat=at[0], lng=at[1]),
        types=list(types),
        open_now=open_now,
        rating=rating,
    )


def filler_places(count, origin=NEW_DELHI, types=("point_of_interest",)):
    return [make_place(f"Place {i}", offset(origin, north_m=10 * i), types) for i in range(count)]


class FakePlacesClient(FacilityQueryClient):
    provider_name = "fake"

    def __init__(self, responses=None, configured=True):
        self.responses = dict(responses or {})
        self.configured = configured
        self.calls = []
        self._call_counts = {}

    def is_configured(self):
        return self.configured

    def search_nearby(self, latitude, longitude, type_keyword, radius_m):
        self.calls.append((latitude, longitude, type_keyword, radius_m))
        response = self.responses.get(type_keyword, [])

        # A list of lists/exceptions scripts successive calls
        if isinstance(response, list) and response and all(
            isinstance(item, (list, Exception)) for item in response
        ):
            index = self._call_counts.get(type_keyword, 0)
            self._call_counts[type_keyword] = index + 1
            response = response[min(index, len(response) - 1)]

        if isinstance(response, Exception):
            raise response
        return list(response)

    def keywords_called(self):
        return [call[2] for call in self.calls]


class FailingClient(FakePlacesClient):
    """Every call raises the same error."""

    def __init__(self, error):
        super().__init__()
        self.error = error

    def search_nearby(self, latitude, longitude, type_keyword, radius_m):
        self.calls.append((latitude, longitude, type_keyword, radius_m))
        raise self.error


def new_delhi_client(**overrides):
    """Urban surroundings (50 probe hits) with a hospital 600m north and a school 400m east."""
    responses = {
        "establishment": filler_places(20),
        "point_of_interest": filler_places(20),
        "store": filler_places(10),
        "hospital": [make_place("Safdarjung Hospital", offset(NEW_DELHI, 600), ["hospital", "health"], open_now=False)],
        "school": [make_place("Delhi Public School", offset(NEW_DELHI, east_m=400), ["school"])],
    }
    responses.update(overrides)
    return FakePlacesClient(responses)


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_engine(sleep):
    def _make(client, service_area=INDIA, **kwargs):
        return LocationPriorityEngine(client=client, service_area=service_area, sleep=sleep, **kwargs)
    return _make
