import logging
from typing import Dict, Any, List, Optional, Tuple

import requests

from app.core.exceptions import AuthDeniedError, QuotaExceededError, TransientNetworkError
from .base import FacilityQueryClient, GeoPoint, RawPlace

logger = logging.getLogger(__name__)

# Directory type keyword -> OSM tag filters. A None value matches any value of the key.
OSM_TAG_FILTERS: Dict[str, List[Tuple[str, Optional[str]]]] = {
    "hospital": [("amenity", "hospital"), ("amenity", "clinic")],
    "doctor": [("amenity", "doctors"), ("healthcare", "doctor")],
    "school": [("amenity", "school")],
    "primary_school": [("amenity", "school")],
    "university": [("amenity", "university"), ("amenity", "college")],
    "police": [("amenity", "police")],
    "fire_station": [("amenity", "fire_station")],
    "transit_station": [("public_transport", "station")],
    "bus_station": [("amenity", "bus_station"), ("highway", "bus_stop")],
    "subway_station": [("railway", "station"), ("station", "subway")],
    "local_government_office": [("office", "government")],
    "city_hall": [("amenity", "townhall")],
    "bank": [("amenity", "bank")],
    "atm": [("amenity", "atm")],
    "pharmacy": [("amenity", "pharmacy")],
    "drugstore": [("shop", "chemist")],
    "establishment": [("amenity", None)],
    "point_of_interest": [("tourism", None), ("leisure", None), ("office", None)],
    "store": [("shop", None)],
}

# Tag keys whose values become the place's type tags
TYPE_TAG_KEYS = ("amenity", "healthcare", "shop", "office", "public_transport", "railway", "tourism", "leisure")

# OSM amenity values renamed to the directory vocabulary used by the catalog
OSM_TYPE_ALIASES = {
    "townhall": "city_hall",
    "doctors": "doctor",
    "clinic": "hospital",
    "college": "university",
    "government": "local_government_office",
}


class OverpassPlacesClient(FacilityQueryClient):
    """
    OpenStreetMap Overpass places client.

    - No API key required; selected with PLACES_PROVIDER=overpass.
    - OSM carries no live opening status, so open_now is always None.
    - HTTP 429/504 are reported as quota errors, other failures as transient.
    """

    provider_name = "overpass"

    def __init__(self, base_url: str = "https://overpass-api.de/api/interpreter", timeout: float = 10.0,
                 user_agent: str = "civic-location-priority/2.1"):
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

    def build_query(self, latitude: float, longitude: float, type_keyword: str, radius_m: int) -> str:
        filters = OSM_TAG_FILTERS.get(type_keyword, [("amenity", type_keyword)])
        around = f"(around:{int(radius_m)},{latitude},{longitude})"
        clauses = []
        for key, value in filters:
            selector = f'["{key}"="{value}"]' if value else f'["{key}"]'
            for element in ("node", "way", "relation"):
                clauses.append(f"{element}{selector}{around};")
        server_timeout = max(1, int(self.timeout))
        return f"[out:json][timeout:{server_timeout}];({''.join(clauses)});out center;"

    def search_nearby(self, latitude: float, longitude: float, type_keyword: str, radius_m: int) -> List[RawPlace]:
        query = self.build_query(latitude, longitude, type_keyword, radius_m)
        try:
            resp = requests.post(
                self.base_url,
                data={"data": query},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransientNetworkError(f"Overpass request failed: {e}")

        if resp.status_code in (429, 504):
            raise QuotaExceededError(f"Overpass rate limited (HTTP {resp.status_code})")
        if resp.status_code == 403:
            raise AuthDeniedError("Overpass refused the request (HTTP 403)")
        if resp.status_code != 200:
            raise TransientNetworkError(f"Overpass returned HTTP {resp.status_code}")

        try:
            data: Dict[str, Any] = resp.json()
        except ValueError as e:
            raise TransientNetworkError(f"Overpass returned invalid JSON: {e}")

        places = []
        for element in data.get("elements") or []:
            place = self._to_raw_place(element)
            if place is not None:
                places.append(place)

        logger.debug(f"Overpass '{type_keyword}' within {radius_m}m returned {len(places)} places")
        return places

    @staticmethod
    def _to_raw_place(element: Dict[str, Any]) -> Optional[RawPlace]:
        lat = element.get("lat", (element.get("center") or {}).get("lat"))
        lng = element.get("lon", (element.get("center") or {}).get("lon"))
        if lat is None or lng is None:
            return None

        tags = element.get("tags") or {}
        types = []
        for key in TYPE_TAG_KEYS:
            value = tags.get(key)
            if value:
                types.append(OSM_TYPE_ALIASES.get(value, value))

        name = tags.get("name") or f"{types[0] if types else 'unnamed'} facility"
        address = ", ".join(v for v in (tags.get("addr:street"), tags.get("addr:city")) if v)

        return RawPlace(
            name=name,
            external_id=f"{element.get('type', 'node')}/{element.get('id')}",
            location=GeoPoint(lat=lat, lng=lng),
            types=types,
            vicinity=address or None,
        )
