import logging
from typing import Dict, Any, List, Optional

import requests

from app.core.exceptions import AuthDeniedError, QuotaExceededError, TransientNetworkError
from .base import FacilityQueryClient, GeoPoint, RawPlace

logger = logging.getLogger(__name__)


class GooglePlacesClient(FacilityQueryClient):
    """
    Google Places Nearby Search client.

    - Used when PLACES_PROVIDER=google (the default).
    - A client without an API key reports is_configured() == False; the engine
      turns that into a ConfigurationError before issuing any request.
    - Directory statuses are mapped to typed query errors.
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    provider_name = "google"

    def __init__(self, api_key: Optional[str], timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def search_nearby(self, latitude: float, longitude: float, type_keyword: str, radius_m: int) -> List[RawPlace]:
        if not self.api_key:
            raise AuthDeniedError("Google Places API key not configured")

        params = {
            "location": f"{latitude},{longitude}",
            "radius": int(radius_m),
            "type": type_keyword,
            "key": self.api_key,
        }
        try:
            resp = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise TransientNetworkError(f"Places request timed out after {self.timeout}s: {e}")
        except requests.exceptions.RequestException as e:
            raise TransientNetworkError(f"Places request failed: {e}")

        if resp.status_code == 429:
            raise QuotaExceededError("Places API returned HTTP 429")
        if resp.status_code == 403:
            raise AuthDeniedError("Places API returned HTTP 403")
        if resp.status_code != 200:
            raise TransientNetworkError(f"Places API returned HTTP {resp.status_code}")

        try:
            data: Dict[str, Any] = resp.json()
        except ValueError as e:
            raise TransientNetworkError(f"Places API returned invalid JSON: {e}")

        api_status = data.get("status", "")
        if api_status == "OVER_QUERY_LIMIT":
            raise QuotaExceededError("API quota exceeded")
        if api_status == "REQUEST_DENIED":
            raise AuthDeniedError(f"API request denied - check API key restrictions ({data.get('error_message', '')})")
        if api_status not in ("OK", "ZERO_RESULTS"):
            raise TransientNetworkError(f"Places API failed: {api_status or 'no status'}")

        places = []
        for result in data.get("results") or []:
            place = self._to_raw_place(result)
            if place is not None:
                places.append(place)

        logger.debug(f"Google Places '{type_keyword}' within {radius_m}m returned {len(places)} places")
        return places

    @staticmethod
    def _to_raw_place(result: Dict[str, Any]) -> Optional[RawPlace]:
        location = (result.get("geometry") or {}).get("location") or {}
        if "lat" not in location or "lng" not in location or not result.get("name"):
            logger.debug(f"Skipping place without name or location: {result.get('place_id')}")
            return None

        opening_hours = result.get("opening_hours") or {}
        return RawPlace(
            name=result["name"],
            external_id=result.get("place_id"),
            location=GeoPoint(lat=location["lat"], lng=location["lng"]),
            rating=result.get("rating"),
            types=result.get("types") or [],
            vicinity=result.get("vicinity"),
            open_now=opening_hours.get("open_now"),
        )
