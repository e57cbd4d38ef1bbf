"""
Places directory clients.

Every client implements FacilityQueryClient and raises the typed query errors
from app.core.exceptions.
"""

from app.services.places.base import FacilityQueryClient, GeoPoint, RawPlace
from app.services.places.google_provider import GooglePlacesClient
from app.services.places.overpass_provider import OverpassPlacesClient
from app.services.places.resolver import get_places_client

__all__ = [
    "FacilityQueryClient",
    "GeoPoint",
    "RawPlace",
    "GooglePlacesClient",
    "OverpassPlacesClient",
    "get_places_client",
]
