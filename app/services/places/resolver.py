import logging
from typing import Optional

from app.core.settings import settings
from .base import FacilityQueryClient
from .google_provider import GooglePlacesClient
from .overpass_provider import OverpassPlacesClient

logger = logging.getLogger(__name__)

_client_instance: Optional[FacilityQueryClient] = None


def get_places_client() -> FacilityQueryClient:
    """
    Resolve the active places-directory client based on settings.

    Rules:
    - Default: Google Places.
    - PLACES_PROVIDER='overpass' selects OpenStreetMap Overpass (no API key).
    - A Google client is returned even without GOOGLE_PLACES_API_KEY so the
      engine can report the missing credential instead of silently switching
      data sources.
    """
    global _client_instance
    if _client_instance is not None:
        return _client_instance

    provider_name = (getattr(settings, "PLACES_PROVIDER", "google") or "google").lower()

    if provider_name == "overpass":
        _client_instance = OverpassPlacesClient(
            base_url=settings.OVERPASS_URL,
            timeout=settings.PLACES_TIMEOUT_SECONDS,
        )
    else:
        if provider_name != "google":
            logger.warning(f"Unknown PLACES_PROVIDER '{provider_name}', using google")
        _client_instance = GooglePlacesClient(
            api_key=settings.GOOGLE_PLACES_API_KEY,
            timeout=settings.PLACES_TIMEOUT_SECONDS,
        )
        if not _client_instance.is_configured():
            logger.warning("⚠️ Google Places API key not found in environment variables")

    logger.info(f"Places provider initialized: {_client_instance.provider_name}")
    return _client_instance


def reset_places_client():
    """Drop the cached client (settings changed, or between tests)."""
    global _client_instance
    _client_instance = None
