"""
Core settings and environment variables for the Location Priority Service.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civic Location Priority Service"
    APP_VERSION: str = "2.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8081,http://localhost:19006"

    # Places directory
    # - PLACES_PROVIDER: "google" (default, needs GOOGLE_PLACES_API_KEY) or "overpass" (OpenStreetMap, no key)
    PLACES_PROVIDER: str = "google"
    GOOGLE_PLACES_API_KEY: Optional[str] = None
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    PLACES_TIMEOUT_SECONDS: float = 10.0
    PLACES_MAX_RETRIES: int = 2
    PLACES_RETRY_BACKOFF_SECONDS: float = 1.0  # linear: backoff * attempt

    # Spacing between sequential directory calls (rate-limit courtesy)
    FACILITY_QUERY_DELAY_SECONDS: float = 0.2
    AREA_PROBE_DELAY_SECONDS: float = 0.3

    # Service area (defaults to India). Coordinates outside are rejected up front.
    SERVICE_AREA_ENABLED: bool = True
    SERVICE_AREA_SOUTH: float = 6.4
    SERVICE_AREA_WEST: float = 68.1
    SERVICE_AREA_NORTH: float = 37.6
    SERVICE_AREA_EAST: float = 97.25

    # Bulk calculation
    BULK_MAX_LOCATIONS: int = 10
    BULK_DELAY_SECONDS: float = 1.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"  # Allow extra env vars to prevent crashes

    def cors_origin_list(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
