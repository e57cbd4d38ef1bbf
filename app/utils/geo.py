"""
Coordinate validation and great-circle distance.
"""

import logging
import math
from numbers import Real
from typing import NamedTuple, Optional

from app.core.exceptions import InvalidCoordinateError
from app.models.location_priority import Coordinate
from app.utils.numeric import safe_number

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000


class ServiceArea(NamedTuple):
    """Bounding box (degrees) the service accepts complaints from."""
    south: float
    west: float
    north: float
    east: float
    name: str = "service area"

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.south <= latitude <= self.north and self.west <= longitude <= self.east


def _is_number(value) -> bool:
    # bool is a Real subclass; True/False are not coordinates
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_coordinate(latitude, longitude, service_area: Optional[ServiceArea] = None) -> Coordinate:
    """
    Validate a latitude/longitude pair against WGS84 (and optionally a service area).

    Args:
        latitude: Candidate latitude
        longitude: Candidate longitude
        service_area: Optional bounding box the coordinate must fall in

    Returns:
        Coordinate: Immutable validated coordinate

    Raises:
        InvalidCoordinateError: On non-numeric, non-finite or out-of-range input
    """
    if not _is_number(latitude) or not _is_number(longitude):
        raise InvalidCoordinateError(
            f"Coordinates must be numeric values (got {latitude!r}, {longitude!r})",
            "INVALID_COORDINATE_TYPE",
        )

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinateError("Coordinates must be finite numbers", "INVALID_COORDINATE_TYPE")

    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise InvalidCoordinateError(
            f"Coordinates ({latitude}, {longitude}) are outside the valid WGS84 range",
            "INVALID_COORDINATE_RANGE",
        )

    if service_area is not None and not service_area.contains(latitude, longitude):
        raise InvalidCoordinateError(
            f"Location ({latitude}, {longitude}) is outside {service_area.name}",
            "OUTSIDE_SERVICE_AREA",
        )

    return Coordinate(latitude=float(latitude), longitude=float(longitude))


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # float error can push `a` a hair past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return safe_number(EARTH_RADIUS_M * c, context="(haversine)")
