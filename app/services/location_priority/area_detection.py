"""
Area type detection - estimates how built-up the surroundings of a coordinate
are from a few broad directory probes at a fixed radius.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from app.core.exceptions import FacilityQueryError
from app.models.location_priority import AreaType, Coordinate
from app.services.places.base import FacilityQueryClient
from app.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

PROBE_RADIUS_M = 1000
PROBE_TYPES = ("establishment", "point_of_interest", "store")

# (minimum probe count, area type), checked in order
DENSITY_THRESHOLDS = (
    (80, AreaType.DENSE_URBAN),
    (40, AreaType.URBAN),
    (15, AreaType.SUBURBAN),
)

URBAN_INDICATORS = ("shopping_mall", "bank", "atm", "hospital", "school", "government")
URBAN_UPGRADE_MIN_INDICATORS = 4

AREA_DESCRIPTIONS = {
    AreaType.DENSE_URBAN: "Dense urban area with {count} facilities nearby - likely city center",
    AreaType.URBAN: "Urban area with {count} facilities - regular city district",
    AreaType.SUBURBAN: "Suburban area with {count} facilities - residential/commercial mix",
    AreaType.RURAL: "Rural area with {count} facilities - sparse infrastructure",
    AreaType.UNKNOWN: "Unknown area type with {count} facilities detected",
}


class AreaProfile(BaseModel):
    type: AreaType
    facility_density: int = 0
    business_types: List[str] = Field(default_factory=list)
    description: str = ""
    probes_failed: int = 0


def describe_area(area_type: AreaType, facility_count: int) -> str:
    return AREA_DESCRIPTIONS[area_type].format(count=facility_count)


def classify_density(total_facilities: int, business_types: Sequence[str]) -> AreaType:
    """Area type from probe count, with the suburban -> urban upgrade on urban indicators."""
    area_type = AreaType.RURAL
    for minimum, candidate in DENSITY_THRESHOLDS:
        if total_facilities >= minimum:
            area_type = candidate
            break

    seen = set(business_types)
    urban_count = sum(1 for indicator in URBAN_INDICATORS if indicator in seen)
    if area_type == AreaType.SUBURBAN and urban_count >= URBAN_UPGRADE_MIN_INDICATORS:
        area_type = AreaType.URBAN

    return area_type


class AreaTypeDetector:
    """
    Runs the probe queries one after another through a rate limiter.

    A failing probe is skipped; if every probe fails the area is reported as
    UNKNOWN with zero density. Detection never aborts a calculation, except
    for caller cancellation which propagates.
    """

    def __init__(
        self,
        client: FacilityQueryClient,
        probe_types: Sequence[str] = PROBE_TYPES,
        probe_radius_m: int = PROBE_RADIUS_M,
    ):
        self.client = client
        self.probe_types = tuple(probe_types)
        self.probe_radius_m = probe_radius_m

    def detect(self, origin: Coordinate, limiter: Optional[RateLimiter] = None) -> AreaProfile:
        logger.info(f"🔍 Probing area with {self.probe_radius_m}m radius to detect type...")

        total_facilities = 0
        business_types: List[str] = []
        failures = 0

        for probe_type in self.probe_types:
            if limiter is not None:
                limiter.acquire()
            try:
                places = self.client.search_nearby(origin.latitude, origin.longitude, probe_type, self.probe_radius_m)
            except FacilityQueryError as e:
                failures += 1
                logger.warning(f"⚠️ Probe error for {probe_type}: {e}")
                continue

            total_facilities += len(places)
            for place in places:
                for place_type in place.types:
                    if place_type not in business_types:
                        business_types.append(place_type)

        if self.probe_types and failures == len(self.probe_types):
            logger.error("⚠️ Area type detection failed - every probe errored, using default settings")
            return AreaProfile(
                type=AreaType.UNKNOWN,
                facility_density=0,
                description="Area type detection failed - using default settings",
                probes_failed=failures,
            )

        area_type = classify_density(total_facilities, business_types)
        logger.info(f"📊 Probe Results: {total_facilities} facilities, {len(business_types)} business types -> {area_type.value}")

        return AreaProfile(
            type=area_type,
            facility_density=total_facilities,
            business_types=business_types,
            description=describe_area(area_type, total_facilities),
            probes_failed=failures,
        )
