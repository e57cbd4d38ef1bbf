"""
Search radius planning from area type, probe density and declared accuracy.
"""

import logging
from typing import Dict, NamedTuple

from app.models.location_priority import AreaType
from app.utils.numeric import round_half_up, safe_number

logger = logging.getLogger(__name__)


class RadiusBand(NamedTuple):
    base: int
    max: int
    description: str


RADIUS_BY_AREA: Dict[AreaType, RadiusBand] = {
    AreaType.DENSE_URBAN: RadiusBand(800, 1500, "Dense urban - shorter radius due to high facility density"),
    AreaType.URBAN: RadiusBand(1200, 2000, "Urban - standard radius for city areas"),
    AreaType.SUBURBAN: RadiusBand(2000, 3500, "Suburban - larger radius due to spread out facilities"),
    AreaType.RURAL: RadiusBand(3500, 5000, "Rural - maximum radius due to sparse facilities"),
    AreaType.UNKNOWN: RadiusBand(1500, 2500, "Unknown area type - moderate radius"),
}

LOW_DENSITY = 10
HIGH_DENSITY = 50
LOW_DENSITY_FACTOR = 1.5
HIGH_DENSITY_FACTOR = 0.7
MIN_RADIUS_M = 500

ACCURACY_THRESHOLD_M = 100
MAX_ACCURACY_PADDING_M = 500


class SearchRadiusPlanner:

    def plan(self, area_type: AreaType, facility_density: int, accuracy_m: float = 0) -> int:
        """
        Final search radius in meters. Pure function of its inputs.

        Args:
            area_type: Detected area type
            facility_density: Probe facility count
            accuracy_m: Declared location accuracy (LocationMeta.radius_m)

        Returns:
            Integer radius, used as the ceiling for every facility type's own cap
        """
        band = RADIUS_BY_AREA.get(area_type, RADIUS_BY_AREA[AreaType.UNKNOWN])
        radius = float(band.base)

        if facility_density < LOW_DENSITY:
            radius = min(radius * LOW_DENSITY_FACTOR, band.max)
        elif facility_density > HIGH_DENSITY:
            radius = max(radius * HIGH_DENSITY_FACTOR, MIN_RADIUS_M)

        accuracy = safe_number(accuracy_m)
        if accuracy > ACCURACY_THRESHOLD_M:
            radius += min(accuracy * 0.5, MAX_ACCURACY_PADDING_M)

        planned = int(round_half_up(radius))
        logger.info(f"🎯 Final Search Radius: {planned}m for {area_type.value} area ({band.description})")
        return planned

    @staticmethod
    def effective_radius(planned_radius: int, type_max_radius_m: int) -> int:
        return min(planned_radius, type_max_radius_m)
