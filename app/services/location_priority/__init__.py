"""
Location priority engine.

Scores a complaint coordinate by its proximity to critical infrastructure.
Degrades gracefully: per facility type failures score zero, fatal problems
return a MEDIUM fallback result.
"""

from app.services.location_priority.catalog import FacilityTypeCatalog, FacilityTypeConfig, default_catalog
from app.services.location_priority.engine import LocationPriorityEngine, get_location_priority_engine

__all__ = [
    "FacilityTypeCatalog",
    "FacilityTypeConfig",
    "LocationPriorityEngine",
    "default_catalog",
    "get_location_priority_engine",
]
