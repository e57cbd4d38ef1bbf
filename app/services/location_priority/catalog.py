"""
Facility type catalog - static configuration of critical infrastructure types.

Each entry carries the type's relative importance weight, the maximum search
radius used both as a query cap and as the distance-decay horizon, the
directory keywords to search with, and the keyword rules the classifier
applies to the results.
"""

from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel, Field


class FacilityTypeConfig(BaseModel):
    id: str
    weight: float = Field(..., ge=0, le=1)
    max_radius_m: int = Field(..., gt=0)
    search_keys: Tuple[str, ...]
    include_keywords: Tuple[str, ...] = ()
    exclude_keywords: Tuple[str, ...] = ()
    reject_transport_names: bool = False
    description: str = ""

    class Config:
        frozen = True


class FacilityTypeCatalog:
    """
    Immutable, ordered set of facility types. Built once and injected into the
    engine; safe to share between concurrent calculations.
    """

    def __init__(self, configs: List[FacilityTypeConfig]):
        ids = [config.id for config in configs]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate facility type ids in catalog: {ids}")
        self._configs: Tuple[FacilityTypeConfig, ...] = tuple(configs)
        self._by_id: Dict[str, FacilityTypeConfig] = {config.id: config for config in configs}

    def __iter__(self) -> Iterator[FacilityTypeConfig]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, facility_type: str) -> bool:
        return facility_type in self._by_id

    def get(self, facility_type: str) -> FacilityTypeConfig:
        return self._by_id[facility_type]


def default_catalog() -> FacilityTypeCatalog:
    """The eight standard critical-infrastructure types."""
    return FacilityTypeCatalog([
        FacilityTypeConfig(
            id="hospital",
            weight=0.9,
            max_radius_m=3000,  # medical emergencies
            search_keys=("hospital", "doctor"),
            include_keywords=("hospital", "clinic", "medical", "health", "emergency"),
            exclude_keywords=("store", "shop", "mart", "pharmacy", "medical_store",
                              "transport", "logistics", "cargo", "travel", "bus"),
            reject_transport_names=True,
            description="Medical facilities",
        ),
        FacilityTypeConfig(
            id="school",
            weight=0.8,
            max_radius_m=2500,
            search_keys=("school", "university", "primary_school"),
            include_keywords=("school", "college", "university", "education"),
            exclude_keywords=("store", "shop"),
            reject_transport_names=True,
            description="Educational institutions",
        ),
        FacilityTypeConfig(
            id="police",
            weight=0.85,
            max_radius_m=3000,
            search_keys=("police",),
            include_keywords=("police", "station", "law"),
            description="Law enforcement",
        ),
        FacilityTypeConfig(
            id="fire_station",
            weight=0.9,
            max_radius_m=3000,
            search_keys=("fire_station",),
            include_keywords=("fire", "emergency"),
            description="Emergency services",
        ),
        FacilityTypeConfig(
            id="transit_station",
            weight=0.7,
            max_radius_m=2000,
            search_keys=("transit_station", "bus_station", "subway_station"),
            include_keywords=("station", "bus", "metro", "transport"),
            description="Public transport",
        ),
        FacilityTypeConfig(
            id="government",
            weight=0.75,
            max_radius_m=3000,  # municipal services
            search_keys=("local_government_office", "city_hall"),
            reject_transport_names=True,
            description="Government offices",
        ),
        FacilityTypeConfig(
            id="bank",
            weight=0.6,
            max_radius_m=1000,
            search_keys=("bank", "atm"),
            description="Financial services",
        ),
        FacilityTypeConfig(
            id="pharmacy",
            weight=0.7,
            max_radius_m=1500,
            search_keys=("pharmacy", "drugstore"),
            description="Medical supplies",
        ),
    ])
