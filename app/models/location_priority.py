"""
Pydantic models for location priority scoring.
These models describe the engine's inputs, intermediate analyses and results.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from enum import Enum


class PrivacyLevel(str, Enum):
    """
    Caller-declared precision tier for the reported coordinate.
    """
    EXACT = "exact"
    STREET = "street"
    AREA = "area"
    UNKNOWN = "unknown"


class PriorityLevel(str, Enum):
    MINIMAL = "MINIMAL"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AreaType(str, Enum):
    DENSE_URBAN = "dense_urban"
    URBAN = "urban"
    SUBURBAN = "suburban"
    RURAL = "rural"
    UNKNOWN = "unknown"


class ComplaintType(str, Enum):
    """
    Civic complaint categories accepted by the API.
    """
    GAS_LEAK = "gas_leak"
    FIRE_HAZARD = "fire_hazard"
    ELECTRICAL_DANGER = "electrical_danger"
    SEWAGE_OVERFLOW = "sewage_overflow"
    POTHOLE = "pothole"
    BROKEN_STREETLIGHT = "broken_streetlight"
    STREETLIGHT = "streetlight"
    TRAFFIC_SIGNAL = "traffic_signal"
    GARBAGE_COLLECTION = "garbage_collection"
    GARBAGE_DUMP = "garbage_dump"
    WATER_LEAKAGE = "water_leakage"
    ROAD_DAMAGE = "road_damage"
    NOISE_COMPLAINT = "noise_complaint"
    ILLEGAL_PARKING = "illegal_parking"
    GENERAL = "general"


class Coordinate(BaseModel):
    """Validated WGS84 coordinate. Build through utils.geo.validate_coordinate."""
    latitude: float
    longitude: float

    class Config:
        frozen = True


class LocationMeta(BaseModel):
    """
    Location metadata supplied by the caller. Never mutated by the engine.
    """
    privacy_level: PrivacyLevel = Field(default=PrivacyLevel.UNKNOWN, description="exact | street | area")
    radius_m: float = Field(default=0, ge=0, description="Declared location accuracy in meters")
    precision: str = Field(default="unknown", max_length=100)
    description: str = Field(default="", max_length=500)

    class Config:
        frozen = True
        extra = "ignore"
        # the mobile client sends camelCase (privacyLevel, radiusM)
        alias_generator = to_camel
        populate_by_name = True


class FacilityCandidate(BaseModel):
    """A directory place that survived classification, with its distance from the complaint."""
    name: str
    external_id: Optional[str] = None
    distance_m: float = Field(..., ge=0)
    rating: float = Field(default=0, ge=0)
    types: List[str] = Field(default_factory=list)
    vicinity: str = ""
    is_open: Optional[bool] = None


class FacilityTypeAnalysis(BaseModel):
    """
    Per facility type outcome of query -> classify -> score.
    A failed type keeps count=0 and score=0 with the failure in `error`.
    """
    count: int = Field(default=0, ge=0)
    top_candidates: List[FacilityCandidate] = Field(default_factory=list, max_length=5)
    nearest_distance_m: Optional[float] = None
    weight: float
    score: float = Field(default=0, ge=0, le=1)
    search_radius_used: Optional[int] = None
    description: str = ""
    error: Optional[str] = None


class CriticalFacility(BaseModel):
    type: str
    name: str
    distance_m: float
    importance: float
    description: str


class PriorityResult(BaseModel):
    """
    Engine output. Created fresh per calculation, never persisted here.
    Fallback results carry `error`, `error_code` and `fallback_reason`.
    """
    priority_score: float = Field(..., ge=0, le=1)
    priority_level: PriorityLevel
    per_type: Dict[str, FacilityTypeAnalysis] = Field(default_factory=dict)
    density_bonus: float = 0
    proximity_score: float = 0
    diversity_bonus: float = 0
    complaint_multiplier: float = 1.0
    privacy_adjustment: float = 1.0
    area_type: AreaType = AreaType.UNKNOWN
    area_description: Optional[str] = None
    facility_density: int = 0
    search_radius: Optional[int] = None
    reasoning: str = ""
    recommendation_reason: str = ""
    critical_facilities: List[CriticalFacility] = Field(default_factory=list)
    coordinates: Dict[str, Optional[float]] = Field(default_factory=dict)
    complaint_type: str = "general"
    location_meta: Optional[LocationMeta] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.error is not None


class PriorityRequest(BaseModel):
    """
    Incoming POST body for a single priority calculation.
    """
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    complaint_type: ComplaintType = Field(default=ComplaintType.GENERAL)
    location_meta: LocationMeta = Field(default_factory=LocationMeta)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "latitude": 28.6139,
                "longitude": 77.2090,
                "complaint_type": "pothole",
                "location_meta": {
                    "privacy_level": "street",
                    "radius_m": 25,
                    "precision": "street",
                    "description": "Near the India Gate roundabout",
                },
            }
        }


class BulkLocation(PriorityRequest):
    id: Optional[str] = Field(None, max_length=100, description="Caller-side identifier echoed back")


class BulkPriorityRequest(BaseModel):
    locations: List[BulkLocation] = Field(..., min_length=1)
