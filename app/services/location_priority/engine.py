"""
Location Priority Engine - proximity-to-critical-infrastructure priority scoring.

DESIGN PRINCIPLES:
- Priority is SYSTEM-DERIVED from nearby facilities, never user-editable
- One failing facility type never aborts the calculation
- Callers always receive a well-formed PriorityResult; fatal problems
  (bad coordinate, missing credential, total data-source outage) produce a
  MEDIUM fallback result instead of an exception
- No state is shared between calculations except the read-only catalog

Flow: validate -> detect area type -> plan radius -> per facility type
(query -> classify -> score) -> aggregate -> reasoning.
"""

import logging
import math
import threading
import time
from typing import Callable, Dict, Optional, Union

from app.core.exceptions import FacilityQueryError, ConfigurationError, LocationPriorityError
from app.core.settings import settings
from app.models.location_priority import (
    Coordinate,
    FacilityTypeAnalysis,
    LocationMeta,
    PriorityLevel,
    PriorityResult,
)
from app.services.location_priority.aggregator import PriorityAggregator
from app.services.location_priority.area_detection import AreaTypeDetector
from app.services.location_priority.catalog import FacilityTypeCatalog, FacilityTypeConfig, default_catalog
from app.services.location_priority.classifier import FacilityClassifier
from app.services.location_priority.facility_search import FacilitySearcher
from app.services.location_priority.radius_planner import SearchRadiusPlanner
from app.services.location_priority.reasoning import ReasoningGenerator
from app.services.location_priority.scoring import FacilityTypeScorer
from app.services.places.base import FacilityQueryClient
from app.utils.geo import ServiceArea, validate_coordinate
from app.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

FALLBACK_SCORE = 0.5
FALLBACK_LEVEL = PriorityLevel.MEDIUM
TOP_CANDIDATES = 5


class LocationPriorityEngine:

    def __init__(
        self,
        client: FacilityQueryClient,
        catalog: Optional[FacilityTypeCatalog] = None,
        service_area: Optional[ServiceArea] = None,
        query_delay_seconds: float = 0.2,
        probe_delay_seconds: float = 0.3,
        max_retries: int = 2,
        retry_backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.catalog = catalog or default_catalog()
        self.service_area = service_area
        self.query_delay_seconds = query_delay_seconds
        self.probe_delay_seconds = probe_delay_seconds
        self._sleep = sleep

        self.classifier = FacilityClassifier()
        self.searcher = FacilitySearcher(client, self.classifier, max_retries, retry_backoff_seconds, sleep)
        self.area_detector = AreaTypeDetector(client)
        self.radius_planner = SearchRadiusPlanner()
        self.scorer = FacilityTypeScorer()
        self.aggregator = PriorityAggregator()
        self.reasoning = ReasoningGenerator()

    def calculate(
        self,
        latitude,
        longitude,
        complaint_type: str = "general",
        location_meta: Optional[Union[LocationMeta, dict]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PriorityResult:
        """
        Calculate the location priority for a complaint.

        Args:
            latitude: Complaint latitude
            longitude: Complaint longitude
            complaint_type: Civic complaint category (e.g. "pothole")
            location_meta: Privacy level and accuracy metadata (model or dict)
            cancel_event: Set it to abandon the calculation between directory calls

        Returns:
            PriorityResult (a MEDIUM fallback result on fatal errors)
        """
        complaint_type = getattr(complaint_type, "value", complaint_type) or "general"
        meta = None
        try:
            meta = self._coerce_meta(location_meta)
            logger.info(
                f"🔍 Analyzing location priority for: {latitude}, {longitude} "
                f"(privacy={meta.privacy_level.value}, accuracy=±{meta.radius_m}m, complaint={complaint_type})"
            )
            return self._calculate(latitude, longitude, complaint_type, meta, cancel_event)
        except LocationPriorityError as e:
            logger.error(f"❌ Location priority calculation failed [{e.error_code}]: {e}")
            return self._fallback(latitude, longitude, complaint_type, meta, str(e), e.error_code)
        except Exception as e:
            logger.error(f"❌ Location priority calculation failed unexpectedly: {e}", exc_info=True)
            return self._fallback(latitude, longitude, complaint_type, meta, str(e), LocationPriorityError.error_code)

    def _calculate(self, latitude, longitude, complaint_type: str, meta: LocationMeta,
                   cancel_event: Optional[threading.Event]) -> PriorityResult:
        origin = validate_coordinate(latitude, longitude, self.service_area)

        if not self.client.is_configured():
            raise ConfigurationError(f"Places provider '{self.client.provider_name}' is not configured (missing API key)")

        probe_limiter = RateLimiter(self.probe_delay_seconds, "area-probe", sleep=self._sleep, cancel_event=cancel_event)
        area = self.area_detector.detect(origin, probe_limiter)
        search_radius = self.radius_planner.plan(area.type, area.facility_density, meta.radius_m)
        logger.info(f"🔍 Dynamic search radius {search_radius}m for area type {area.type.value}")

        query_limiter = RateLimiter(self.query_delay_seconds, "facility-query", sleep=self._sleep, cancel_event=cancel_event)
        per_type: Dict[str, FacilityTypeAnalysis] = {}
        last_error: Optional[FacilityQueryError] = None

        for config in self.catalog:
            query_limiter.acquire()
            try:
                per_type[config.id] = self._analyze_type(origin, config, search_radius, cancel_event)
            except FacilityQueryError as e:
                last_error = e
                logger.warning(f"⚠️ Error analyzing {config.id}: {e}")
                per_type[config.id] = FacilityTypeAnalysis(
                    weight=config.weight,
                    description=config.description,
                    search_radius_used=self.radius_planner.effective_radius(search_radius, config.max_radius_m),
                    error=str(e),
                )

        if last_error is not None and all(analysis.error for analysis in per_type.values()):
            raise type(last_error)(
                f"All {len(per_type)} facility type queries failed; last error: {last_error}",
                last_error.error_code,
            )

        aggregate = self.aggregator.aggregate(per_type, complaint_type, meta.privacy_level)
        reasoning = self.reasoning.generate(per_type, aggregate.priority_score, complaint_type, meta.privacy_level)

        logger.info(f"✅ Priority {aggregate.priority_score} ({aggregate.priority_level.value}) for {origin.latitude}, {origin.longitude}")

        return PriorityResult(
            priority_score=aggregate.priority_score,
            priority_level=aggregate.priority_level,
            per_type=per_type,
            density_bonus=aggregate.density_bonus,
            proximity_score=aggregate.proximity_score,
            diversity_bonus=aggregate.diversity_bonus,
            complaint_multiplier=aggregate.complaint_multiplier,
            privacy_adjustment=aggregate.privacy_adjustment,
            area_type=area.type,
            area_description=area.description,
            facility_density=area.facility_density,
            search_radius=search_radius,
            reasoning=reasoning,
            recommendation_reason=reasoning,
            critical_facilities=self.aggregator.critical_facilities(per_type),
            coordinates={"latitude": origin.latitude, "longitude": origin.longitude},
            complaint_type=complaint_type,
            location_meta=meta,
        )

    def _analyze_type(self, origin: Coordinate, config: FacilityTypeConfig, search_radius: int,
                      cancel_event: Optional[threading.Event]) -> FacilityTypeAnalysis:
        radius = self.radius_planner.effective_radius(search_radius, config.max_radius_m)
        logger.info(f"   🏢 Searching for {config.id} within {radius}m...")

        candidates = self.searcher.search(origin, config, radius, cancel_event)
        score = self.scorer.score(candidates, config)

        if candidates:
            logger.info(f"   ✅ Found {len(candidates)} {config.id} facilities, nearest {candidates[0].name} at {candidates[0].distance_m:.0f}m")

        return FacilityTypeAnalysis(
            count=len(candidates),
            top_candidates=candidates[:TOP_CANDIDATES],
            nearest_distance_m=candidates[0].distance_m if candidates else None,
            weight=config.weight,
            score=score,
            search_radius_used=radius,
            description=config.description,
        )

    @staticmethod
    def _coerce_meta(location_meta) -> LocationMeta:
        if location_meta is None:
            return LocationMeta()
        if isinstance(location_meta, LocationMeta):
            return location_meta
        return LocationMeta(**location_meta)

    @staticmethod
    def _fallback(latitude, longitude, complaint_type: str, meta: Optional[LocationMeta],
                  reason: str, error_code: str) -> PriorityResult:
        def _coordinate_or_none(value):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                return None
            return float(value)

        return PriorityResult(
            priority_score=FALLBACK_SCORE,
            priority_level=FALLBACK_LEVEL,
            error="Unable to calculate location priority",
            error_code=error_code,
            fallback_reason=reason or "API service unavailable",
            reasoning="Default priority assigned - location analysis unavailable",
            recommendation_reason="Default priority assigned - location analysis unavailable",
            coordinates={"latitude": _coordinate_or_none(latitude), "longitude": _coordinate_or_none(longitude)},
            complaint_type=str(complaint_type),
            location_meta=meta,
        )


def build_engine_from_settings(client: FacilityQueryClient, sleep: Callable[[float], None] = time.sleep) -> LocationPriorityEngine:
    service_area = None
    if settings.SERVICE_AREA_ENABLED:
        service_area = ServiceArea(
            south=settings.SERVICE_AREA_SOUTH,
            west=settings.SERVICE_AREA_WEST,
            north=settings.SERVICE_AREA_NORTH,
            east=settings.SERVICE_AREA_EAST,
            name="service area (India)",
        )
    return LocationPriorityEngine(
        client=client,
        catalog=default_catalog(),
        service_area=service_area,
        query_delay_seconds=settings.FACILITY_QUERY_DELAY_SECONDS,
        probe_delay_seconds=settings.AREA_PROBE_DELAY_SECONDS,
        max_retries=settings.PLACES_MAX_RETRIES,
        retry_backoff_seconds=settings.PLACES_RETRY_BACKOFF_SECONDS,
        sleep=sleep,
    )


# Global engine instance (singleton pattern)
_engine: Optional[LocationPriorityEngine] = None


def get_location_priority_engine() -> LocationPriorityEngine:
    """
    Get or create the LocationPriorityEngine singleton instance.

    Returns:
        LocationPriorityEngine wired to the configured places client
    """
    global _engine
    if _engine is None:
        from app.services.places.resolver import get_places_client
        _engine = build_engine_from_settings(get_places_client())
    return _engine
