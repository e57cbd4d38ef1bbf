"""
Location priority endpoints - priority scoring for complaint coordinates.

The engine itself never raises; these routes translate its fallback results
into HTTP statuses the frontend can act on:
- configuration / credential problems -> 503 (retry after 5 minutes)
- directory quota exhausted -> 429 (retry after 1 minute)
- directory unreachable -> 503 (retry after 2 minutes)
- anything else -> 500
"""

import asyncio
import logging
import time
from datetime import datetime
from functools import partial
from typing import Dict, List, NamedTuple, Optional

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.core.exceptions import InvalidCoordinateError
from app.core.settings import settings
from app.models.base import ErrorResponse
from app.models.location_priority import (
    BulkLocation,
    BulkPriorityRequest,
    ComplaintType,
    PriorityRequest,
    PriorityResult,
    PrivacyLevel,
)
from app.services.location_priority.aggregator import COMPLAINT_MULTIPLIERS, PRIORITY_THRESHOLDS
from app.services.location_priority.engine import LocationPriorityEngine, get_location_priority_engine
from app.utils.geo import validate_coordinate
from app.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/location-priority", tags=["Location Priority"])


class ErrorMapping(NamedTuple):
    status_code: int
    error: str
    details: str
    retry_after: Optional[int]


ERROR_MAPPINGS: Dict[str, ErrorMapping] = {
    "CONFIGURATION_ERROR": ErrorMapping(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Location service temporarily unavailable",
        "External API configuration issue", 300,
    ),
    "AUTH_DENIED": ErrorMapping(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Location service temporarily unavailable",
        "External API configuration issue", 300,
    ),
    "QUOTA_EXCEEDED": ErrorMapping(
        status.HTTP_429_TOO_MANY_REQUESTS, "Service rate limit exceeded",
        "Please try again in a few moments", 60,
    ),
    "NETWORK_ERROR": ErrorMapping(
        status.HTTP_503_SERVICE_UNAVAILABLE, "External service connectivity issue",
        "Unable to reach location data provider", 120,
    ),
}
GENERIC_ERROR = ErrorMapping(
    status.HTTP_500_INTERNAL_SERVER_ERROR, "Location priority calculation failed", "Internal server error", None,
)


def error_response(code: str, result: Optional[PriorityResult] = None, details: Optional[str] = None) -> JSONResponse:
    """Build the JSON error response (with Retry-After where it applies) for an error code."""
    if code.startswith("INVALID_COORDINATE") or code == "OUTSIDE_SERVICE_AREA":
        mapping = ErrorMapping(status.HTTP_400_BAD_REQUEST, "Invalid location", details or code, None)
    else:
        mapping = ERROR_MAPPINGS.get(code, GENERIC_ERROR)

    if settings.DEBUG and result is not None and result.fallback_reason:
        details = result.fallback_reason

    body = ErrorResponse(
        error=mapping.error,
        code=code,
        details=details or mapping.details,
        retry_after=mapping.retry_after,
        result=result.model_dump(mode="json") if result is not None else None,
    )
    headers = {"Retry-After": str(mapping.retry_after)} if mapping.retry_after else None
    return JSONResponse(status_code=mapping.status_code, content=body.model_dump(mode="json"), headers=headers)


async def _run_in_executor(func, *args, **kwargs):
    # The engine is synchronous (requests + rate-limit sleeps); keep it off the event loop
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


@router.post("/calculate")
async def calculate_priority(request: PriorityRequest):
    """
    Calculate the location-based priority score for a complaint.

    This endpoint:
    1. Checks the coordinate is inside the service area (400 otherwise)
    2. Runs the location priority engine
    3. Maps engine fallbacks to 503 / 429 / 500
    """
    logger.info(f"📝 POST /location-priority/calculate: ({request.latitude}, {request.longitude}) {request.complaint_type.value}")
    engine = get_location_priority_engine()

    try:
        validate_coordinate(request.latitude, request.longitude, engine.service_area)
    except InvalidCoordinateError as e:
        return error_response(e.error_code, details=str(e))

    start = time.monotonic()
    result: PriorityResult = await _run_in_executor(
        engine.calculate,
        request.latitude,
        request.longitude,
        request.complaint_type.value,
        request.location_meta,
    )
    processing_ms = int((time.monotonic() - start) * 1000)

    if result.is_fallback:
        logger.warning(f"Priority calculation fell back [{result.error_code}]: {result.fallback_reason}")
        return error_response(result.error_code or "CALCULATION_ERROR", result)

    logger.info(f"✅ Priority calculation completed in {processing_ms}ms")
    response = {"success": True}
    response.update(result.model_dump(mode="json"))
    response["facilities_nearby"] = sum(analysis.count for analysis in result.per_type.values())
    response["metadata"] = {
        "processing_time_ms": processing_ms,
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.APP_VERSION,
        "provider": engine.client.provider_name,
    }
    return response


def _run_bulk(engine: LocationPriorityEngine, locations: List[BulkLocation]) -> List[Dict]:
    limiter = RateLimiter(settings.BULK_DELAY_SECONDS, "bulk")
    results = []
    for index, location in enumerate(locations):
        location_id = location.id or f"location_{index}"
        coordinates = {"latitude": location.latitude, "longitude": location.longitude}

        try:
            validate_coordinate(location.latitude, location.longitude, engine.service_area)
        except InvalidCoordinateError as e:
            results.append({"index": index, "success": False, "location_id": location_id,
                            "error": str(e), "code": e.error_code, "coordinates": coordinates})
            continue

        limiter.acquire()
        result = engine.calculate(
            location.latitude, location.longitude, location.complaint_type.value, location.location_meta,
        )
        item = {
            "index": index,
            "success": not result.is_fallback,
            "location_id": location_id,
            "priority_score": result.priority_score,
            "priority_level": result.priority_level.value,
            "coordinates": coordinates,
        }
        if result.is_fallback:
            item["error"] = result.fallback_reason
            item["code"] = result.error_code
        results.append(item)
    return results


@router.post("/calculate-bulk")
async def calculate_priority_bulk(request: BulkPriorityRequest):
    """
    Calculate priorities for up to BULK_MAX_LOCATIONS locations, one after another.
    """
    if len(request.locations) > settings.BULK_MAX_LOCATIONS:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error=f"Maximum {settings.BULK_MAX_LOCATIONS} locations allowed per request",
                code="TOO_MANY_LOCATIONS",
            ).model_dump(mode="json"),
        )

    engine = get_location_priority_engine()
    start = time.monotonic()
    results = await _run_in_executor(_run_bulk, engine, request.locations)
    succeeded = sum(1 for item in results if item["success"])

    return {
        "success": True,
        "total_locations": len(request.locations),
        "successful_calculations": succeeded,
        "failed_calculations": len(results) - succeeded,
        "results": results,
        "metadata": {
            "processing_time_ms": int((time.monotonic() - start) * 1000),
            "timestamp": datetime.utcnow().isoformat(),
        },
    }


@router.get("/info")
async def service_info():
    """
    Service capabilities: privacy levels, complaint types, priority bands, facility types.
    """
    engine = get_location_priority_engine()
    return {
        "service": {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": "Location analysis for civic complaint prioritization",
            "provider": engine.client.provider_name,
        },
        "privacy_levels": {
            PrivacyLevel.EXACT.value: "Exact coordinates (±5-10m) for urgent infrastructure issues",
            PrivacyLevel.STREET.value: "Street-level accuracy (±25m) for general civic complaints",
            PrivacyLevel.AREA.value: "Neighborhood-level (±150m) for privacy-conscious reporting",
        },
        "complaint_types": [complaint.value for complaint in ComplaintType],
        "complaint_multipliers": COMPLAINT_MULTIPLIERS,
        "priority_levels": dict([(level.value, minimum) for minimum, level in PRIORITY_THRESHOLDS] + [("MINIMAL", 0.0)]),
        "facility_types": {
            config.id: {
                "weight": config.weight,
                "max_radius_m": config.max_radius_m,
                "description": config.description,
            }
            for config in engine.catalog
        },
        "limits": {
            "max_bulk_locations": settings.BULK_MAX_LOCATIONS,
            "max_retries": settings.PLACES_MAX_RETRIES,
        },
        "service_area": engine.service_area._asdict() if engine.service_area else None,
    }
