"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and places-directory connectivity tests.
"""

import asyncio
import time
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.settings import settings
from app.models.location_priority import LocationMeta, PrivacyLevel
from app.services.location_priority.engine import get_location_priority_engine


router = APIRouter(prefix="/health", tags=["Health"])

# New Delhi, street-level pothole report
PROBE_LATITUDE = 28.6139
PROBE_LONGITUDE = 77.2090


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/places")
async def places_health():
    """
    Places directory connectivity check.
    Runs a full priority calculation for a known location; 503 if it falls back.
    """
    engine = get_location_priority_engine()
    meta = LocationMeta(privacy_level=PrivacyLevel.STREET, radius_m=25, precision="street")

    start = time.monotonic()
    loop = asyncio.get_event_loop()
    result = await loop.run_in_executor(
        None, engine.calculate, PROBE_LATITUDE, PROBE_LONGITUDE, "pothole", meta
    )
    elapsed_ms = int((time.monotonic() - start) * 1000)

    if result.is_fallback:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "provider": engine.client.provider_name,
                "error": result.fallback_reason,
                "code": result.error_code,
                "timestamp": datetime.utcnow().isoformat()
            }
        )

    return {
        "status": "healthy",
        "provider": engine.client.provider_name,
        "response_time_ms": elapsed_ms,
        "last_test_score": result.priority_score,
        "area_type": result.area_type.value,
        "facilities_found": sum(analysis.count for analysis in result.per_type.values()),
        "timestamp": datetime.utcnow().isoformat()
    }
