"""
Pydantic base models for API responses.

DESIGN PRINCIPLE:
- Models should reflect data structure, not business logic
- Error bodies always say whether a retry makes sense
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, Optional


class BaseResponse(BaseModel):
    """
    Base response model for API responses.
    All API responses can extend this for consistency.
    """
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseResponse):
    """
    Error body returned by the location priority endpoints.
    `result` carries the engine's fallback result when there is one.
    """
    success: bool = False
    error: str
    code: str
    details: Optional[str] = None
    retry_after: Optional[int] = Field(None, description="Seconds before a retry is worthwhile")
    result: Optional[Dict[str, Any]] = None
