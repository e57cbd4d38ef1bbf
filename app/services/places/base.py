from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class GeoPoint(BaseModel):
    lat: float
    lng: float


class RawPlace(BaseModel):
    """
    A place exactly as the directory returned it, before classification.
    """
    name: str
    external_id: Optional[str] = None
    location: GeoPoint
    rating: Optional[float] = None
    types: List[str] = Field(default_factory=list)
    vicinity: Optional[str] = None
    open_now: Optional[bool] = None


class FacilityQueryClient(ABC):
    """
    Abstract places-directory client.

    Contract:
    - Input: latitude, longitude, a directory type keyword and a radius in meters
    - Output: ordered list of RawPlace
    - Failures raise one of QuotaExceededError, AuthDeniedError,
      TransientNetworkError (never a raw requests exception)
    - One call is one HTTP request; retries and spacing are the caller's job
    """

    provider_name = "unknown"

    @abstractmethod
    def search_nearby(self, latitude: float, longitude: float, type_keyword: str, radius_m: int) -> List[RawPlace]:
        raise NotImplementedError

    def is_configured(self) -> bool:
        """False when the client cannot possibly succeed (e.g. missing credential)."""
        return True
