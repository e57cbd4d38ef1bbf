"""
Facility search - runs a facility type's directory keywords through the query
client with retries and hands the results to the classifier.
"""

import logging
import threading
import time
from typing import Callable, List, Optional

from app.core.exceptions import AuthDeniedError, CalculationCancelledError, FacilityQueryError
from app.models.location_priority import Coordinate, FacilityCandidate
from app.services.location_priority.catalog import FacilityTypeConfig
from app.services.location_priority.classifier import FacilityClassifier
from app.services.places.base import FacilityQueryClient

logger = logging.getLogger(__name__)


class FacilitySearcher:
    """
    For each search key of a facility type, in order:
    query (retrying failures with linear backoff) -> classify.
    The first key that yields accepted candidates wins.

    AuthDeniedError is not retried and stops the search. If every key failed,
    the last error is raised; a key that answered with nothing counts as an
    answer, not a failure.
    """

    def __init__(
        self,
        client: FacilityQueryClient,
        classifier: FacilityClassifier,
        max_retries: int = 2,
        retry_backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.classifier = classifier
        self.max_retries = max(0, int(max_retries))
        self.retry_backoff_seconds = retry_backoff_seconds
        self._sleep = sleep

    def search(
        self,
        origin: Coordinate,
        config: FacilityTypeConfig,
        radius_m: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[FacilityCandidate]:
        last_error: Optional[FacilityQueryError] = None
        answered = False

        for search_key in config.search_keys:
            try:
                places = self._query_with_retry(origin, search_key, radius_m, cancel_event)
            except AuthDeniedError:
                raise
            except FacilityQueryError as e:
                last_error = e
                logger.warning(f"⚠️ {config.id}: '{search_key}' failed after {self.max_retries + 1} attempts: {e}")
                continue

            answered = True
            candidates = self.classifier.classify(origin, places, config)
            logger.debug(f"{config.id}: '{search_key}' kept {len(candidates)} of {len(places)} places")
            if candidates:
                return candidates

        if last_error is not None and not answered:
            raise last_error
        return []

    def _query_with_retry(self, origin: Coordinate, search_key: str, radius_m: int,
                          cancel_event: Optional[threading.Event]):
        for attempt in range(self.max_retries + 1):
            try:
                return self.client.search_nearby(origin.latitude, origin.longitude, search_key, radius_m)
            except AuthDeniedError:
                raise
            except FacilityQueryError as e:
                if attempt >= self.max_retries:
                    raise
                backoff = self.retry_backoff_seconds * (attempt + 1)
                logger.info(
                    f"Query '{search_key}' failed (attempt {attempt + 1}/{self.max_retries + 1}): {e}; "
                    f"retrying in {backoff:.1f}s"
                )
                self._sleep(backoff)
                if cancel_event is not None and cancel_event.is_set():
                    raise CalculationCancelledError(f"Calculation cancelled while retrying '{search_key}'")
