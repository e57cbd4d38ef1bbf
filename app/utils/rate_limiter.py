"""
Minimum-spacing rate limiter for sequential places-directory calls.

The first acquire never waits; each later acquire waits until at least
`min_interval` seconds have passed since the previous one. A set
threading.Event makes the next acquire (or the one in progress, once its
sleep returns) raise CalculationCancelledError.
"""

import logging
import threading
import time
from typing import Callable, Optional

from app.core.exceptions import CalculationCancelledError

logger = logging.getLogger(__name__)


class RateLimiter:

    def __init__(
        self,
        min_interval: float,
        name: str = "places",
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.min_interval = max(0.0, float(min_interval))
        self.name = name
        self._sleep = sleep
        self._clock = clock
        self._cancel_event = cancel_event
        self._lock = threading.Lock()
        self._last_acquired: Optional[float] = None
        self.total_wait = 0.0

    @property
    def cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def acquire(self) -> float:
        """
        Block until the next call is allowed.

        Returns:
            Seconds spent waiting

        Raises:
            CalculationCancelledError: If the cancel event is (or becomes) set
        """
        with self._lock:
            self._raise_if_cancelled()

            wait = 0.0
            if self._last_acquired is not None:
                wait = max(0.0, self.min_interval - (self._clock() - self._last_acquired))

            if wait > 0:
                logger.debug(f"[{self.name}] rate limiter waiting {wait:.3f}s")
                self._sleep(wait)
                self.total_wait += wait
                self._raise_if_cancelled()

            self._last_acquired = self._clock()
            return wait

    def _raise_if_cancelled(self):
        if self.cancelled:
            raise CalculationCancelledError(f"Calculation cancelled while waiting on {self.name} rate limiter")
