"""
Error taxonomy for the location priority engine.

Fatal errors (bad coordinate, missing credential) abort a calculation before
any directory call. Query errors are recoverable and stay isolated to the
facility type or area probe that raised them.
"""

from typing import Optional


class LocationPriorityError(Exception):
    """Base class for every error raised inside the engine."""

    error_code = "CALCULATION_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        if error_code:
            self.error_code = error_code


class InvalidCoordinateError(LocationPriorityError):
    """Latitude/longitude is non-numeric, non-finite or out of range."""

    error_code = "INVALID_COORDINATE"


class ConfigurationError(LocationPriorityError):
    """The places directory client is not usable (e.g. missing API key)."""

    error_code = "CONFIGURATION_ERROR"


class CalculationCancelledError(LocationPriorityError):
    """Caller cancelled the calculation while it was waiting on the rate limiter."""

    error_code = "CANCELLED"


class FacilityQueryError(LocationPriorityError):
    """A single places-directory query failed."""

    error_code = "QUERY_FAILED"


class QuotaExceededError(FacilityQueryError):
    error_code = "QUOTA_EXCEEDED"


class AuthDeniedError(FacilityQueryError):
    error_code = "AUTH_DENIED"


class TransientNetworkError(FacilityQueryError):
    error_code = "NETWORK_ERROR"
