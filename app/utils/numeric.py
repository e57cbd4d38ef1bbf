"""
Numeric safety helpers shared by the scorer and the aggregator.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)


def safe_number(value, default: float = 0.0, context: str = "") -> float:
    """
    Return `value` as a float, or `default` when it is NaN, infinite or not a number.

    Args:
        value: Any candidate numeric value
        default: Substitute for unusable values
        context: Optional label for the warning log

    Returns:
        A finite float
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric value {value!r} replaced with {default} {context}".rstrip())
        return default

    if not math.isfinite(number):
        logger.warning(f"Non-finite value {number} replaced with {default} {context}".rstrip())
        return default

    return number


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, safe_number(value)))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator (0.125 -> 0.13), not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(safe_number(value))).quantize(quantum, rounding=ROUND_HALF_UP))
