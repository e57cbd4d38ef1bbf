"""
Per facility type scoring.

score = min(1, (distance_score + count_bonus + operational_bonus) * importance)

- distance_score: linear decay from 1 at the complaint to 0 at the type's max radius
- count_bonus: +0.05 per candidate, capped at 0.3
- operational_bonus: +0.1 when the nearest candidate is open right now
- importance: 1.3 for critical categories, 1.1 for high-importance ones
"""

import logging
from typing import Sequence

from app.models.location_priority import FacilityCandidate
from app.services.location_priority.catalog import FacilityTypeConfig
from app.utils.numeric import safe_number

logger = logging.getLogger(__name__)

CRITICAL_CATEGORIES = frozenset({"hospital", "fire_station", "police", "emergency"})
HIGH_IMPORTANCE_CATEGORIES = frozenset({"school", "university", "government"})

CRITICAL_MULTIPLIER = 1.3
HIGH_IMPORTANCE_MULTIPLIER = 1.1

COUNT_BONUS_PER_FACILITY = 0.05
MAX_COUNT_BONUS = 0.3
OPERATIONAL_BONUS = 0.1


def importance_multiplier(candidate: FacilityCandidate) -> float:
    types = set(candidate.types)
    if types & CRITICAL_CATEGORIES:
        return CRITICAL_MULTIPLIER
    if types & HIGH_IMPORTANCE_CATEGORIES:
        return HIGH_IMPORTANCE_MULTIPLIER
    return 1.0


class FacilityTypeScorer:

    def score(self, candidates: Sequence[FacilityCandidate], config: FacilityTypeConfig) -> float:
        """
        Score one facility type's classified, distance-sorted candidates.

        Returns:
            Score in [0, 1]; 0 for an empty list or any non-finite intermediate
        """
        if not candidates:
            return 0.0

        nearest = candidates[0]
        distance_score = max(0.0, 1 - safe_number(nearest.distance_m) / config.max_radius_m)
        count_bonus = min(MAX_COUNT_BONUS, len(candidates) * COUNT_BONUS_PER_FACILITY)
        operational_bonus = OPERATIONAL_BONUS if nearest.is_open is True else 0.0
        multiplier = importance_multiplier(nearest)

        raw = (distance_score + count_bonus + operational_bonus) * multiplier
        final = safe_number(raw, context=f"(score for {config.id}, nearest {nearest.name!r})")

        logger.debug(
            f"{config.id}: distance={distance_score:.3f} count={count_bonus:.2f} "
            f"open={operational_bonus:.1f} importance={multiplier} -> {final:.3f}"
        )
        return max(0.0, min(1.0, final))
