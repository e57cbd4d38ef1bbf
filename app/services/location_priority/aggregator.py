"""
Priority aggregation - combines per facility type analyses into one score.

final = min(1, (proximity + density_bonus) * complaint_multiplier * privacy_adjustment)

where proximity is the weight-averaged score of the types that scored above
zero plus a diversity bonus for how many types did.
"""

import logging
from typing import Dict, List, NamedTuple, Optional

from app.models.location_priority import CriticalFacility, FacilityTypeAnalysis, PriorityLevel, PrivacyLevel
from app.utils.numeric import clamp, round_half_up, safe_number

logger = logging.getLogger(__name__)

# (minimum scored types, bonus)
DIVERSITY_BONUSES = ((4, 0.15), (3, 0.10), (2, 0.05))

# (minimum total facilities, bonus)
DENSITY_BONUSES = ((50, 0.25), (30, 0.20), (20, 0.15), (10, 0.10), (5, 0.05))

# complaint type -> facility type -> multiplier
COMPLAINT_MULTIPLIERS: Dict[str, Dict[str, float]] = {
    "pothole": {"hospital": 1.3, "school": 1.2, "transit_station": 1.4},
    "sewage_overflow": {"hospital": 1.5, "school": 1.4, "pharmacy": 1.3},
    "streetlight": {"school": 1.2, "police": 1.3, "transit_station": 1.2},
    "water_leakage": {"hospital": 1.3, "government": 1.2},
    "garbage_dump": {"hospital": 1.4, "school": 1.3, "pharmacy": 1.2},
}
MULTIPLIER_SCORE_THRESHOLD = 0.5

PRIVACY_ADJUSTMENTS: Dict[PrivacyLevel, float] = {
    PrivacyLevel.EXACT: 1.0,
    PrivacyLevel.STREET: 0.95,
    PrivacyLevel.AREA: 0.90,
    PrivacyLevel.UNKNOWN: 0.95,
}

# (minimum score, level), checked in order
PRIORITY_THRESHOLDS = (
    (0.8, PriorityLevel.CRITICAL),
    (0.6, PriorityLevel.HIGH),
    (0.4, PriorityLevel.MEDIUM),
    (0.2, PriorityLevel.LOW),
)

MAX_CRITICAL_FACILITIES = 5


class AggregateScore(NamedTuple):
    proximity_score: float
    diversity_bonus: float
    density_bonus: float
    complaint_multiplier: float
    privacy_adjustment: float
    priority_score: float
    priority_level: PriorityLevel


def priority_level_for(score: float) -> PriorityLevel:
    for minimum, level in PRIORITY_THRESHOLDS:
        if score >= minimum:
            return level
    return PriorityLevel.MINIMAL


class PriorityAggregator:

    def diversity_bonus(self, per_type: Dict[str, FacilityTypeAnalysis]) -> float:
        scored = sum(1 for analysis in per_type.values() if analysis.score > 0)
        for minimum, bonus in DIVERSITY_BONUSES:
            if scored >= minimum:
                return bonus
        return 0.0

    def proximity_score(self, per_type: Dict[str, FacilityTypeAnalysis]) -> float:
        """Weighted average of positive type scores plus the diversity bonus, at most 1."""
        total = 0.0
        weight_sum = 0.0
        for facility_type, analysis in per_type.items():
            if analysis.score > 0:
                total += analysis.score * analysis.weight
                weight_sum += analysis.weight
                logger.debug(f"   {facility_type}: {analysis.count} facilities, score {analysis.score:.3f}")

        average = safe_number(total / weight_sum) if weight_sum > 0 else 0.0
        return min(1.0, average + self.diversity_bonus(per_type))

    def density_bonus(self, per_type: Dict[str, FacilityTypeAnalysis]) -> float:
        total_facilities = sum(analysis.count for analysis in per_type.values())
        for minimum, bonus in DENSITY_BONUSES:
            if total_facilities >= minimum:
                return bonus
        return 0.0

    def complaint_multiplier(self, complaint_type: str, per_type: Dict[str, FacilityTypeAnalysis]) -> float:
        multiplier = 1.0
        for facility_type, factor in COMPLAINT_MULTIPLIERS.get(complaint_type, {}).items():
            analysis = per_type.get(facility_type)
            if analysis is not None and analysis.score > MULTIPLIER_SCORE_THRESHOLD:
                multiplier = max(multiplier, factor)
        return multiplier

    def privacy_adjustment(self, privacy_level: Optional[PrivacyLevel]) -> float:
        if privacy_level is None:
            return PRIVACY_ADJUSTMENTS[PrivacyLevel.UNKNOWN]
        return PRIVACY_ADJUSTMENTS.get(PrivacyLevel(privacy_level), PRIVACY_ADJUSTMENTS[PrivacyLevel.UNKNOWN])

    def aggregate(
        self,
        per_type: Dict[str, FacilityTypeAnalysis],
        complaint_type: str = "general",
        privacy_level: Optional[PrivacyLevel] = None,
    ) -> AggregateScore:
        diversity = self.diversity_bonus(per_type)
        proximity = self.proximity_score(per_type)
        density = self.density_bonus(per_type)
        multiplier = self.complaint_multiplier(complaint_type, per_type)
        privacy = self.privacy_adjustment(privacy_level)

        raw = (proximity + density) * multiplier * privacy
        final = round_half_up(clamp(raw), 2)

        logger.info(
            f"📏 proximity={proximity:.3f} (diversity +{diversity:.2f}) density=+{density:.2f} "
            f"x{multiplier} complaint x{privacy} privacy -> {final}"
        )

        return AggregateScore(
            proximity_score=proximity,
            diversity_bonus=diversity,
            density_bonus=density,
            complaint_multiplier=multiplier,
            privacy_adjustment=privacy,
            priority_score=final,
            priority_level=priority_level_for(final),
        )

    def critical_facilities(self, per_type: Dict[str, FacilityTypeAnalysis]) -> List[CriticalFacility]:
        """Nearest facility of each type that found any, by configured weight, top five."""
        critical = []
        for facility_type, analysis in per_type.items():
            if analysis.top_candidates:
                nearest = analysis.top_candidates[0]
                critical.append(CriticalFacility(
                    type=facility_type,
                    name=nearest.name,
                    distance_m=nearest.distance_m,
                    importance=analysis.weight,
                    description=analysis.description,
                ))
        critical.sort(key=lambda facility: facility.importance, reverse=True)
        return critical[:MAX_CRITICAL_FACILITIES]
