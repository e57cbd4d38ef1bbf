"""
Human-readable justification for a priority score.
"""

from typing import Dict, Optional

from app.models.location_priority import FacilityTypeAnalysis, PrivacyLevel
from app.utils.numeric import round_half_up

REMOTE_LOCATION_MESSAGE = "Remote location with minimal nearby infrastructure"

PRIVACY_CONTEXT = {
    PrivacyLevel.EXACT: "Exact location provided for precise emergency response",
    PrivacyLevel.STREET: "Street-level accuracy sufficient for municipal routing",
    PrivacyLevel.AREA: "Area-level location used while protecting privacy",
}

# (minimum score, closing clause), checked in order
SCORE_BAND_CLAUSES = (
    (0.8, "HIGH PRIORITY due to proximity to critical infrastructure."),
    (0.6, "Medium-high priority due to important nearby facilities."),
    (0.4, "Medium priority with moderate infrastructure proximity."),
)
LOW_BAND_CLAUSE = "Lower priority in area with limited infrastructure."


class ReasoningGenerator:

    def generate(
        self,
        per_type: Dict[str, FacilityTypeAnalysis],
        final_score: float,
        complaint_type: str = "general",
        privacy_level: Optional[PrivacyLevel] = None,
    ) -> str:
        nearby = [
            (facility_type, analysis)
            for facility_type, analysis in per_type.items()
            if analysis.count > 0 and analysis.top_candidates
        ]
        if not nearby:
            return REMOTE_LOCATION_MESSAGE

        # stable sort keeps catalog order among equal scores
        nearby.sort(key=lambda item: item[1].score, reverse=True)
        facility_type, analysis = nearby[0]
        nearest = analysis.top_candidates[0]
        label = (analysis.description or facility_type.replace("_", " ")).lower()

        distance = int(round_half_up(nearest.distance_m))
        parts = [f"Located {distance}m from {label} ({nearest.name})"]
        if len(nearby) > 1:
            parts[0] += f" and {len(nearby) - 1} other facility type(s)"

        if complaint_type and complaint_type != "general":
            parts.append(f"{complaint_type.replace('_', ' ')} issue near critical infrastructure")

        if privacy_level is not None and PrivacyLevel(privacy_level) in PRIVACY_CONTEXT:
            parts.append(PRIVACY_CONTEXT[PrivacyLevel(privacy_level)])

        closing = LOW_BAND_CLAUSE
        for minimum, clause in SCORE_BAND_CLAUSES:
            if final_score >= minimum:
                closing = clause
                break
        parts.append(closing)

        return ". ".join(parts)
