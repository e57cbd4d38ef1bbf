"""Tests for the priority justification text."""

from app.models.location_priority import FacilityCandidate, FacilityTypeAnalysis, PrivacyLevel
from app.services.location_priority.reasoning import REMOTE_LOCATION_MESSAGE, ReasoningGenerator


def analysis(score, name, distance_m, description, weight=0.8):
    return FacilityTypeAnalysis(
        count=1,
        score=score,
        weight=weight,
        description=description,
        top_candidates=[FacilityCandidate(name=name, distance_m=distance_m)],
    )


class TestReasoningGenerator:

    def test_nothing_nearby(self):
        per_type = {"hospital": FacilityTypeAnalysis(weight=0.9)}
        assert ReasoningGenerator().generate(per_type, 0.0) == REMOTE_LOCATION_MESSAGE
        assert ReasoningGenerator().generate({}, 0.0) == REMOTE_LOCATION_MESSAGE

    def test_single_facility_type(self):
        per_type = {"hospital": analysis(0.7, "AIIMS", 420.4, "Medical facilities")}
        text = ReasoningGenerator().generate(per_type, 0.65)
        assert text == (
            "Located 420m from medical facilities (AIIMS). "
            "Medium-high priority due to important nearby facilities."
        )

    def test_full_sentence(self):
        per_type = {
            "school": analysis(0.4, "DPS", 800, "Educational institutions"),
            "hospital": analysis(0.9, "AIIMS", 420.4, "Medical facilities"),
        }
        text = ReasoningGenerator().generate(per_type, 0.85, "pothole", PrivacyLevel.STREET)
        assert text == (
            "Located 420m from medical facilities (AIIMS) and 1 other facility type(s). "
            "pothole issue near critical infrastructure. "
            "Street-level accuracy sufficient for municipal routing. "
            "HIGH PRIORITY due to proximity to critical infrastructure."
        )

    def test_complaint_type_underscores_become_spaces(self):
        per_type = {"hospital": analysis(0.7, "AIIMS", 100, "Medical facilities")}
        text = ReasoningGenerator().generate(per_type, 0.5, "sewage_overflow")
        assert "sewage overflow issue near critical infrastructure" in text
        assert text.endswith("Medium priority with moderate infrastructure proximity.")

    def test_unknown_privacy_adds_no_clause(self):
        per_type = {"hospital": analysis(0.7, "AIIMS", 100, "Medical facilities")}
        text = ReasoningGenerator().generate(per_type, 0.3, privacy_level=PrivacyLevel.UNKNOWN)
        assert text == "Located 100m from medical facilities (AIIMS). Lower priority in area with limited infrastructure."

    def test_area_privacy_clause(self):
        per_type = {"bank": analysis(0.3, "SBI", 50, "Financial services")}
        text = ReasoningGenerator().generate(per_type, 0.3, privacy_level=PrivacyLevel.AREA)
        assert "Area-level location used while protecting privacy" in text

    def test_ties_keep_catalog_order(self):
        per_type = {
            "police": analysis(0.6, "Tilak Marg PS", 300, "Law enforcement"),
            "fire_station": analysis(0.6, "Connaught Place Fire Station", 200, "Emergency services"),
        }
        text = ReasoningGenerator().generate(per_type, 0.6)
        assert text.startswith("Located 300m from law enforcement (Tilak Marg PS)")

    def test_distance_rounds_half_up(self):
        per_type = {"hospital": analysis(0.7, "AIIMS", 420.5, "Medical facilities")}
        text = ReasoningGenerator().generate(per_type, 0.65)
        assert text.startswith("Located 421m from medical facilities (AIIMS)")
