"""Tests for FacilityClassifier keyword rules, distances and ordering."""

import pytest

from app.models.location_priority import Coordinate
from app.services.location_priority.catalog import FacilityTypeConfig, default_catalog
from app.services.location_priority.classifier import FacilityClassifier
from app.services.location_priority.scoring import FacilityTypeScorer

from conftest import NEW_DELHI, make_place, offset

CATALOG = default_catalog()
ORIGIN = Coordinate(latitude=NEW_DELHI[0], longitude=NEW_DELHI[1])


@pytest.fixture
def classifier():
    return FacilityClassifier()


class TestRules:

    def test_transport_company_filed_as_hospital_is_rejected(self, classifier):
        places = [
            make_place("Datta Krupa Transport", offset(NEW_DELHI, 200), ["hospital", "point_of_interest"]),
            make_place("Ram Manohar Lohia Hospital", offset(NEW_DELHI, 900), ["hospital"]),
        ]
        candidates = classifier.classify(ORIGIN, places, CATALOG.get("hospital"))
        assert [c.name for c in candidates] == ["Ram Manohar Lohia Hospital"]

    def test_transport_rule_applies_to_school_without_exclude_keyword(self, classifier):
        reason = classifier.rejection("Shree Travels School", ["school"], CATALOG.get("school"))
        assert reason.startswith("transport_name")

    def test_transport_rule_applies_to_government(self, classifier):
        assert not classifier.accepts("Municipal Taxi Stand Office", ["local_government_office"], CATALOG.get("government"))
        assert classifier.accepts("Municipal Corporation Office", ["local_government_office"], CATALOG.get("government"))

    def test_transport_rule_does_not_apply_to_transit(self, classifier):
        assert classifier.accepts("ISBT Kashmere Gate Bus Station", ["bus_station"], CATALOG.get("transit_station"))

    def test_exclude_keyword_is_case_insensitive(self, classifier):
        reason = classifier.rejection("Apollo PHARMACY", ["hospital"], CATALOG.get("hospital"))
        assert reason.startswith("exclude_keyword")

    def test_include_keyword_matches_type_tags(self, classifier):
        # name has no keyword but the directory tag does
        assert classifier.accepts("AIIMS", ["hospital", "health"], CATALOG.get("hospital"))

    def test_include_keyword_required_when_configured(self, classifier):
        reason = classifier.rejection("Sharma Sweets", ["bakery"], CATALOG.get("hospital"))
        assert reason == "include_keyword: missing required keywords"

    def test_type_without_rules_accepts_everything(self, classifier):
        assert classifier.accepts("HDFC ATM", ["atm"], CATALOG.get("bank"))
        assert classifier.accepts("Blue Dart Cargo", [], CATALOG.get("bank"))

    def test_custom_type_rules_come_from_config(self, classifier):
        config = FacilityTypeConfig(
            id="library", weight=0.5, max_radius_m=1000, search_keys=("library",),
            include_keywords=("library",), exclude_keywords=("cafe",), description="Libraries",
        )
        assert classifier.accepts("Delhi Public Library", [], config)
        assert not classifier.accepts("Library Cafe", ["library"], config)


class TestClassify:

    def test_sorted_by_distance_with_haversine(self, classifier):
        places = [
            make_place("Far Clinic", offset(NEW_DELHI, 1500), ["hospital"]),
            make_place("Near Hospital", offset(NEW_DELHI, 300), ["hospital"]),
            make_place("Mid Medical Centre", offset(NEW_DELHI, east_m=800), ["health"]),
        ]
        candidates = classifier.classify(ORIGIN, places, CATALOG.get("hospital"))
        assert [c.name for c in candidates] == ["Near Hospital", "Mid Medical Centre", "Far Clinic"]
        assert candidates[0].distance_m == pytest.approx(300, abs=2)
        assert candidates[2].distance_m == pytest.approx(1500, abs=5)

    def test_candidate_fields_are_carried_over(self, classifier):
        place = make_place("City Hospital", offset(NEW_DELHI, 100), ["hospital"], open_now=True, rating=4.2)
        candidate = classifier.classify(ORIGIN, [place], CATALOG.get("hospital"))[0]
        assert candidate.external_id == "city-hospital"
        assert candidate.is_open is True
        assert candidate.rating == 4.2
        assert candidate.types == ["hospital"]

    def test_missing_rating_becomes_zero(self, classifier):
        candidate = classifier.classify(ORIGIN, [make_place("SBI", NEW_DELHI, ["bank"])], CATALOG.get("bank"))[0]
        assert candidate.rating == 0
        assert candidate.distance_m == 0

    def test_filtering_is_idempotent(self, classifier):
        config = CATALOG.get("hospital")
        places = [
            make_place("Datta Krupa Transport", offset(NEW_DELHI, 200), ["hospital"]),
            make_place("Safdarjung Hospital", offset(NEW_DELHI, 700), ["hospital"]),
            make_place("Wellness Mart", offset(NEW_DELHI, 100), ["health"]),
            make_place("Max Clinic", offset(NEW_DELHI, 400), ["doctor"]),
        ]
        once = classifier.filter(places, config)
        assert classifier.filter(once, config) == once

        candidates = classifier.classify(ORIGIN, places, config)
        assert classifier.filter(candidates, config) == candidates

    def test_place_with_non_finite_location_is_skipped(self, classifier):
        places = [
            make_place("Ghost Hospital", (float("nan"), NEW_DELHI[1]), ["hospital"]),
            make_place("Drifting Clinic", (NEW_DELHI[0], float("inf")), ["hospital"]),
            make_place("Lok Nayak Hospital", offset(NEW_DELHI, 1500), ["hospital"]),
        ]
        candidates = classifier.classify(ORIGIN, places, CATALOG.get("hospital"))
        assert [c.name for c in candidates] == ["Lok Nayak Hospital"]

    def test_only_non_finite_locations_score_zero(self, classifier):
        config = CATALOG.get("hospital")
        ghost = make_place("Ghost Hospital", (float("nan"), float("nan")), ["hospital"])
        candidates = classifier.classify(ORIGIN, [ghost], config)
        assert candidates == []
        assert FacilityTypeScorer().score(candidates, config) == 0

    def test_non_finite_rating_becomes_zero(self, classifier):
        place = make_place("City Hospital", offset(NEW_DELHI, 100), ["hospital"], rating=float("nan"))
        assert classifier.classify(ORIGIN, [place], CATALOG.get("hospital"))[0].rating == 0
