"""
Facility classifier - drops directory results that do not belong to the
facility type they were returned under, then measures and sorts the rest.

Filtering is an ordered list of rules. Each rule looks at a place's name and
type tags together with the facility type config and either passes it or
names the reason it was rejected. New facility types change behaviour through
their config (keywords, flags), not through this module's control flow.
"""

import logging
import math
from typing import Iterable, List, Optional, Sequence, TypeVar

from app.models.location_priority import Coordinate, FacilityCandidate
from app.services.location_priority.catalog import FacilityTypeConfig
from app.services.places.base import RawPlace
from app.utils.geo import haversine_meters
from app.utils.numeric import safe_number

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSPORT_WORDS = ("transport", "logistics", "cargo", "travel", "bus", "taxi", "auto")


class ClassificationRule:
    name = "rule"

    def reject_reason(self, name: str, types: Sequence[str], config: FacilityTypeConfig) -> Optional[str]:
        raise NotImplementedError


class ExcludeKeywordRule(ClassificationRule):
    name = "exclude_keyword"

    def reject_reason(self, name, types, config):
        lowered = name.lower()
        for keyword in config.exclude_keywords:
            if keyword.lower() in lowered:
                return f"contains excluded keyword '{keyword}'"
        return None


class TransportNameRule(ClassificationRule):
    """Directories regularly file transport/logistics companies under hospital or school."""

    name = "transport_name"

    def __init__(self, words: Sequence[str] = TRANSPORT_WORDS):
        self.words = tuple(words)

    def reject_reason(self, name, types, config):
        if not config.reject_transport_names:
            return None
        lowered = name.lower()
        for word in self.words:
            if word in lowered:
                return f"likely a transportation service ('{word}'), not a {config.id}"
        return None


class IncludeKeywordRule(ClassificationRule):
    name = "include_keyword"

    def reject_reason(self, name, types, config):
        if not config.include_keywords:
            return None
        lowered = name.lower()
        lowered_types = [t.lower() for t in types]
        for keyword in config.include_keywords:
            keyword = keyword.lower()
            if keyword in lowered or any(keyword in t for t in lowered_types):
                return None
        return "missing required keywords"


DEFAULT_RULES = (ExcludeKeywordRule(), TransportNameRule(), IncludeKeywordRule())


class FacilityClassifier:

    def __init__(self, rules: Sequence[ClassificationRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def rejection(self, name: str, types: Sequence[str], config: FacilityTypeConfig) -> Optional[str]:
        """First rule that rejects the place, formatted as 'rule: reason', or None."""
        for rule in self.rules:
            reason = rule.reject_reason(name or "", types or (), config)
            if reason:
                return f"{rule.name}: {reason}"
        return None

    def accepts(self, name: str, types: Sequence[str], config: FacilityTypeConfig) -> bool:
        return self.rejection(name, types, config) is None

    def filter(self, items: Iterable[T], config: FacilityTypeConfig) -> List[T]:
        """
        Keep items (anything with .name and .types) that pass every rule.
        Order is preserved, so filtering twice gives the same list.
        """
        kept = []
        for item in items:
            reason = self.rejection(item.name, item.types, config)
            if reason:
                logger.debug(f"❌ Excluded {item.name} from {config.id} ({reason})")
                continue
            kept.append(item)
        return kept

    def classify(self, origin: Coordinate, places: Iterable[RawPlace], config: FacilityTypeConfig) -> List[FacilityCandidate]:
        """
        Filter raw places for one facility type and return candidates sorted by distance.
        """
        candidates = []
        for place in self.filter(places, config):
            if not (math.isfinite(place.location.lat) and math.isfinite(place.location.lng)):
                logger.warning(f"⚠️ Skipped {place.name} for {config.id}: non-finite location ({place.location.lat}, {place.location.lng})")
                continue
            distance = haversine_meters(origin.latitude, origin.longitude, place.location.lat, place.location.lng)
            candidates.append(FacilityCandidate(
                name=place.name,
                external_id=place.external_id,
                distance_m=distance,
                rating=safe_number(place.rating) if place.rating is not None else 0,
                types=list(place.types),
                vicinity=place.vicinity or "",
                is_open=place.open_now,
            ))
        candidates.sort(key=lambda c: c.distance_m)
        return candidates
