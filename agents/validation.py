# agents/validation.py
"""Pure checks applied to LLM-produced venues and itineraries.

Nothing here repairs data: a check either passes or returns the reason the
candidate was rejected.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from workflows.schemas import ItineraryRecord, Venue

MIN_NAME_LENGTH = 5
MIN_STEPS = 2
MIN_ITINERARY_COST = 50.0

GENERIC_PLACE_TERMS = frozenset(
    {
        "restaurant",
        "cafe",
        "café",
        "coffee shop",
        "mall",
        "shopping mall",
        "shopping center",
        "shopping centre",
        "market",
        "park",
        "beach",
        "cinema",
        "movie theater",
        "movie theatre",
        "theater",
        "theatre",
        "bar",
        "pub",
        "club",
        "nightclub",
        "museum",
        "gallery",
        "art gallery",
        "spa",
        "gym",
        "store",
        "shop",
        "food court",
        "bowling alley",
        "arcade",
        "hotel",
        "venue",
        "place",
        "location",
        "attraction",
        "local attraction",
        "city center",
        "city centre",
        "downtown",
    }
)

_FILLER_PREFIXES = ("the", "a", "an", "any", "some", "local", "nearby", "popular")
_AREA_PHRASE_RE = re.compile(r"\b(?:in|at|near)\s+[A-Z][\w'’.-]*")


def _normalize(text: str) -> str:
    text = re.sub(r"[^\w\s&'-]", " ", (text or "").lower())
    words = text.split()
    while words and words[0] in _FILLER_PREFIXES:
        words = words[1:]
    return " ".join(words)


def _singular(text: str) -> str:
    if text.endswith("ies"):
        return text[:-3] + "y"
    if text.endswith("s") and not text.endswith("ss"):
        return text[:-1]
    return text


def is_generic_name(name: str, extra_terms: Iterable[str] = ()) -> bool:
    """True when ``name`` is only a category word ("a cafe", "Restaurants", ...).

    ``extra_terms`` adds request-specific names, typically the meeting area,
    which are rejected as venue names as well.
    """
    normalized = _normalize(name)
    if not normalized:
        return True
    terms = set(GENERIC_PLACE_TERMS)
    terms.update(_normalize(term) for term in extra_terms if term)
    return normalized in terms or _singular(normalized) in terms


def dedupe_by_name(venues: Iterable[Venue]) -> List[Venue]:
    """Drop later venues whose name exactly matches an earlier one."""
    seen = set()
    unique: List[Venue] = []
    for venue in venues:
        if venue.name in seen:
            continue
        seen.add(venue.name)
        unique.append(venue)
    return unique


def references_area(name: str, area: Optional[str] = None) -> bool:
    if "," in name:
        return True
    if area and area.strip() and area.strip().lower() in name.lower():
        return True
    return bool(_AREA_PHRASE_RE.search(name))


def itinerary_rejection_reason(
    record: ItineraryRecord,
    *,
    budget: float,
    area: Optional[str] = None,
    location_names: Sequence[str] = (),
) -> Optional[str]:
    """Return why ``record`` must be discarded, or None when it is acceptable."""
    name = record.name.strip()
    if len(name) < MIN_NAME_LENGTH:
        return f"name too short: '{name}'"
    if is_generic_name(name, [area or "", *location_names]):
        return f"generic name: '{name}'"
    if not references_area(name, area):
        return f"name does not reference a specific area: '{name}'"

    if len(record.steps) < MIN_STEPS:
        return f"only {len(record.steps)} step(s)"
    generic_extra = ["the location", area or "", *location_names]
    for step in record.steps:
        if is_generic_name(step.venue, generic_extra):
            return f"generic step venue: '{step.venue}'"

    max_cost = max_itinerary_cost(budget)
    if not (MIN_ITINERARY_COST <= record.estimated_cost <= max_cost):
        return f"cost {record.estimated_cost} outside [{MIN_ITINERARY_COST:g}, {max_cost:g}]"
    return None


def max_itinerary_cost(budget: float) -> float:
    return 2 * budget
