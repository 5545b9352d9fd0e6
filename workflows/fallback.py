"""Fallback ladder policy: tier transitions and the last-resort itinerary."""

from __future__ import annotations

from typing import Optional, Sequence

from workflows.schemas import Itinerary, ItineraryStep, MemberPreferences
from workflows.state import PlanningTier

STATIC_STEPS = ("Visit local attractions", "Have a group meal", "Explore the area")
STATIC_DEFAULT_COST = 100.0

_ORDER = (
    PlanningTier.TRY_REAL_VENUES,
    PlanningTier.TRY_AI_ONLY,
    PlanningTier.STATIC_FALLBACK,
)


def next_tier(tier: PlanningTier, itineraries: Sequence[Itinerary]) -> Optional[PlanningTier]:
    """Tier to try after ``tier`` produced ``itineraries``; None means stop."""
    if itineraries:
        return None
    index = _ORDER.index(tier)
    if index + 1 >= len(_ORDER):
        return None
    return _ORDER[index + 1]


def build_static_itinerary(members: Sequence[MemberPreferences]) -> Itinerary:
    if not members:
        raise ValueError("At least one member is required")
    first = members[0]
    return Itinerary(
        name=f"Hangout in {first.location.text}",
        description="A simple plan to meet up, explore and share a meal together.",
        steps=tuple(ItineraryStep(venue_name=step) for step in STATIC_STEPS),
        estimated_cost=first.budget if first.budget > 0 else STATIC_DEFAULT_COST,
        tier="static",
    )
