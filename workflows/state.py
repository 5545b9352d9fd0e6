"""Typed state shared across the meetup planning graph."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from workflows.schemas import Itinerary, MeetingPoint, MemberPreferences


class PlanningTier(str, Enum):
    """Fallback ladder rungs; values double as graph node names."""

    TRY_REAL_VENUES = "try_real_venues"
    TRY_AI_ONLY = "try_ai_only"
    STATIC_FALLBACK = "static_fallback"


class PlanningState(BaseModel):
    members: List[MemberPreferences] = Field(min_length=1)
    is_romantic: bool = False
    meeting_point: Optional[MeetingPoint] = None
    tier: PlanningTier = PlanningTier.TRY_REAL_VENUES
    tiers_attempted: List[PlanningTier] = Field(default_factory=list)
    discovered_venue_count: int = 0
    itineraries: List[Itinerary] = Field(default_factory=list)
    final_tier: Optional[PlanningTier] = None

    @property
    def mood_tags(self) -> List[str]:
        tags = set()
        for member in self.members:
            tags.update(member.mood_tags)
        return sorted(tags)

    @property
    def average_budget(self) -> float:
        return sum(m.budget for m in self.members) / len(self.members)

    def record_attempt(self, tier: PlanningTier, itineraries: List[Itinerary]) -> None:
        self.tier = tier
        self.tiers_attempted.append(tier)
        self.itineraries = list(itineraries)
        if itineraries:
            self.final_tier = tier
