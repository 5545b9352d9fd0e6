from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Union

from agents.centroid import CentroidResolver
from agents.extraction import VenueExtractor
from agents.itinerary_agent import ItineraryAgent
from agents.suggestion_agent import AISuggestionAgent
from agents.venue_discovery import VenueDiscoveryAgent
from config import PlannerSettings
from tools.geocoding import Geocoder
from tools.llm import GeminiTextGenerator, TextGenerator
from tools.page_fetch import PageFetcher
from tools.search import WebSearchClient
from workflows.planner_graph import build_meetup_planner_graph
from workflows.schemas import Itinerary, MemberPreferences
from workflows.state import PlanningState

logger = logging.getLogger(__name__)

MemberInput = Union[MemberPreferences, Dict[str, Any]]


def normalize_members(members: Sequence[MemberInput]) -> List[MemberPreferences]:
    """Validate caller input; raises ValueError for empty lists or bad members."""
    if not members:
        raise ValueError("At least one member is required")
    return [
        m if isinstance(m, MemberPreferences) else MemberPreferences.model_validate(m)
        for m in members
    ]


class PlannerRuntime:
    """Runtime helper that owns the collaborators and LangGraph execution."""

    def __init__(
        self,
        *,
        settings: Optional[PlannerSettings] = None,
        geocoder: Optional[Geocoder] = None,
        search: Optional[WebSearchClient] = None,
        fetcher: Optional[PageFetcher] = None,
        generator: Optional[TextGenerator] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or PlannerSettings.from_env()
        self.generator = generator or GeminiTextGenerator(self.settings)

        self.centroid_resolver = CentroidResolver(geocoder or Geocoder(self.settings))
        self.discovery_agent = VenueDiscoveryAgent(
            search=search or WebSearchClient(self.settings),
            fetcher=fetcher or PageFetcher(self.settings),
            extractor=VenueExtractor(self.generator, settings=self.settings),
            settings=self.settings,
            rng=rng,
        )
        self.itinerary_agent = ItineraryAgent(self.generator, settings=self.settings)
        self.suggestion_agent = AISuggestionAgent(self.generator, settings=self.settings)

        self.graph = build_meetup_planner_graph(
            self.centroid_resolver,
            self.discovery_agent,
            self.itinerary_agent,
            self.suggestion_agent,
        )

    async def plan_async(
        self,
        members: Sequence[MemberInput],
        is_romantic: bool = False,
    ) -> PlanningState:
        """Run the full ladder and return the final planning state."""
        state = PlanningState(members=normalize_members(members), is_romantic=is_romantic)
        result = await self.graph.ainvoke(state.model_dump())
        return PlanningState(**result)

    async def plan_locations_async(
        self,
        members: Sequence[MemberInput],
        is_romantic: bool = False,
    ) -> List[Itinerary]:
        state = await self.plan_async(members, is_romantic=is_romantic)
        return list(state.itineraries)

    def plan_locations(
        self,
        members: Sequence[MemberInput],
        is_romantic: bool = False,
    ) -> List[Itinerary]:
        coro = self.plan_locations_async(members, is_romantic=is_romantic)
        try:
            return asyncio.run(coro)
        except RuntimeError as exc:
            coro.close()
            message = str(exc)
            if "asyncio.run" in message and "event loop" in message:
                raise RuntimeError(
                    "plan_locations() cannot be called from an active event loop. "
                    "Use await plan_locations_async(...) instead."
                ) from exc
            raise


def plan_locations(
    members: Sequence[MemberInput],
    is_romantic: bool = False,
    *,
    runtime: Optional[PlannerRuntime] = None,
) -> List[Itinerary]:
    """Recommend itineraries for a group. Always returns at least one."""
    normalize_members(members)
    return (runtime or PlannerRuntime()).plan_locations(members, is_romantic=is_romantic)
