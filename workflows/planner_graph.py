from __future__ import annotations

import logging
from typing import Any, Dict

from langgraph.graph import END, START, StateGraph

from agents.categorizer import categorize
from agents.centroid import CentroidResolver
from agents.itinerary_agent import ItineraryAgent
from agents.suggestion_agent import AISuggestionAgent
from agents.venue_discovery import VenueDiscoveryAgent
from workflows.fallback import build_static_itinerary, next_tier
from workflows.schemas import MeetingPoint
from workflows.state import PlanningState, PlanningTier

logger = logging.getLogger(__name__)

_DONE = "done"


def build_meetup_planner_graph(
    centroid_resolver: CentroidResolver,
    discovery_agent: VenueDiscoveryAgent,
    itinerary_agent: ItineraryAgent,
    suggestion_agent: AISuggestionAgent,
):
    builder = StateGraph(PlanningState)

    async def resolve_meeting_point(state: PlanningState) -> Dict[str, Any]:
        try:
            point = await centroid_resolver.resolve([m.location for m in state.members])
        except Exception:
            logger.exception("Meeting point resolution failed")
            point = MeetingPoint(label=state.members[0].location.text)
        logger.info(f"Meeting point: {point.label} ({point.resolved_count} member(s) resolved)")
        state.meeting_point = point
        state.tier = PlanningTier.TRY_REAL_VENUES
        return state.model_dump()

    async def try_real_venues(state: PlanningState) -> Dict[str, Any]:
        itineraries = []
        try:
            venues = await discovery_agent.discover(state.meeting_point, state.mood_tags)
            state.discovered_venue_count = len(venues)
            if venues:
                itineraries = await itinerary_agent.synthesize(
                    categorize(venues),
                    state.mood_tags,
                    state.average_budget,
                    state.meeting_point,
                    len(state.members),
                    state.is_romantic,
                )
        except Exception:
            logger.exception("Real-venue tier failed")
            itineraries = []
        state.record_attempt(PlanningTier.TRY_REAL_VENUES, itineraries)
        return state.model_dump()

    async def try_ai_only(state: PlanningState) -> Dict[str, Any]:
        try:
            itineraries = await suggestion_agent.suggest(
                state.members, state.meeting_point, state.is_romantic
            )
        except Exception:
            logger.exception("AI-only tier failed")
            itineraries = []
        state.record_attempt(PlanningTier.TRY_AI_ONLY, itineraries)
        return state.model_dump()

    def static_fallback(state: PlanningState) -> Dict[str, Any]:
        state.record_attempt(PlanningTier.STATIC_FALLBACK, [build_static_itinerary(state.members)])
        return state.model_dump()

    def route(state: PlanningState) -> str:
        if isinstance(state, dict):
            state = PlanningState(**state)
        upcoming = next_tier(state.tier, state.itineraries)
        if upcoming is None:
            logger.info(f"Planning finished on tier {state.tier.value}")
            return _DONE
        logger.info(f"Tier {state.tier.value} produced nothing; advancing to {upcoming.value}")
        return upcoming.value

    builder.add_node("resolve_meeting_point", resolve_meeting_point)
    builder.add_node(PlanningTier.TRY_REAL_VENUES.value, try_real_venues)
    builder.add_node(PlanningTier.TRY_AI_ONLY.value, try_ai_only)
    builder.add_node(PlanningTier.STATIC_FALLBACK.value, static_fallback)

    builder.add_edge(START, "resolve_meeting_point")
    builder.add_edge("resolve_meeting_point", PlanningTier.TRY_REAL_VENUES.value)

    routes = {tier.value: tier.value for tier in PlanningTier}
    routes[_DONE] = END
    for tier in PlanningTier:
        builder.add_conditional_edges(tier.value, route, routes)

    return builder.compile()
