# agents/suggestion_agent.py
"""AISuggestionAgent: LLM-only meetup suggestions when no real venues were found."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from agents.itinerary_agent import GROUP_GUIDANCE, ROMANTIC_GUIDANCE
from agents.llm_json import extract_list, parse_llm_json
from agents.validation import itinerary_rejection_reason, max_itinerary_cost
from config import PlannerSettings
from prompts import render_prompt
from tools.llm import GenerationError, TextGenerator
from workflows.schemas import (
    Itinerary,
    ItineraryRecord,
    ItineraryStep,
    MeetingPoint,
    MemberPreferences,
)

logger = logging.getLogger(__name__)


def average_budget(members: Sequence[MemberPreferences]) -> float:
    if not members:
        return 0.0
    return sum(m.budget for m in members) / len(members)


class AISuggestionAgent:
    def __init__(
        self,
        generator: TextGenerator,
        *,
        settings: Optional[PlannerSettings] = None,
    ) -> None:
        self.generator = generator
        self.settings = settings or PlannerSettings()

    async def suggest(
        self,
        members: Sequence[MemberPreferences],
        point: MeetingPoint,
        is_romantic: bool = False,
    ) -> List[Itinerary]:
        """One LLM call for 2-3 suggestions; [] on any failure."""
        budget = average_budget(members)
        romantic = is_romantic and len(members) == 2
        prompt = render_prompt(
            "ai_suggestions",
            group_description="a couple" if romantic else f"a group of {len(members)}",
            mode_guidance=ROMANTIC_GUIDANCE if romantic else GROUP_GUIDANCE,
            member_lines="\n".join(
                f"- {m.name or f'Member {i}'}: {m.location.text}, budget {m.budget:g}, "
                f"likes {', '.join(sorted(m.mood_tags)) or 'anything'}"
                for i, m in enumerate(members, 1)
            ),
            location=point.label,
            average_budget=f"{budget:g}",
            max_cost=f"{max_itinerary_cost(budget):g}",
        )
        try:
            raw = await asyncio.wait_for(
                self.generator.generate(prompt),
                timeout=self.settings.synthesis_timeout_seconds,
            )
        except (GenerationError, asyncio.TimeoutError) as exc:
            logger.warning(f"AI-only suggestions failed: {exc!r}")
            return []

        payload = parse_llm_json(raw)
        if isinstance(payload, dict) and "name" in payload:
            payload = [payload]
        items = extract_list(payload, "locations", "suggestions", "itineraries")
        if not items:
            logger.warning("AI-only suggestions returned no usable list")
            return []

        location_names = [m.location.text for m in members]
        suggestions: List[Itinerary] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                record = ItineraryRecord.model_validate(item)
            except ValidationError as exc:
                logger.info(f"Rejected AI suggestion: {exc.error_count()} schema error(s)")
                continue
            reason = itinerary_rejection_reason(
                record, budget=budget, area=point.label, location_names=location_names
            )
            if reason:
                logger.info(f"Rejected AI suggestion '{record.name}': {reason}")
                continue
            suggestions.append(
                Itinerary(
                    name=record.name,
                    description=record.description,
                    steps=tuple(
                        ItineraryStep(venue_name=s.venue, activity_hint=s.activity)
                        for s in record.steps
                    ),
                    estimated_cost=record.estimated_cost,
                    tier="ai_only",
                )
            )
        return suggestions[: self.settings.max_itineraries]
