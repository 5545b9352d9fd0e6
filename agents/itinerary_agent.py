# agents/itinerary_agent.py
"""ItineraryAgent: turns categorized venues into themed, costed itineraries.

The agent works in three stages:

1. Theme selection – pick the themes whose mood keywords match the request
   and gather their venues from the category buckets (best rated first).
2. Generation – one LLM call per theme, run concurrently, each with its own
   timeout. A failing theme never affects the others.
3. Validation – parse the JSON reply into a provisional record and reject it
   if it is vague (generic venues, no area in the name) or outside the budget.
"""
from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from agents.llm_json import parse_llm_json
from agents.validation import itinerary_rejection_reason, max_itinerary_cost
from config import PlannerSettings
from prompts import render_prompt
from tools.llm import GenerationError, TextGenerator
from workflows.schemas import (
    CATEGORY_LABELS,
    CategoryBucket,
    Itinerary,
    ItineraryRecord,
    ItineraryStep,
    MeetingPoint,
    Venue,
)

logger = logging.getLogger(__name__)

MIN_THEME_VENUES = 3

ROMANTIC_GUIDANCE = (
    "This is a date for two. Favour intimate, atmospheric spots, a relaxed pace "
    "and at least one place to sit and talk."
)
GROUP_GUIDANCE = (
    "This is a group hangout. Favour places that handle groups well and leave "
    "room for conversation between activities."
)


@dataclass(frozen=True)
class Theme:
    name: str
    sources: Tuple[Tuple[str, int], ...]
    keywords: Tuple[str, ...] = ()
    baseline: bool = False

    def matches(self, mood_tags: Iterable[str]) -> bool:
        if self.baseline:
            return True
        if not self.keywords:
            return False
        pattern = re.compile(
            r"\b(?:" + "|".join(re.escape(k) for k in self.keywords) + ")", flags=re.IGNORECASE
        )
        return any(pattern.search(tag) for tag in mood_tags)


THEMES: Tuple[Theme, ...] = (
    Theme(
        "Food & Culture",
        (("dining", 2), ("attractions", 2)),
        ("food", "dining", "cafe", "culture", "museum", "history", "art"),
    ),
    Theme(
        "Entertainment",
        (("entertainment", 2), ("attractions", 1), ("dining", 1)),
        (
            "bowling",
            "arcade",
            "movie",
            "game",
            "fun",
            "adventure",
            "entertainment",
            "workshop",
            "karaoke",
        ),
    ),
    Theme(
        "Relaxation",
        (("wellness", 2), ("attractions", 1), ("dining", 1)),
        ("relax", "spa", "nature", "walk", "wellness", "chill", "garden"),
    ),
    Theme(
        "Balanced",
        (("dining", 1), ("attractions", 1), ("entertainment", 1), ("shopping", 1)),
        baseline=True,
    ),
)


def rank_venues(venues: Sequence[Venue]) -> List[Venue]:
    """Best first: rating, then review count."""
    return sorted(venues, key=lambda v: (v.rating or 0.0, v.review_count), reverse=True)


class ItineraryAgent:
    """Synthesize up to ``max_itineraries`` validated itineraries from buckets."""

    def __init__(
        self,
        generator: TextGenerator,
        *,
        settings: Optional[PlannerSettings] = None,
        themes: Sequence[Theme] = THEMES,
    ) -> None:
        self.generator = generator
        self.settings = settings or PlannerSettings()
        self.themes = tuple(themes)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def synthesize(
        self,
        buckets: CategoryBucket,
        mood_tags: Iterable[str],
        budget: float,
        point: MeetingPoint,
        group_size: int,
        is_romantic: bool = False,
    ) -> List[Itinerary]:
        tags = [t for t in mood_tags if t]
        ranked = {label: rank_venues(buckets.get(label, [])) for label in CATEGORY_LABELS}
        romantic = is_romantic and group_size == 2

        attempts: List[Tuple[Theme, List[Venue]]] = []
        for theme in self.themes:
            if not theme.matches(tags):
                continue
            venues = self.select_venues(theme, ranked)
            if len(venues) < MIN_THEME_VENUES:
                logger.info(f"Skipping theme '{theme.name}': only {len(venues)} venue(s)")
                continue
            attempts.append((theme, venues))

        if not attempts:
            return []

        results = await asyncio.gather(
            *(
                self._build_theme(theme, venues, tags, budget, point, group_size, romantic)
                for theme, venues in attempts
            ),
            return_exceptions=True,
        )

        itineraries: List[Itinerary] = []
        for (theme, _), result in zip(attempts, results):
            if isinstance(result, Exception):
                logger.warning(f"Theme '{theme.name}' failed unexpectedly: {result!r}")
                continue
            if result is not None:
                itineraries.append(result)
        return itineraries[: self.settings.max_itineraries]

    # ------------------------------------------------------------------
    # Theme selection
    # ------------------------------------------------------------------

    @staticmethod
    def select_venues(theme: Theme, ranked: Dict[str, List[Venue]]) -> List[Venue]:
        chosen: List[Venue] = []
        for category, count in theme.sources:
            chosen.extend(ranked.get(category, [])[:count])

        if theme.baseline and len(chosen) < MIN_THEME_VENUES:
            for category in CATEGORY_LABELS:
                for venue in ranked.get(category, []):
                    if len(chosen) >= MIN_THEME_VENUES:
                        return chosen
                    if venue not in chosen:
                        chosen.append(venue)
        return chosen

    # ------------------------------------------------------------------
    # Generation + validation
    # ------------------------------------------------------------------

    async def _build_theme(
        self,
        theme: Theme,
        venues: List[Venue],
        tags: List[str],
        budget: float,
        point: MeetingPoint,
        group_size: int,
        romantic: bool,
    ) -> Optional[Itinerary]:
        prompt = render_prompt(
            "theme_itinerary",
            theme=theme.name,
            group_description="a couple" if romantic else f"a group of {group_size}",
            location=point.label,
            mode_guidance=ROMANTIC_GUIDANCE if romantic else GROUP_GUIDANCE,
            mood_tags=", ".join(sorted(tags)) or "anything",
            budget=f"{budget:g}",
            max_cost=f"{max_itinerary_cost(budget):g}",
            venue_lines="\n".join(self._venue_line(v) for v in venues),
        )
        try:
            raw = await asyncio.wait_for(
                self.generator.generate(prompt),
                timeout=self.settings.synthesis_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Theme '{theme.name}' timed out")
            return None
        except GenerationError as exc:
            logger.warning(f"Theme '{theme.name}' generation failed: {exc}")
            return None

        payload = parse_llm_json(raw)
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            payload = payload[0]
        if not isinstance(payload, dict):
            logger.warning(f"Theme '{theme.name}' returned unparseable output")
            return None

        try:
            record = ItineraryRecord.model_validate(payload)
        except ValidationError as exc:
            logger.info(f"Rejected '{theme.name}' itinerary: {exc.error_count()} schema error(s)")
            return None

        reason = itinerary_rejection_reason(record, budget=budget, area=point.label)
        if reason:
            logger.info(f"Rejected '{theme.name}' itinerary: {reason}")
            return None

        return Itinerary(
            name=record.name,
            description=record.description,
            steps=tuple(ItineraryStep(venue_name=s.venue, activity_hint=s.activity) for s in record.steps),
            estimated_cost=record.estimated_cost,
            source_venues=tuple(venues),
            theme=theme.name,
            tier="real_venues",
        )

    @staticmethod
    def _venue_line(venue: Venue) -> str:
        line = f"- {venue.name}"
        if venue.address:
            line += f" ({venue.address})"
        if venue.rating is not None:
            line += f", rated {venue.rating:g} from {venue.review_count} reviews"
        if venue.description:
            line += f": {venue.description}"
        return line
