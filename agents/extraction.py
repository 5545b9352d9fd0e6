# agents/extraction.py
"""VenueExtractor: pulls named venues out of scraped article text with the LLM."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError

from agents.llm_json import extract_list, parse_llm_json
from agents.validation import is_generic_name
from config import PlannerSettings
from prompts import render_prompt
from tools.llm import GenerationError, TextGenerator
from workflows.schemas import ExtractedVenueRecord, MeetingPoint, Venue

logger = logging.getLogger(__name__)

# Placeholders used when the article gives no rating/review count.
# They keep ranking stable; they are not measurements.
DEFAULT_RATING = 4.2
DEFAULT_REVIEW_COUNT = 50


class VenueExtractor:
    def __init__(
        self,
        generator: TextGenerator,
        *,
        settings: Optional[PlannerSettings] = None,
    ) -> None:
        self.generator = generator
        self.settings = settings or PlannerSettings()

    async def extract(
        self,
        page_text: str,
        tag: str,
        point: MeetingPoint,
        source_url: Optional[str] = None,
    ) -> List[Venue]:
        if not page_text or not page_text.strip():
            return []

        prompt = render_prompt(
            "extract_venues",
            location=point.label,
            tag=tag,
            max_venues=self.settings.extraction_max_venues,
            page_text=page_text[: self.settings.extraction_max_chars],
        )
        try:
            raw = await asyncio.wait_for(
                self.generator.generate(prompt),
                timeout=self.settings.synthesis_timeout_seconds,
            )
        except (GenerationError, asyncio.TimeoutError) as exc:
            logger.warning(f"Venue extraction for '{tag}' failed: {exc!r}")
            return []

        payload = parse_llm_json(raw)
        if isinstance(payload, dict) and "name" in payload:
            payload = [payload]
        items = extract_list(payload, "venues", "places", "results")
        if items is None:
            logger.warning(f"Venue extraction for '{tag}' returned unparseable output")
            return []

        venues: List[Venue] = []
        for item in items:
            venue = self._to_venue(item, tag, point, source_url)
            if venue is not None:
                venues.append(venue)
            if len(venues) >= self.settings.extraction_max_venues:
                break
        logger.info(f"Extracted {len(venues)} venue(s) for '{tag}' near {point.label}")
        return venues

    @staticmethod
    def _to_venue(
        item: object, tag: str, point: MeetingPoint, source_url: Optional[str]
    ) -> Optional[Venue]:
        if not isinstance(item, dict):
            return None
        try:
            record = ExtractedVenueRecord.model_validate(item)
        except ValidationError as exc:
            logger.debug(f"Skipping invalid venue record {item!r}: {exc.error_count()} error(s)")
            return None

        if is_generic_name(record.name, [point.label]):
            logger.info(f"Rejected generic venue name '{record.name}'")
            return None

        types = {tag.strip().lower(), "point_of_interest"}
        if record.type and record.type.strip():
            types.add(record.type.strip().lower())

        return Venue(
            name=record.name,
            address=(record.address or "").strip() or point.label,
            rating=record.rating or DEFAULT_RATING,
            review_count=record.reviews or DEFAULT_REVIEW_COUNT,
            category_types=frozenset(t for t in types if t),
            source_id="scraped_" + "_".join(record.name.split()),
            description=(record.description or "").strip(),
            source_url=source_url,
        )
