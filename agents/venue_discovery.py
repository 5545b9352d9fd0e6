# agents/venue_discovery.py
"""VenueDiscoveryAgent: search-and-extract discovery of venues near a point."""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Iterable, List, Optional

from agents.extraction import VenueExtractor
from agents.validation import dedupe_by_name
from config import PlannerSettings
from tools.page_fetch import PageFetcher
from tools.search import WebSearchClient
from workflows.schemas import MeetingPoint, Venue

logger = logging.getLogger(__name__)

QUERY_TEMPLATE = "best {tag} places in {location} blog review"


class VenueDiscoveryAgent:
    """Stateless coordinator: search -> fetch first link -> extract, per mood tag."""

    def __init__(
        self,
        *,
        search: WebSearchClient,
        fetcher: PageFetcher,
        extractor: VenueExtractor,
        settings: Optional[PlannerSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.search = search
        self.fetcher = fetcher
        self.extractor = extractor
        self.settings = settings or PlannerSettings()
        self.rng = rng or random.Random()

    def _pick_tags(self, mood_tags: Iterable[str]) -> List[str]:
        tags = sorted({t.strip() for t in mood_tags if t and t.strip()})
        limit = max(0, self.settings.discovery_max_tags)
        if len(tags) <= limit:
            self.rng.shuffle(tags)
            return tags
        return self.rng.sample(tags, limit)

    async def discover(self, point: MeetingPoint, mood_tags: Iterable[str]) -> List[Venue]:
        tags = self._pick_tags(mood_tags)
        if not tags:
            logger.info("No mood tags to search for; skipping venue discovery")
            return []

        semaphore = asyncio.Semaphore(max(1, self.settings.discovery_concurrency))

        async def run(tag: str) -> List[Venue]:
            async with semaphore:
                return await self._discover_tag(tag, point)

        results = await asyncio.gather(*(run(tag) for tag in tags), return_exceptions=True)

        venues: List[Venue] = []
        for tag, result in zip(tags, results):
            if isinstance(result, Exception):
                logger.warning(f"Discovery for tag '{tag}' failed: {result!r}")
                continue
            venues.extend(result)

        unique = dedupe_by_name(venues)
        logger.info(f"Discovered {len(unique)} unique venue(s) near {point.label} for tags {tags}")
        return unique

    async def _discover_tag(self, tag: str, point: MeetingPoint) -> List[Venue]:
        query = QUERY_TEMPLATE.format(tag=tag, location=point.label)
        links = await self.search.search(query)
        if not links:
            logger.info(f"No search results for '{query}'")
            return []

        # Only the top article is scraped
        url = links[0]
        text = await self.fetcher.fetch_text(url)
        if not text:
            return []
        return await self.extractor.extract(text, tag, point, source_url=url)
