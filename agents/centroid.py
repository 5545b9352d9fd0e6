# agents/centroid.py
"""CentroidResolver: turns the members' home addresses into one meeting point."""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Dict, List, Optional, Sequence, Union

from tools.geocoding import Geocoder
from workflows.schemas import Coordinates, Location, MeetingPoint

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dp = p2 - p1
    dl = math.radians(lng2 - lng1)
    a = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


class CentroidResolver:
    """Geocode every member, average the hits and name the resulting point.

    The point is the arithmetic mean of latitudes and longitudes. This is close
    enough for members within one metro area but is not a geographic median
    and drifts for widely spread groups or across the antimeridian.
    """

    def __init__(self, geocoder: Geocoder) -> None:
        self.geocoder = geocoder

    async def resolve(self, locations: Sequence[Union[Location, str]]) -> MeetingPoint:
        if not locations:
            raise ValueError("At least one location is required")
        items = [loc if isinstance(loc, Location) else Location(text=loc) for loc in locations]
        fallback_label = items[0].text.strip() or items[0].text

        resolved = await self._resolve_all(items)
        points = [c for c in resolved if c is not None]
        logger.info(f"Resolved {len(points)}/{len(items)} member location(s)")

        if not points:
            return MeetingPoint(label=fallback_label, resolved_count=0)

        lat = sum(p.latitude for p in points) / len(points)
        lng = sum(p.longitude for p in points) / len(points)
        spread = max(haversine_km(lat, lng, p.latitude, p.longitude) for p in points)

        label = await self.geocoder.resolve_label(lat, lng)
        if not label:
            logger.info("Reverse lookup failed; labelling meeting point with first member's location")
            label = fallback_label

        return MeetingPoint(
            latitude=lat,
            longitude=lng,
            label=label,
            resolved_count=len(points),
            spread_km=round(spread, 3),
        )

    async def _resolve_all(self, items: List[Location]) -> List[Optional[Coordinates]]:
        # One lookup per distinct address string
        addresses: List[str] = []
        for item in items:
            if item.resolved is None and item.text not in addresses:
                addresses.append(item.text)

        results = await asyncio.gather(
            *(self.geocoder.resolve(address) for address in addresses),
            return_exceptions=True,
        )
        by_address: Dict[str, Optional[Coordinates]] = {}
        for address, result in zip(addresses, results):
            if isinstance(result, Exception):
                logger.warning(f"Geocoding '{address}' raised: {result}")
                result = None
            by_address[address] = result

        return [
            item.resolved if item.resolved is not None else by_address[item.text]
            for item in items
        ]
