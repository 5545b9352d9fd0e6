# tools/geocoding.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from config import PlannerSettings
from workflows.schemas import Coordinates

logger = logging.getLogger(__name__)

# Reverse-lookup address keys, most local first
_LABEL_KEYS = ("suburb", "neighbourhood", "city", "town", "village")


async def _request(method: str, url: str, **kw) -> httpx.Response:
    async with httpx.AsyncClient(timeout=kw.pop("timeout", 15)) as c:
        r = await c.request(method, url, **kw)
        r.raise_for_status()
        return r


class Geocoder:
    """
    Provider: OpenStreetMap Nominatim (forward + reverse).
    One request per call; every failure is logged and returned as None.
    """

    def __init__(self, settings: Optional[PlannerSettings] = None) -> None:
        self.settings = settings or PlannerSettings()
        self.base_url = self.settings.geocoder_base_url.rstrip("/")

    @property
    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.settings.geocoder_user_agent}

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            r = await _request(
                "GET",
                f"{self.base_url}{path}",
                params=params,
                headers=self._headers,
                timeout=self.settings.http_timeout_seconds,
            )
            return r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geocoder request {path} failed: {e}")
            return None

    async def resolve(self, address: str) -> Optional[Coordinates]:
        """Forward-geocode ``address`` to the best single match."""
        if not address or not address.strip():
            return None

        data = await self._get_json(
            "/search", {"q": address.strip(), "format": "json", "limit": 1}
        )
        if not isinstance(data, list) or not data:
            logger.info(f"No geocoding match for '{address}'")
            return None

        hit = data[0]
        try:
            return Coordinates(
                latitude=float(hit["lat"]),
                longitude=float(hit["lon"]),
                formatted_address=hit.get("display_name") or address,
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed geocoding result for '{address}': {e}")
            return None

    async def resolve_label(self, lat: float, lng: float) -> Optional[str]:
        """Reverse-geocode a point to a short human-readable area name."""
        data = await self._get_json(
            "/reverse", {"lat": lat, "lon": lng, "format": "json"}
        )
        if not isinstance(data, dict) or data.get("error"):
            return None

        address = data.get("address") or {}
        for key in _LABEL_KEYS:
            value = address.get(key)
            if value:
                return value
        return data.get("display_name") or None
