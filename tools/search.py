# tools/search.py
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

import httpx
from bs4 import BeautifulSoup

from config import PlannerSettings
from tools.page_fetch import BROWSER_USER_AGENT

logger = logging.getLogger(__name__)


async def _request(method: str, url: str, **kw) -> httpx.Response:
    async with httpx.AsyncClient(timeout=kw.pop("timeout", 15), follow_redirects=True) as c:
        r = await c.request(method, url, **kw)
        r.raise_for_status()
        return r


def _unwrap_link(href: str) -> Optional[str]:
    """DuckDuckGo wraps results as //duckduckgo.com/l/?uddg=<target>."""
    if not href:
        return None
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.netloc.endswith("duckduckgo.com") and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if not target:
            return None
        href = target[0]
        parsed = urlparse(href)
    if parsed.scheme not in ("http", "https"):
        return None
    return href


def parse_result_links(html: str, limit: int) -> List[str]:
    soup = BeautifulSoup(html, "lxml")
    links: List[str] = []
    for anchor in soup.select("a.result__a"):
        url = _unwrap_link(anchor.get("href", ""))
        if url and url not in links:
            links.append(url)
        if len(links) >= limit:
            break
    return links


class WebSearchClient:
    """
    Provider: DuckDuckGo HTML endpoint (no API key).
    Returns the top result URLs for a query; failures give [].
    """

    def __init__(self, settings: Optional[PlannerSettings] = None) -> None:
        self.settings = settings or PlannerSettings()

    async def search(self, query: str) -> List[str]:
        if not query.strip():
            return []
        try:
            r = await _request(
                "GET",
                self.settings.search_url,
                params={"q": query},
                headers={"User-Agent": BROWSER_USER_AGENT},
                timeout=self.settings.http_timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Search failed for '{query}': {e}")
            return []

        links = parse_result_links(r.text, self.settings.search_max_links)
        logger.info(f"Search '{query}' returned {len(links)} link(s)")
        return links
