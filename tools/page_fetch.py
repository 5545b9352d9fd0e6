# tools/page_fetch.py
from __future__ import annotations

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from config import PlannerSettings

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Page chrome that never contains the list content
_STRIP_TAGS = ("script", "style", "noscript", "svg", "nav", "header", "footer")


async def _request(method: str, url: str, **kw) -> httpx.Response:
    async with httpx.AsyncClient(timeout=kw.pop("timeout", 10), follow_redirects=True) as c:
        r = await c.request(method, url, **kw)
        r.raise_for_status()
        return r


def clean_text(s: str) -> str:
    return re.sub(r"\s+", " ", s or "").strip()


def html_to_text(html: str) -> str:
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(list(_STRIP_TAGS)):
        tag.decompose()
    root = soup.body or soup
    return clean_text(root.get_text(" "))


class PageFetcher:
    def __init__(self, settings: Optional[PlannerSettings] = None) -> None:
        self.settings = settings or PlannerSettings()

    async def fetch_text(self, url: str) -> str:
        """Download ``url`` and return its visible body text ("" on any failure)."""
        try:
            r = await _request(
                "GET",
                url,
                headers={"User-Agent": BROWSER_USER_AGENT},
                timeout=self.settings.page_fetch_timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Fetching {url} failed: {e}")
            return ""

        text = html_to_text(r.text)
        logger.debug(f"Fetched {len(text)} chars of text from {url}")
        return text
