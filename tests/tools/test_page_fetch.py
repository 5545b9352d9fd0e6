"""Unit tests for `tools.page_fetch` without real API calls."""

from __future__ import annotations

import asyncio
from typing import Any, Dict

import httpx

from config import PlannerSettings
from tools import page_fetch

ARTICLE_HTML = """
<html>
<head><title>Top spots</title><style>body { color: red; }</style></head>
<body>
  <header>Site header</header>
  <nav>Home | About</nav>
  <script>var tracking = true;</script>
  <h1>Top   5 cafes</h1>
  <p>1. Blue Tokai
     Coffee Roasters</p>
  <footer>Copyright</footer>
</body>
</html>
"""


def test_html_to_text_strips_chrome_and_collapses_whitespace():
    text = page_fetch.html_to_text(ARTICLE_HTML)

    assert text == "Top 5 cafes 1. Blue Tokai Coffee Roasters"


def test_html_to_text_handles_empty_input():
    assert page_fetch.html_to_text("") == ""


def test_fetch_text_uses_browser_agent_and_timeout(monkeypatch, fake_response):
    captured: Dict[str, Any] = {}

    async def _fake_request(method: str, url: str, **kw: Any):
        captured.update(url=url, **kw)
        return fake_response(text=ARTICLE_HTML)

    monkeypatch.setattr(page_fetch, "_request", _fake_request)

    fetcher = page_fetch.PageFetcher(PlannerSettings(page_fetch_timeout_seconds=10.0))
    text = asyncio.run(fetcher.fetch_text("https://blog.example.com/cafes"))

    assert "Blue Tokai Coffee Roasters" in text
    assert "tracking" not in text
    assert captured["timeout"] == 10.0
    assert captured["headers"]["User-Agent"].startswith("Mozilla/5.0")


def test_fetch_text_returns_empty_string_on_failure(monkeypatch):
    async def _fake_request(method: str, url: str, **kw: Any):
        request = httpx.Request("GET", url)
        raise httpx.HTTPStatusError("403", request=request, response=httpx.Response(403, request=request))

    monkeypatch.setattr(page_fetch, "_request", _fake_request)

    assert asyncio.run(page_fetch.PageFetcher(PlannerSettings()).fetch_text("https://x.test")) == ""
