"""Unit tests for `tools.geocoding` without real API calls."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List

import httpx

from config import PlannerSettings
from tools import geocoding


def _geocoder() -> geocoding.Geocoder:
    return geocoding.Geocoder(PlannerSettings(geocoder_base_url="https://geo.test/", geocoder_user_agent="TestAgent/1.0"))


def test_resolve_parses_first_match_and_sends_user_agent(monkeypatch, fake_response):
    captured: Dict[str, Any] = {}

    async def _fake_request(method: str, url: str, **kw: Any):
        captured.update(url=url, **kw)
        return fake_response([{"lat": "28.5494", "lon": "77.2001", "display_name": "Hauz Khas, Delhi"}])

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    coords = asyncio.run(_geocoder().resolve("Hauz Khas"))

    assert coords is not None
    assert coords.latitude == 28.5494
    assert coords.longitude == 77.2001
    assert coords.formatted_address == "Hauz Khas, Delhi"
    assert captured["url"] == "https://geo.test/search"
    assert captured["params"] == {"q": "Hauz Khas", "format": "json", "limit": 1}
    assert captured["headers"]["User-Agent"] == "TestAgent/1.0"


def test_resolve_returns_none_when_no_match(monkeypatch, fake_response):
    async def _fake_request(method: str, url: str, **kw: Any):
        return fake_response([])

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    assert asyncio.run(_geocoder().resolve("Nowhere at all")) is None


def test_resolve_swallows_transport_errors(monkeypatch):
    async def _fake_request(method: str, url: str, **kw: Any):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    assert asyncio.run(_geocoder().resolve("Saket")) is None


def test_resolve_handles_malformed_body(monkeypatch, fake_response):
    async def _fake_request(method: str, url: str, **kw: Any):
        return fake_response([{"lat": "not-a-number", "lon": "77"}])

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    assert asyncio.run(_geocoder().resolve("Saket")) is None


def test_resolve_skips_blank_address(monkeypatch):
    calls: List[str] = []

    async def _fake_request(method: str, url: str, **kw: Any):  # pragma: no cover - must not run
        calls.append(url)

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    assert asyncio.run(_geocoder().resolve("   ")) is None
    assert calls == []


def test_resolve_label_prefers_suburb(monkeypatch, fake_response):
    captured: Dict[str, Any] = {}

    async def _fake_request(method: str, url: str, **kw: Any):
        captured.update(url=url, params=kw["params"])
        return fake_response(
            {
                "display_name": "Some Road, Hauz Khas, South Delhi, Delhi, India",
                "address": {"suburb": "Hauz Khas", "city": "New Delhi"},
            }
        )

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    label = asyncio.run(_geocoder().resolve_label(28.55, 77.2))

    assert label == "Hauz Khas"
    assert captured["url"] == "https://geo.test/reverse"
    assert captured["params"] == {"lat": 28.55, "lon": 77.2, "format": "json"}


def test_resolve_label_falls_back_to_city_then_display_name(monkeypatch, fake_response):
    payloads = iter(
        [
            {"display_name": "Somewhere", "address": {"town": "Gurgaon"}},
            {"display_name": "Middle of the sea", "address": {}},
        ]
    )

    async def _fake_request(method: str, url: str, **kw: Any):
        return fake_response(next(payloads))

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    geocoder = _geocoder()
    assert asyncio.run(geocoder.resolve_label(28.4, 77.0)) == "Gurgaon"
    assert asyncio.run(geocoder.resolve_label(10.0, 60.0)) == "Middle of the sea"


def test_resolve_label_returns_none_on_error_payload(monkeypatch, fake_response):
    async def _fake_request(method: str, url: str, **kw: Any):
        return fake_response({"error": "Unable to geocode"})

    monkeypatch.setattr(geocoding, "_request", _fake_request)

    assert asyncio.run(_geocoder().resolve_label(0.0, 0.0)) is None
