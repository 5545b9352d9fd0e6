"""Pytest fixtures for offline planner tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# Ensure placeholder keys exist so modules that read env on import succeed.
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from config import PlannerSettings  # noqa: E402
from tools.llm import GenerationError  # noqa: E402
from workflows.schemas import Coordinates, MeetingPoint, Venue  # noqa: E402


class FakeResponse:
    """Lightweight stand-in for httpx.Response used in patched requests."""

    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        headers: Dict[str, str] | None = None,
        text: str = "",
    ):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


@pytest.fixture
def fake_response():
    """Factory that returns FakeResponse objects."""

    def _factory(
        payload: Any = None,
        status_code: int = 200,
        headers: Dict[str, str] | None = None,
        text: str = "",
    ) -> FakeResponse:
        return FakeResponse(payload, status_code=status_code, headers=headers, text=text)

    return _factory


Reply = Union[str, Exception, Callable[[str], str]]


class StubGenerator:
    """TextGenerator double: replies are matched by a substring of the prompt."""

    def __init__(self, replies: Optional[Dict[str, Reply]] = None, default: Reply = "") -> None:
        self.replies = replies or {}
        self.default = default
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.default
        for marker, candidate in self.replies.items():
            if marker in prompt:
                reply = candidate
                break
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


class FailingGenerator:
    async def generate(self, prompt: str) -> str:
        raise GenerationError("generator offline")


class StubGeocoder:
    def __init__(
        self,
        points: Optional[Dict[str, Sequence[float]]] = None,
        label: Optional[str] = "Midtown",
    ) -> None:
        self.points = points or {}
        self.label = label
        self.resolve_calls: List[str] = []
        self.label_calls: List[tuple] = []

    async def resolve(self, address: str) -> Optional[Coordinates]:
        self.resolve_calls.append(address)
        hit = self.points.get(address)
        if hit is None:
            return None
        return Coordinates(latitude=hit[0], longitude=hit[1], formatted_address=address)

    async def resolve_label(self, lat: float, lng: float) -> Optional[str]:
        self.label_calls.append((lat, lng))
        return self.label


class StubSearch:
    def __init__(self, links: Optional[Dict[str, List[str]]] = None, default: Optional[List[str]] = None):
        self.links = links or {}
        self.default = default or []
        self.queries: List[str] = []

    async def search(self, query: str) -> List[str]:
        self.queries.append(query)
        for marker, urls in self.links.items():
            if marker in query:
                return list(urls)
        return list(self.default)


class StubFetcher:
    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = pages or {}
        self.fetched: List[str] = []

    async def fetch_text(self, url: str) -> str:
        self.fetched.append(url)
        return self.pages.get(url, "")


@pytest.fixture
def settings() -> PlannerSettings:
    return PlannerSettings(gemini_api_keys=("test-key",), synthesis_timeout_seconds=2.0)


@pytest.fixture
def meeting_point() -> MeetingPoint:
    return MeetingPoint(latitude=28.55, longitude=77.2, label="Hauz Khas", resolved_count=2)


def make_venue(name: str, *types: str, rating: float = 4.2, reviews: int = 50, description: str = "") -> Venue:
    return Venue(
        name=name,
        address="Hauz Khas, New Delhi",
        rating=rating,
        review_count=reviews,
        category_types=frozenset(types),
        source_id="scraped_" + "_".join(name.split()),
        description=description,
    )
