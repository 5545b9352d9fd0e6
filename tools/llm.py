# tools/llm.py
"""Generative-text collaborator.

Anything that can turn a prompt into text satisfies :class:`TextGenerator`.
The default implementation talks to Gemini through LangChain and rotates
through the configured API keys when a key is rate limited.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Protocol

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from config import PlannerSettings

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Raised for every failure of the generative-text collaborator."""


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


class _RateLimited(GenerationError):
    pass


def _is_rate_limit_error(exc: BaseException) -> bool:
    status = getattr(exc, "code", None) or getattr(
        getattr(exc, "response", None), "status_code", None
    )
    if status == 429:
        return True
    text = f"{type(exc).__name__} {exc}".lower()
    return "429" in text or "resourceexhausted" in text or "resource_exhausted" in text


def response_text(response: Any) -> str:
    """Flatten a LangChain message's content into a single string."""
    content = getattr(response, "content", response)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        content = "".join(parts)
    return content if isinstance(content, str) else str(content or "")


class GeminiTextGenerator:
    """Gemini via ``ChatGoogleGenerativeAI`` with API-key rotation on HTTP 429."""

    def __init__(
        self,
        settings: Optional[PlannerSettings] = None,
        *,
        model_factory: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.settings = settings or PlannerSettings.from_env()
        self._keys: List[str] = list(self.settings.gemini_api_keys)
        self._model_factory = model_factory or self._default_model
        self._models: dict = {}
        self._key_index = 0

    def _default_model(self, api_key: str) -> ChatGoogleGenerativeAI:
        return ChatGoogleGenerativeAI(
            model=self.settings.model_name,
            temperature=self.settings.temperature,
            google_api_key=api_key,
            max_retries=1,
        )

    def _model_for(self, index: int) -> Any:
        key = self._keys[index]
        if key not in self._models:
            self._models[key] = self._model_factory(key)
        return self._models[key]

    async def _generate_once(self, prompt: str) -> str:
        index = self._key_index
        model = self._model_for(index)
        try:
            response = await model.ainvoke([HumanMessage(content=prompt)])
        except Exception as exc:
            if _is_rate_limit_error(exc):
                # Next attempt starts on the following key
                self._key_index = (index + 1) % len(self._keys)
                logger.warning(f"Gemini key #{index + 1} rate limited; rotating")
                raise _RateLimited(str(exc)) from exc
            raise GenerationError(f"Gemini request failed: {exc}") from exc

        text = response_text(response)
        logger.debug(f"Gemini raw response: {text[:500]}")
        return text

    async def generate(self, prompt: str) -> str:
        if not self._keys:
            raise GenerationError("No Gemini API key configured")

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(lambda exc: isinstance(exc, _RateLimited)),
                wait=wait_exponential(min=0.5, max=6),
                stop=stop_after_attempt(len(self._keys)),
                reraise=True,
            ):
                with attempt:
                    return await self._generate_once(prompt)
        except _RateLimited as exc:
            raise GenerationError(f"All Gemini API keys are rate limited: {exc}") from exc
        raise GenerationError("Gemini returned no response")
