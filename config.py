"""Global configuration for the Meetup Planner.

This module loads environment variables from .env file and provides
centralized configuration for the planning pipeline. Collaborators never read
the environment themselves; they receive a :class:`PlannerSettings` snapshot
at construction time.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env in the project root directory
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid integer for {name}; using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid number for {name}; using {default}")
        return default


# ============================================================================
# Language Model Configuration
# ============================================================================

# Default model name for Gemini
DEFAULT_MODEL_NAME: str = os.getenv("DEFAULT_MODEL_NAME", "gemini-2.0-flash")

# Default temperature for LLM calls
DEFAULT_TEMPERATURE: float = _env_float("DEFAULT_TEMPERATURE", 0.4)


# ============================================================================
# Collaborator Endpoints
# ============================================================================

# OpenStreetMap Nominatim (forward + reverse geocoding)
GEOCODER_BASE_URL: str = os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org")

# Nominatim's usage policy requires an identifying client string
GEOCODER_USER_AGENT: str = os.getenv("GEOCODER_USER_AGENT", "MeetupPlanner/1.0")

# DuckDuckGo HTML endpoint used for "best X in Y" list discovery
SEARCH_URL: str = os.getenv("SEARCH_URL", "https://html.duckduckgo.com/html/")


# ============================================================================
# Pipeline Limits
# ============================================================================

HTTP_TIMEOUT_SECONDS: float = _env_float("HTTP_TIMEOUT_SECONDS", 15.0)
PAGE_FETCH_TIMEOUT_SECONDS: float = _env_float("PAGE_FETCH_TIMEOUT_SECONDS", 10.0)

# Scraped page text is cut to this many characters before it is sent to the LLM
EXTRACTION_MAX_CHARS: int = _env_int("EXTRACTION_MAX_CHARS", 15000)
EXTRACTION_MAX_VENUES: int = _env_int("EXTRACTION_MAX_VENUES", 5)

# Venue discovery: tags searched per request and simultaneous tag pipelines
DISCOVERY_MAX_TAGS: int = _env_int("DISCOVERY_MAX_TAGS", 2)
DISCOVERY_CONCURRENCY: int = _env_int("DISCOVERY_CONCURRENCY", 2)
SEARCH_MAX_LINKS: int = _env_int("SEARCH_MAX_LINKS", 3)

# Per-call timeout for generative-text requests (extraction, themes, suggestions)
SYNTHESIS_TIMEOUT_SECONDS: float = _env_float("SYNTHESIS_TIMEOUT_SECONDS", 25.0)

MAX_ITINERARIES: int = _env_int("MAX_ITINERARIES", 3)


# ============================================================================
# Logging
# ============================================================================

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# ============================================================================
# API Keys
# ============================================================================

def get_gemini_api_keys() -> List[str]:
    """Return every configured Gemini key, in rotation order, without duplicates."""
    keys: List[str] = []
    for env_var in ("GEMINI_API_KEY", "GEMINI_API_KEY_2", "GOOGLE_API_KEY"):
        value = (os.getenv(env_var) or "").strip()
        if value and value not in keys:
            keys.append(value)
    return keys


def get_google_api_key() -> Optional[str]:
    """Get the primary Google API key (Gemini)."""
    keys = get_gemini_api_keys()
    return keys[0] if keys else None


# ============================================================================
# Validation
# ============================================================================

def validate_api_keys() -> List[str]:
    """Validate that required API keys are present. Returns list of missing keys."""
    missing = []

    if not get_gemini_api_keys():
        missing.append("GEMINI_API_KEY or GOOGLE_API_KEY")

    return missing


# ============================================================================
# Injected settings
# ============================================================================

@dataclass(frozen=True)
class PlannerSettings:
    """Immutable snapshot of the configuration handed to every collaborator."""

    model_name: str = DEFAULT_MODEL_NAME
    temperature: float = DEFAULT_TEMPERATURE
    gemini_api_keys: Tuple[str, ...] = field(default_factory=tuple)
    geocoder_base_url: str = GEOCODER_BASE_URL
    geocoder_user_agent: str = GEOCODER_USER_AGENT
    search_url: str = SEARCH_URL
    http_timeout_seconds: float = HTTP_TIMEOUT_SECONDS
    page_fetch_timeout_seconds: float = PAGE_FETCH_TIMEOUT_SECONDS
    extraction_max_chars: int = EXTRACTION_MAX_CHARS
    extraction_max_venues: int = EXTRACTION_MAX_VENUES
    discovery_max_tags: int = DISCOVERY_MAX_TAGS
    discovery_concurrency: int = DISCOVERY_CONCURRENCY
    search_max_links: int = SEARCH_MAX_LINKS
    synthesis_timeout_seconds: float = SYNTHESIS_TIMEOUT_SECONDS
    max_itineraries: int = MAX_ITINERARIES

    @classmethod
    def from_env(cls) -> "PlannerSettings":
        missing = validate_api_keys()
        if missing:
            logger.warning(f"Missing API keys: {', '.join(missing)}")
        return cls(gemini_api_keys=tuple(get_gemini_api_keys()))
