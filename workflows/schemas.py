"""Pydantic schemas for the meetup planning pipeline.

The public models (``Venue``, ``Itinerary``, ``MeetingPoint`` ...) are what the
pipeline hands back to callers. The ``*Record`` models are provisional shapes
for untrusted JSON coming back from the generative-text collaborator; they
are validated first and only then converted into public models.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Literal, Optional, Set, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


CATEGORY_LABELS: Tuple[str, ...] = (
    "dining",
    "entertainment",
    "attractions",
    "shopping",
    "nightlife",
    "wellness",
)
DEFAULT_CATEGORY = "attractions"

ItineraryTier = Literal["real_venues", "ai_only", "static"]


def _split_tags(value: Any) -> Any:
    """Normalize tag inputs given as a comma-separated string or iterable."""
    if value is None:
        return set()
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple, set, frozenset)):
        cleaned = {str(item).strip() for item in value if item is not None}
        return {item for item in cleaned if item}
    return value


# ============================================================================
# Locations
# ============================================================================

class Coordinates(BaseModel):
    """A resolved geographic point."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    formatted_address: str = ""


class Location(BaseModel):
    """A member's free-text address, optionally already resolved."""

    model_config = ConfigDict(frozen=True)

    text: str
    resolved: Optional[Coordinates] = None

    @model_validator(mode="before")
    @classmethod
    def accept_plain_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"text": value}
        return value


class MemberPreferences(BaseModel):
    """Per-member planning input. The pipeline only reads it."""

    location: Location
    budget: float = Field(ge=0, description="Budget in the group's local currency")
    mood_tags: Set[str] = Field(
        default_factory=set,
        validation_alias=AliasChoices("mood_tags", "moodTags"),
    )
    name: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("mood_tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        return _split_tags(v)


class MeetingPoint(BaseModel):
    """The fair meeting point computed for one planning request."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    label: str
    resolved_count: int = Field(0, ge=0)
    spread_km: Optional[float] = Field(None, ge=0)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


# ============================================================================
# Venues and itineraries
# ============================================================================

class Venue(BaseModel):
    """A real-world place candidate discovered near the meeting point."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    address: str = ""
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    category_types: FrozenSet[str] = Field(default_factory=frozenset)
    source_id: str = ""
    description: str = ""
    source_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("venue name must not be blank")
        return v


CategoryBucket = Dict[str, List[Venue]]


class ItineraryStep(BaseModel):
    """One ordered stop of an itinerary."""

    model_config = ConfigDict(frozen=True)

    venue_name: str = Field(min_length=1)
    activity_hint: str = ""


class Itinerary(BaseModel):
    """A themed, costed plan. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    steps: Tuple[ItineraryStep, ...] = Field(min_length=2)
    estimated_cost: float = Field(gt=0)
    source_venues: Tuple[Venue, ...] = ()
    theme: Optional[str] = None
    tier: ItineraryTier = "real_venues"


# ============================================================================
# Provisional records (untrusted LLM output)
# ============================================================================

class ExtractedVenueRecord(BaseModel):
    """One venue as returned by the extraction prompt."""

    name: str = Field(min_length=1)
    address: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    reviews: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("reviews", "reviewCount", "review_count")
    )
    description: Optional[str] = None
    type: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class StepRecord(BaseModel):
    """An itinerary step as returned by the LLM (object or bare string)."""

    venue: str = Field(
        min_length=1,
        validation_alias=AliasChoices("venue", "venueName", "venue_name", "name", "place"),
    )
    activity: str = Field(
        "",
        validation_alias=AliasChoices("activity", "activityHint", "activity_hint", "description"),
    )

    @model_validator(mode="before")
    @classmethod
    def accept_plain_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"venue": value}
        return value

    @field_validator("venue")
    @classmethod
    def strip_venue(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("step must name a venue")
        return v

    @field_validator("activity", mode="before")
    @classmethod
    def none_activity(cls, v: Any) -> Any:
        return "" if v is None else v


class ItineraryRecord(BaseModel):
    """An itinerary/location suggestion as returned by the LLM."""

    name: str = Field(min_length=1)
    description: str = ""
    steps: List[StepRecord] = Field(
        validation_alias=AliasChoices("steps", "itinerary", "activities"),
    )
    estimated_cost: float = Field(
        validation_alias=AliasChoices("estimatedCost", "estimated_cost", "totalCost"),
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def none_description(cls, v: Any) -> Any:
        return "" if v is None else v
