# agents/categorizer.py
"""Keyword bucketing of venues into activity categories."""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from workflows.schemas import CATEGORY_LABELS, DEFAULT_CATEGORY, CategoryBucket, Venue

# (category, type tags, keywords for description/name), in priority order
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        "dining",
        ("restaurant", "cafe", "food", "bakery", "meal_takeaway"),
        ("food", "eat", "dining", "cafe", "restaurant", "bistro", "brunch", "coffee"),
    ),
    (
        "entertainment",
        ("movie_theater", "bowling_alley", "amusement_park", "entertainment"),
        ("fun", "game", "movie", "bowling", "arcade", "karaoke", "escape room"),
    ),
    (
        "attractions",
        ("museum", "art_gallery", "tourist_attraction"),
        ("history", "culture", "art", "museum", "monument", "heritage"),
    ),
    (
        "shopping",
        ("shopping_mall", "store", "shopping"),
        ("shop", "mall", "market", "boutique"),
    ),
    (
        "nightlife",
        ("bar", "night_club", "nightlife"),
        ("drink", "party", "club", "pub", "cocktail", "brewery"),
    ),
    (
        "wellness",
        ("spa", "park", "gym", "wellness"),
        ("relax", "nature", "walk", "garden", "yoga", "spa"),
    ),
)


def _compile(keywords: Iterable[str]) -> "re.Pattern[str]":
    # Word-prefix match: "eat" hits "eatery" but not "great"
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})", flags=re.IGNORECASE)


_MATCHERS: List[Tuple[str, frozenset, "re.Pattern[str]"]] = [
    (label, frozenset(types), _compile(keywords)) for label, types, keywords in CATEGORY_RULES
]


def category_for(venue: Venue) -> str:
    types = {t.lower() for t in venue.category_types}
    text = " ".join([*sorted(types), venue.description, venue.name])
    for label, type_tags, pattern in _MATCHERS:
        if types & type_tags or pattern.search(text):
            return label
    return DEFAULT_CATEGORY


def categorize(venues: Iterable[Venue]) -> CategoryBucket:
    """Place each venue in exactly one bucket; every label is always present."""
    buckets: Dict[str, List[Venue]] = {label: [] for label in CATEGORY_LABELS}
    for venue in venues:
        buckets[category_for(venue)].append(venue)
    return buckets
