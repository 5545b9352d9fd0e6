import pytest

from workflows.fallback import STATIC_STEPS, build_static_itinerary, next_tier
from workflows.schemas import MemberPreferences
from workflows.state import PlanningTier


def test_next_tier_walks_the_ladder_when_empty():
    assert next_tier(PlanningTier.TRY_REAL_VENUES, []) is PlanningTier.TRY_AI_ONLY
    assert next_tier(PlanningTier.TRY_AI_ONLY, []) is PlanningTier.STATIC_FALLBACK
    assert next_tier(PlanningTier.STATIC_FALLBACK, []) is None


@pytest.mark.parametrize("tier", list(PlanningTier))
def test_next_tier_stops_on_first_success(tier):
    itinerary = build_static_itinerary([MemberPreferences(location="Saket", budget=300)])
    assert next_tier(tier, [itinerary]) is None


def test_static_itinerary_shape():
    members = [
        MemberPreferences(location="Saket, New Delhi", budget=750),
        MemberPreferences(location="Noida", budget=100),
    ]

    itinerary = build_static_itinerary(members)

    assert itinerary.name == "Hangout in Saket, New Delhi"
    assert [s.venue_name for s in itinerary.steps] == list(STATIC_STEPS)
    assert itinerary.estimated_cost == 750
    assert itinerary.tier == "static"
    assert itinerary.source_venues == ()


def test_static_itinerary_zero_budget_uses_default_cost():
    itinerary = build_static_itinerary([MemberPreferences(location="Saket", budget=0)])
    assert itinerary.estimated_cost == 100
