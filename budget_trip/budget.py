"""Fixed-ratio budget splitting."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict

from budget_trip.schemas import BudgetAllocation, DailyAmounts, Preferences

_ACCOMMODATION_SHARE: Dict[str, Decimal] = {
    "budget": Decimal("0.25"),
    "mid-range": Decimal("0.35"),
    "luxury": Decimal("0.45"),
}

_FOOD_SHARE: Dict[str, Decimal] = {
    "budget": Decimal("0.15"),
    "local": Decimal("0.25"),
    "fine": Decimal("0.35"),
}

_ACTIVITIES_SHARE = Decimal("0.25")


def allocate(total_budget: int, preferences: Preferences) -> BudgetAllocation:
    """Split ``total_budget`` across accommodation, food, activities and transportation.

    Accommodation and food follow the preference tiers, activities always take
    a quarter, and transportation receives whatever is left so the four shares
    add up to ``total_budget`` exactly. When the tier shares already exceed
    100% (luxury stays with fine dining) transportation is floored at zero and
    the overflow comes out of activities.
    """
    accommodation = _round_half_up(total_budget * _ACCOMMODATION_SHARE[preferences.accommodation_tier])
    food = _round_half_up(total_budget * _FOOD_SHARE[preferences.food_tier])
    activities = _round_half_up(total_budget * _ACTIVITIES_SHARE)

    transportation = total_budget - accommodation - food - activities
    if transportation < 0:
        activities = max(0, activities + transportation)
        transportation = 0

    return BudgetAllocation(
        accommodation=accommodation,
        food=food,
        activities=activities,
        transportation=transportation,
    )


def daily_amounts(allocation: BudgetAllocation, days: int) -> DailyAmounts:
    """Per-day share of each category, rounded half-up independently."""
    if days < 1:
        raise ValueError("days must be at least 1")
    accommodation = _round_half_up(Decimal(allocation.accommodation) / days)
    food = _round_half_up(Decimal(allocation.food) / days)
    activities = _round_half_up(Decimal(allocation.activities) / days)
    transportation = _round_half_up(Decimal(allocation.transportation) / days)
    return DailyAmounts(
        accommodation=accommodation,
        food=food,
        activities=activities,
        transportation=transportation,
        total=accommodation + food + activities + transportation,
    )


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
