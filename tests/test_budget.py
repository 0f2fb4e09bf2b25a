import itertools

import pytest

from budget_trip.budget import allocate, daily_amounts
from budget_trip.schemas import BudgetAllocation, Preferences


def _prefs(accommodation: str, food: str) -> Preferences:
    return Preferences.model_validate(
        {"accommodation": accommodation, "food": food, "activities": ["sightseeing"]}
    )


def test_paris_mid_range_local_split():
    allocation = allocate(1500, _prefs("mid-range", "local"))

    assert allocation == BudgetAllocation(accommodation=525, food=375, activities=375, transportation=225)


@pytest.mark.parametrize(
    "accommodation, food",
    list(itertools.product(["budget", "mid-range", "luxury"], ["budget", "local", "fine"])),
)
@pytest.mark.parametrize("total", [200, 333, 1001, 1500, 9999])
def test_allocation_sums_to_total_and_is_non_negative(accommodation, food, total):
    allocation = allocate(total, _prefs(accommodation, food))

    assert allocation.total == total
    assert min(allocation.accommodation, allocation.food, allocation.activities, allocation.transportation) >= 0


def test_allocation_is_deterministic():
    prefs = _prefs("budget", "fine")

    assert allocate(2750, prefs) == allocate(2750, prefs)


def test_luxury_fine_floors_transportation_at_zero():
    allocation = allocate(1000, _prefs("luxury", "fine"))

    assert allocation.accommodation == 450
    assert allocation.food == 350
    assert allocation.transportation == 0
    assert allocation.activities == 200
    assert allocation.total == 1000


def test_rounding_is_half_up():
    # 210 * 0.25 = 52.5 rounds to 53 for the accommodation and activity shares.
    allocation = allocate(210, _prefs("budget", "budget"))

    assert allocation.accommodation == 53
    assert allocation.activities == 53
    assert allocation.food == 32
    assert allocation.transportation == 210 - 53 - 32 - 53


def test_daily_amounts_divides_each_category():
    allocation = BudgetAllocation(accommodation=525, food=375, activities=375, transportation=225)

    daily = daily_amounts(allocation, 5)

    assert (daily.accommodation, daily.food, daily.activities, daily.transportation) == (105, 75, 75, 45)
    assert daily.total == 300


def test_daily_amounts_rounds_each_category_independently():
    allocation = BudgetAllocation(accommodation=100, food=50, activities=50, transportation=0)

    daily = daily_amounts(allocation, 3)

    assert (daily.accommodation, daily.food, daily.activities) == (33, 17, 17)
    assert daily.total == 67


def test_daily_amounts_rejects_zero_days():
    allocation = BudgetAllocation(accommodation=1, food=1, activities=1, transportation=1)

    with pytest.raises(ValueError):
        daily_amounts(allocation, 0)
