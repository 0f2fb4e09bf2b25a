"""Day assembly and itinerary composition."""
from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import List, Optional

from budget_trip.budget import allocate, daily_amounts
from budget_trip.errors import GenerationTimeout
from budget_trip.logs import get_logger
from budget_trip.resolver import FallbackResolver
from budget_trip.schemas import (
    MEAL_SLOTS,
    Attraction,
    DailyAmounts,
    DateRange,
    DayPlan,
    GeneratedItinerary,
    Meal,
    Transportation,
    TripRequest,
)

logger = get_logger(__name__)

ACTIVITIES_PER_DAY = 2
# Extra single-item lookups before a day settles for a repeated activity.
MAX_ACTIVITY_ATTEMPTS = 5


async def assemble_day(
    day_index: int,
    request: TripRequest,
    daily: DailyAmounts,
    resolver: FallbackResolver,
) -> DayPlan:
    """Build one costed day: two activities, a place to stay and three meals."""
    prefs = request.preferences
    city, country = request.city, request.country

    activities, accommodation, *meal_results = await _gather_or_cancel(
        _pick_activities(request, resolver),
        resolver.resolve("accommodation", city, country, prefs.accommodation_tier),
        *[resolver.resolve("food", city, country, prefs.food_tier) for _ in MEAL_SLOTS],
    )

    stay = accommodation[0]
    day_meals = [
        Meal.model_validate({**result[0].model_dump(), "meal_slot": slot})
        for slot, result in zip(MEAL_SLOTS, meal_results)
    ]

    day_date = None
    if request.start_date is not None:
        day_date = request.start_date + timedelta(days=day_index - 1)

    first, second = activities[0], activities[1]
    return DayPlan(
        day_index=day_index,
        date=day_date,
        title=f"Day {day_index}: {first.name}",
        accommodation=stay,
        meals=day_meals,
        activities=activities,
        transportation=Transportation(
            type="Local Transit",
            description="Daily public transportation",
            cost=daily.transportation,
        ),
        daily_cost=daily.total,
        summary=(
            f"Explore {city} with a visit to {first.name} and {second.name}. "
            f"Stay at {stay.name} and enjoy local cuisine."
        ),
    )


async def compose_itinerary(
    request: TripRequest,
    resolver: FallbackResolver,
    *,
    parallel_days: bool = False,
) -> GeneratedItinerary:
    allocation = allocate(request.total_budget, request.preferences)
    daily = daily_amounts(allocation, request.days)
    logger.info(
        "Planning %d day(s) in %s with budget $%s: accommodation %d, food %d, activities %d, transportation %d",
        request.days,
        request.destination,
        f"{request.total_budget:,}",
        allocation.accommodation,
        allocation.food,
        allocation.activities,
        allocation.transportation,
    )

    day_indices = range(1, request.days + 1)
    if parallel_days:
        # results keep argument order, so days come back 1..N whatever finishes first
        days = list(await _gather_or_cancel(*[assemble_day(i, request, daily, resolver) for i in day_indices]))
    else:
        days = []
        for i in day_indices:
            days.append(await assemble_day(i, request, daily, resolver))

    itinerary = GeneratedItinerary(
        destination=request.destination,
        country=request.country,
        days=request.days,
        total_budget=request.total_budget,
        budget_allocation=allocation,
        preferences=request.preferences,
        date_range=DateRange(start=request.start_date, end=request.end_date),
        itinerary_days=days,
    )
    logger.info("Generated %d-day itinerary for %s (daily cost %d)", len(days), request.destination, daily.total)
    return itinerary


async def generate_itinerary(
    request: TripRequest,
    resolver: FallbackResolver,
    *,
    timeout: Optional[float] = None,
    parallel_days: bool = False,
) -> GeneratedItinerary:
    """Compose an itinerary within ``timeout`` seconds or raise ``GenerationTimeout``.

    On timeout every in-flight provider call is cancelled and nothing partial
    is returned.
    """
    try:
        return await asyncio.wait_for(
            compose_itinerary(request, resolver, parallel_days=parallel_days),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("Itinerary generation for %s exceeded %.1fs", request.destination, timeout or 0.0)
        raise GenerationTimeout(f"Itinerary generation exceeded {timeout}s") from exc


async def _pick_activities(request: TripRequest, resolver: FallbackResolver) -> List[Attraction]:
    city, country = request.city, request.country
    interests = request.preferences.activity_interests

    picked: List[Attraction] = []
    names = set()

    def _take(items) -> None:
        for item in items:
            key = item.name.strip().lower()
            if key in names or len(picked) >= ACTIVITIES_PER_DAY:
                continue
            names.add(key)
            picked.append(item)

    _take(await resolver.resolve("attraction", city, country, desired_count=ACTIVITIES_PER_DAY, interests=interests))

    attempts = 0
    while len(picked) < ACTIVITIES_PER_DAY and attempts < MAX_ACTIVITY_ATTEMPTS:
        attempts += 1
        _take(await resolver.resolve("attraction", city, country, interests=interests))

    if picked and len(picked) < ACTIVITIES_PER_DAY:
        logger.info("Only one distinct attraction available for %s; repeating %s", city, picked[0].name)
        picked.append(picked[0].model_copy())
    return picked


async def _gather_or_cancel(*aws):
    """``asyncio.gather`` that cancels and awaits the remaining work when one awaitable fails."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
