# debug_planner.py
import asyncio
import json
import random

from budget_trip.config import Settings
from budget_trip.planner import generate_itinerary
from budget_trip.providers.registry import build_default_chains
from budget_trip.resolver import FallbackResolver
from budget_trip.schemas import TripRequest


async def main():
    payload = {
        "destination": "Jaipur, India",
        "startDate": "2025-11-02",
        "endDate": "2025-11-05",
        "totalBudget": 800,
        "preferences": {
            "accommodation": "mid-range",
            "food": "local",
            "activities": ["heritage-sites", "handicrafts", "street-food-tours"],
        },
    }

    settings = Settings.from_env()
    resolver = FallbackResolver(
        build_default_chains(settings),
        rng=random.Random(settings.random_seed),
        provider_timeout=settings.provider_timeout,
    )

    # Call the planner directly, bypassing the API
    itinerary = await generate_itinerary(
        TripRequest.model_validate(payload),
        resolver,
        timeout=settings.generation_timeout,
        parallel_days=settings.parallel_days,
    )
    print("➡️ Planner returned:\n")
    print(json.dumps(itinerary.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
