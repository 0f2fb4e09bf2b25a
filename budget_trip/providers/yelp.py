"""Yelp Fusion restaurant search."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional

from budget_trip.errors import ProviderUnavailable
from budget_trip.logs import get_logger
from budget_trip.providers.base import ResourceQuery, fetch_json, maps_search_url
from budget_trip.schemas import CandidateItem, FoodPlace

logger = get_logger(__name__)

API_URL = "https://api.yelp.com/v3"
_DEFAULT_IMAGE = "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4"

_PRICE_LEVELS = {"budget": "1,2", "local": "1,2,3", "fine": "3,4"}
_COST_BY_PRICE = {"$": 10.0, "$$": 20.0, "$$$": 40.0, "$$$$": 80.0}
_COST_BY_TIER = {"budget": 10.0, "local": 20.0, "fine": 60.0}


class YelpAdapter:
    name = "yelp"
    categories: FrozenSet[str] = frozenset({"food"})

    def __init__(self, api_key: Optional[str], *, timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout

    async def query(self, q: ResourceQuery) -> List[CandidateItem]:
        if not self.api_key:
            raise ProviderUnavailable("YELP_API_KEY not configured")

        tier = q.tier if q.tier in _PRICE_LEVELS else "local"
        payload = await fetch_json(
            "GET",
            f"{API_URL}/businesses/search",
            provider=self.name,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {self.api_key}"},
            params={
                "location": q.location,
                "term": "restaurants",
                "categories": "restaurants,gourmet" if tier == "fine" else "restaurants",
                "price": _PRICE_LEVELS[tier],
                "limit": max(10, q.desired_count),
                "sort_by": "rating",
            },
        )
        businesses = payload.get("businesses") if isinstance(payload, dict) else None
        if not businesses:
            return []

        places = [_to_food_place(b, tier) for b in businesses if isinstance(b, dict) and b.get("name")]
        logger.info("Yelp returned %d restaurant(s) for %s", len(places), q.location)
        return places


def _to_food_place(business: Dict[str, Any], tier: str) -> FoodPlace:
    cost = _COST_BY_PRICE.get(business.get("price") or "", _COST_BY_TIER[tier])

    categories = business.get("categories") or []
    cuisine = categories[0].get("title") if categories and isinstance(categories[0], dict) else None

    address_lines = (business.get("location") or {}).get("display_address") or []
    return FoodPlace(
        name=business["name"],
        description=f"{cuisine or 'Local cuisine'} restaurant",
        cost=cost,
        rating=business.get("rating"),
        review_count=business.get("review_count"),
        image_url=business.get("image_url") or _DEFAULT_IMAGE,
        map_url=maps_search_url(business["name"], " ".join(address_lines)),
        source="yelp",
    )
