"""Geoapify Places: lodging and restaurants by category."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional

from budget_trip.errors import ProviderUnavailable
from budget_trip.logs import get_logger
from budget_trip.providers.base import ResourceQuery, fetch_json, maps_search_url
from budget_trip.schemas import Accommodation, CandidateItem, FoodPlace

logger = get_logger(__name__)

API_URL = "https://api.geoapify.com/v2/places"

_ACCOMMODATION_CATEGORIES = {
    "budget": "accommodation.hostel,accommodation.guest_house",
    "mid-range": "accommodation.hotel",
    "luxury": "accommodation.hotel.luxury",
}
_FOOD_CATEGORIES = {
    "budget": "catering.fast_food,catering.food_court",
    "local": "catering.restaurant",
    "fine": "catering.restaurant.gourmet",
}

# Geoapify has no price data; use the middle of each tier's typical range.
_NIGHTLY_ESTIMATE = {"budget": (55.0, 3.5), "mid-range": (125.0, 4.0), "luxury": (275.0, 4.5)}
_MEAL_ESTIMATE = {"budget": 7.0, "local": 20.0, "fine": 55.0}

_ACCOMMODATION_LABELS = (
    ("accommodation.hotel.luxury", "Luxury hotel"),
    ("accommodation.hotel", "Hotel"),
    ("accommodation.hostel", "Hostel"),
    ("accommodation.guest_house", "Guest house"),
)


class GeoapifyAdapter:
    name = "geoapify"
    categories: FrozenSet[str] = frozenset({"accommodation", "food"})

    def __init__(self, api_key: Optional[str], *, timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout

    async def query(self, q: ResourceQuery) -> List[CandidateItem]:
        if not self.api_key:
            raise ProviderUnavailable("GEOAPIFY_API_KEY not configured")

        if q.category == "accommodation":
            tier = q.tier if q.tier in _ACCOMMODATION_CATEGORIES else "mid-range"
            categories = _ACCOMMODATION_CATEGORIES[tier]
        else:
            tier = q.tier if q.tier in _FOOD_CATEGORIES else "local"
            categories = _FOOD_CATEGORIES[tier]

        payload = await fetch_json(
            "GET",
            API_URL,
            provider=self.name,
            timeout=self.timeout,
            params={
                "categories": categories,
                "filter": f"place:{q.location}",
                "limit": max(10, q.desired_count),
                "apiKey": self.api_key,
            },
        )
        features = payload.get("features") if isinstance(payload, dict) else None
        if not features:
            return []

        items: List[CandidateItem] = []
        for feature in features:
            props = (feature or {}).get("properties") or {}
            if not props.get("name"):
                continue
            if q.category == "accommodation":
                items.append(_to_accommodation(props, tier))
            else:
                items.append(_to_food_place(props, tier))
        logger.info("Geoapify returned %d %s item(s) for %s", len(items), q.category, q.location)
        return items


def _place_label(props: Dict[str, Any]) -> str:
    return props.get("city") or props.get("suburb") or ""


def _map_url(props: Dict[str, Any]) -> Optional[str]:
    if props.get("lat") is None or props.get("lon") is None:
        return None
    return maps_search_url(f"{props['lat']},{props['lon']}")


def _to_accommodation(props: Dict[str, Any], tier: str) -> Accommodation:
    cost, rating = _NIGHTLY_ESTIMATE[tier]
    if props.get("country") == "India":
        cost = round(cost * 0.6)

    description = props["name"]
    categories = (props.get("categories") or [])
    if isinstance(categories, str):
        categories = categories.split(",")
    for category, label in _ACCOMMODATION_LABELS:
        if category in categories:
            description = f"{label} in {_place_label(props)}".strip()
            break

    return Accommodation(
        name=props["name"],
        description=description,
        cost_per_night=cost,
        rating=rating,
        image_url=f"https://source.unsplash.com/random/800x600/?hotel,{tier}",
        map_url=_map_url(props),
        source="geoapify",
    )


def _to_food_place(props: Dict[str, Any], tier: str) -> FoodPlace:
    cost = _MEAL_ESTIMATE[tier]
    if props.get("country") == "India":
        cost = round(cost * 0.5)

    cuisine = "Local cuisine"
    categories = (props.get("categories") or [])
    if isinstance(categories, str):
        categories = categories.split(",")
    for category in categories:
        if category.startswith("catering.restaurant."):
            cuisine = category[len("catering.restaurant."):].replace("_", " ").capitalize()
            break

    return FoodPlace(
        name=props["name"],
        description=f"{cuisine} restaurant",
        cost=cost,
        image_url=f"https://source.unsplash.com/random/800x600/?food,{tier}",
        map_url=_map_url(props),
        source="geoapify",
    )
