"""Triposo curated travel content: sights and hotels."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional

from budget_trip.errors import ProviderUnavailable
from budget_trip.logs import get_logger
from budget_trip.providers.base import ResourceQuery, clamp_rating, fetch_json, maps_search_url
from budget_trip.schemas import Accommodation, Attraction, CandidateItem

logger = get_logger(__name__)

API_URL = "https://www.triposo.com/api/20220104"
_FIELDS = "id,name,snippet,intro,images,coordinates,properties,score,price_tier,tag_labels"

_POI_COST_BY_TIER = {1: 0.0, 2: 10.0, 3: 20.0, 4: 35.0, 5: 50.0}
_NIGHT_COST_BY_TIER = {1: 30.0, 2: 60.0, 3: 120.0, 4: 200.0, 5: 350.0}
_NIGHT_COST_BY_PREFERENCE = {"budget": 50.0, "mid-range": 100.0, "luxury": 250.0}
_PRICE_TIER_FILTER = {
    "budget": "price_tier:1,price_tier:2",
    "mid-range": "price_tier:3",
    "luxury": "price_tier:4,price_tier:5",
}

_DEFAULT_POI_IMAGE = "https://images.unsplash.com/photo-1476304884326-cd2c88572c5f"
_DEFAULT_HOTEL_IMAGE = "https://images.unsplash.com/photo-1566073771259-6a8506099945"


class TriposoAdapter:
    name = "triposo"
    categories: FrozenSet[str] = frozenset({"attraction", "accommodation"})

    def __init__(self, account: Optional[str], token: Optional[str], *, timeout: float = 10.0):
        self.account = account
        self.token = token
        self.timeout = timeout

    async def query(self, q: ResourceQuery) -> List[CandidateItem]:
        if not (self.account and self.token):
            raise ProviderUnavailable("TRIPOSO_ACCOUNT / TRIPOSO_API_TOKEN not configured")

        params: Dict[str, Any] = {
            "location_id": location_id(q.city, q.country),
            "count": max(10, q.desired_count),
            "fields": _FIELDS,
            "order_by": "-score",
            "account": self.account,
            "token": self.token,
        }
        if q.category == "accommodation":
            tier = q.tier or "mid-range"
            params["tag_labels"] = "hotels"
            params["annotate"] = _PRICE_TIER_FILTER.get(tier, _PRICE_TIER_FILTER["mid-range"])

        payload = await fetch_json(
            "GET", f"{API_URL}/poi.json", provider=self.name, timeout=self.timeout, params=params
        )
        results = payload.get("results") if isinstance(payload, dict) else None
        if not results:
            return []

        items: List[CandidateItem] = []
        for poi in results:
            if not isinstance(poi, dict) or not poi.get("name"):
                continue
            if q.category == "accommodation":
                items.append(_to_accommodation(poi, q.tier or "mid-range"))
            else:
                items.append(_to_attraction(poi))
        logger.info("Triposo returned %d %s item(s) for %s", len(items), q.category, q.location)
        return items


def location_id(city: str, country: Optional[str]) -> str:
    city_id = city.strip().lower().replace(" ", "_")
    if country:
        return f"{city_id}_{country.strip().lower().replace(' ', '_')}"
    return city_id


def _first_image(poi: Dict[str, Any], default: str) -> str:
    images = poi.get("images") or []
    try:
        return images[0]["sizes"]["medium"]["url"]
    except (IndexError, KeyError, TypeError):
        return default


def _to_attraction(poi: Dict[str, Any]) -> Attraction:
    labels: List[str] = list(poi.get("tag_labels") or [])
    duration = "1-2 hours"
    if "museums" in labels:
        duration = "2-3 hours"
    elif "amusement_parks" in labels:
        duration = "3-4 hours"
    elif "monuments" in labels:
        duration = "30 minutes"
    elif "natural" in labels:
        duration = "2-3 hours"

    return Attraction(
        name=poi["name"],
        description=poi.get("snippet") or poi.get("intro") or "A popular attraction",
        cost=_POI_COST_BY_TIER.get(poi.get("price_tier"), 0.0),
        duration=duration,
        image_url=_first_image(poi, _DEFAULT_POI_IMAGE),
        map_url=maps_search_url(poi["name"], poi.get("location_id")),
        tags=labels,
        source="triposo",
    )


def _to_accommodation(poi: Dict[str, Any], tier: str) -> Accommodation:
    cost = _NIGHT_COST_BY_TIER.get(poi.get("price_tier"), _NIGHT_COST_BY_PREFERENCE.get(tier, 100.0))
    score = poi.get("score")
    # Triposo scores run roughly 0-10.
    rating = clamp_rating(float(score) / 2) if isinstance(score, (int, float)) else 3.5
    return Accommodation(
        name=poi["name"],
        description=poi.get("snippet") or poi.get("intro") or "A comfortable place to stay",
        cost_per_night=cost,
        rating=rating,
        image_url=_first_image(poi, _DEFAULT_HOTEL_IMAGE),
        map_url=maps_search_url(poi["name"], poi.get("location_id")),
        source="triposo",
    )
