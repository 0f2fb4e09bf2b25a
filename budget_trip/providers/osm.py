"""OpenStreetMap (Nominatim + Overpass) adapter.

Needs no API key, which makes it the last network stop before the static
catalog in every chain. Costs, ratings and visit durations are estimated from
OSM tags since OSM carries no prices.
"""
from __future__ import annotations

import re
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from budget_trip.logs import get_logger
from budget_trip.providers.base import ResourceQuery, clamp_rating, fetch_json, maps_search_url
from budget_trip.schemas import Accommodation, Attraction, CandidateItem, FoodPlace

logger = get_logger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
OVERPASS_URL = "https://overpass-api.de/api/interpreter"

_ATTRACTION_TAGS = (
    "tourism=attraction",
    "tourism=museum",
    "tourism=gallery",
    "tourism=viewpoint",
    "historic=monument",
    "historic=castle",
    "historic=ruins",
    "leisure=park",
)
_INDIA_ATTRACTION_TAGS = (
    "historic=temple",
    "historic=fort",
    "historic=palace",
    "natural=beach",
    "amenity=place_of_worship",
)
_ACCOMMODATION_TAGS = {
    "budget": ("tourism=hostel", "tourism=guest_house", "tourism=motel"),
    "mid-range": ("tourism=hotel", "tourism=apartment"),
    "luxury": ("tourism=hotel",),
}
_FOOD_TAGS = {
    "budget": ("amenity=fast_food", "amenity=food_court"),
    "local": ("amenity=restaurant",),
    "fine": ("amenity=restaurant", "cuisine=fine_dining"),
}

_NIGHT_BASE = {"budget": 50.0, "mid-range": 120.0, "luxury": 250.0}
_NIGHT_BASE_INDIA = {"budget": 30.0, "mid-range": 75.0, "luxury": 150.0}
_MEAL_BASE = {"budget": 8.0, "local": 20.0, "fine": 50.0}
_MEAL_BASE_INDIA = {"budget": 4.0, "local": 10.0, "fine": 25.0}

# First matching cuisine wins.
_CUISINE_MULTIPLIERS = (
    ("fine_dining", 2.0),
    ("sushi", 1.5),
    ("french", 1.4),
    ("seafood", 1.3),
    ("italian", 1.3),
    ("goan", 1.2),
    ("north_indian", 1.1),
    ("punjabi", 1.1),
    ("south_indian", 0.9),
    ("gujarati", 0.9),
    ("fast_food", 0.7),
    ("street_food", 0.6),
    ("dhaba", 0.5),
)

_DEFAULT_HOTEL_IMAGE = "https://images.unsplash.com/photo-1566073771259-6a8506099945"


class OverpassAdapter:
    name = "osm"
    categories: FrozenSet[str] = frozenset({"attraction", "accommodation", "food"})

    def __init__(self, *, radius: int = 5000, timeout: float = 20.0):
        self.radius = radius
        self.timeout = timeout

    async def query(self, q: ResourceQuery) -> List[CandidateItem]:
        coords = await self._geocode(q.location)
        if coords is None:
            logger.info("Nominatim found no match for %s", q.location)
            return []
        lat, lon = coords

        if q.category == "attraction":
            tags: Sequence[str] = _ATTRACTION_TAGS + (_INDIA_ATTRACTION_TAGS if q.is_india else ())
        elif q.category == "accommodation":
            tags = _ACCOMMODATION_TAGS.get(q.tier or "", _ACCOMMODATION_TAGS["mid-range"])
        else:
            tags = _FOOD_TAGS.get(q.tier or "", _FOOD_TAGS["local"])

        payload = await fetch_json(
            "POST",
            OVERPASS_URL,
            provider=self.name,
            timeout=self.timeout,
            data={"data": overpass_query(tags, lat, lon, self.radius)},
        )
        elements = payload.get("elements") if isinstance(payload, dict) else None
        if not elements:
            return []

        items: List[CandidateItem] = []
        seen = set()
        for element in elements:
            tags_ = (element or {}).get("tags") or {}
            name = tags_.get("name")
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            point = _coordinates(element)
            if point is None:
                continue
            items.append(self._to_item(q, name, tags_, point))
        logger.info("OSM returned %d %s item(s) for %s", len(items), q.category, q.location)
        return items

    async def _geocode(self, location: str) -> Optional[tuple[float, float]]:
        results = await fetch_json(
            "GET",
            NOMINATIM_URL,
            provider=self.name,
            timeout=self.timeout,
            params={"format": "json", "q": location, "limit": 1},
        )
        if not results:
            return None
        try:
            return float(results[0]["lat"]), float(results[0]["lon"])
        except (KeyError, IndexError, TypeError, ValueError):
            return None

    def _to_item(
        self, q: ResourceQuery, name: str, tags: Dict[str, Any], point: tuple[float, float]
    ) -> CandidateItem:
        map_url = maps_search_url(f"{point[0]},{point[1]}")
        india = q.is_india or tags.get("addr:country") in ("IN", "India")
        if q.category == "accommodation":
            tier = q.tier if q.tier in _NIGHT_BASE else "mid-range"
            return Accommodation(
                name=name,
                description=describe(tags),
                cost_per_night=estimate_night_cost(tags, tier, india=india),
                rating=estimate_rating(tags),
                image_url=tags.get("image") or _DEFAULT_HOTEL_IMAGE,
                map_url=map_url,
                source=self.name,
            )
        if q.category == "food":
            tier = q.tier if q.tier in _MEAL_BASE else "local"
            cuisine = (tags.get("cuisine") or "").split(";")[0].replace("_", " ")
            kind = "restaurant" if tags.get("amenity") == "restaurant" else "eatery"
            return FoodPlace(
                name=name,
                description=f"{cuisine.capitalize() or 'Local cuisine'} {kind}",
                cost=estimate_meal_cost(tags, tier, india=india),
                map_url=map_url,
                source=self.name,
            )
        return Attraction(
            name=name,
            description=describe(tags),
            cost=estimate_visit_cost(tags),
            duration=estimate_visit_duration(tags),
            image_url=tags.get("image"),
            map_url=map_url,
            tags=[f"{key}={value}" for key, value in tags.items() if key in ("tourism", "historic", "leisure", "natural")],
            source=self.name,
        )


def overpass_query(tags: Sequence[str], lat: float, lon: float, radius: int) -> str:
    filters = []
    for tag in tags:
        key, value = tag.split("=", 1)
        for element in ("node", "way", "relation"):
            filters.append(f'{element}["{key}"="{value}"](around:{radius},{lat},{lon});')
    body = "\n  ".join(filters)
    return f"[out:json][timeout:25];\n(\n  {body}\n);\nout center 60;"


def _coordinates(element: Dict[str, Any]) -> Optional[tuple[float, float]]:
    lat = element.get("lat")
    lon = element.get("lon")
    center = element.get("center") or {}
    lat = lat if lat is not None else center.get("lat")
    lon = lon if lon is not None else center.get("lon")
    if lat is None or lon is None:
        return None
    return float(lat), float(lon)


def describe(tags: Dict[str, Any]) -> str:
    if tags.get("description"):
        return tags["description"]
    parts: List[str] = []
    if tags.get("historic"):
        parts.append(f"Historic {tags['historic']}")
    if tags.get("architecture"):
        parts.append(f"{tags['architecture']} architecture")
    if tags.get("tourism"):
        parts.append(f"Tourist {tags['tourism'].replace('_', ' ')}")
    if tags.get("amenity"):
        parts.append(tags["amenity"].replace("_", " "))
    return ", ".join(parts) if parts else "Point of interest"


def estimate_visit_duration(tags: Dict[str, Any]) -> str:
    if tags.get("tourism") == "museum":
        return "2-3 hours"
    if tags.get("tourism") == "gallery":
        return "1-2 hours"
    if tags.get("historic") == "castle":
        return "2-3 hours"
    if tags.get("leisure") == "park":
        return "1-2 hours"
    if tags.get("tourism") == "viewpoint" or tags.get("historic") == "monument":
        return "30 minutes"
    return "1 hour"


def estimate_visit_cost(tags: Dict[str, Any]) -> float:
    fee_amount = tags.get("fee:amount")
    if fee_amount:
        match = re.search(r"\d+(\.\d+)?", str(fee_amount))
        if match:
            return float(match.group(0))
    if tags.get("fee") == "no":
        return 0.0
    if tags.get("tourism") == "museum":
        return 15.0
    if tags.get("tourism") == "gallery":
        return 12.0
    if tags.get("historic") == "castle":
        return 20.0
    if tags.get("tourism") == "attraction":
        return 10.0
    if tags.get("leisure") == "park" or tags.get("tourism") == "viewpoint":
        return 0.0
    return 10.0


def estimate_night_cost(tags: Dict[str, Any], tier: str, *, india: bool = False) -> float:
    base = (_NIGHT_BASE_INDIA if india else _NIGHT_BASE)[tier]
    if india:
        if tags.get("tourism") == "heritage_hotel" or tags.get("building") == "haveli":
            return float(round(_NIGHT_BASE_INDIA["luxury"] * 1.2))
        if tags.get("tourism") in ("guest_house", "hostel"):
            return float(round(_NIGHT_BASE_INDIA["budget"] * 0.7))

    multiplier = 1.0
    stars = _stars(tags)
    if stars is not None:
        if stars <= 2:
            multiplier = 0.8
        elif stars >= 5:
            multiplier = 1.8
        elif stars >= 4:
            multiplier = 1.3
    if "central" in str(tags.get("addr:district", "")).lower():
        multiplier *= 1.2
    return float(round(base * multiplier))


def estimate_rating(tags: Dict[str, Any]) -> float:
    stars = _stars(tags)
    if stars is not None:
        return clamp_rating(stars)
    return {
        "hotel": 4.0,
        "hostel": 3.5,
        "guest_house": 3.7,
        "apartment": 4.2,
    }.get(tags.get("tourism"), 3.8)


def estimate_meal_cost(tags: Dict[str, Any], tier: str, *, india: bool = False) -> float:
    base = (_MEAL_BASE_INDIA if india else _MEAL_BASE)[tier]
    cuisines = [c.strip() for c in str(tags.get("cuisine") or "").split(";") if c.strip()]
    multiplier = 1.0
    for cuisine, factor in _CUISINE_MULTIPLIERS:
        if cuisine in cuisines:
            multiplier = factor
            break
    return float(round(base * multiplier))


def _stars(tags: Dict[str, Any]) -> Optional[float]:
    raw = tags.get("stars")
    if raw is None:
        return None
    match = re.match(r"\d+(\.\d+)?", str(raw))
    return float(match.group(0)) if match else None
