"""OpenTripMap attractions."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from budget_trip.errors import ProviderUnavailable
from budget_trip.logs import get_logger
from budget_trip.providers.base import ResourceQuery, fetch_json, maps_search_url
from budget_trip.schemas import Attraction, CandidateItem

logger = get_logger(__name__)

API_URL = "https://api.opentripmap.com/0.1/en"
_DEFAULT_IMAGE = "https://images.unsplash.com/photo-1553701879-4aa576804f65"

_KIND_MAP: Dict[str, str] = {
    "sightseeing": "interesting_places,tourist_facilities",
    "cultural": "museums,cultural,historic,architecture",
    "adventure": "natural,sport,amusements",
    "relaxation": "beaches,natural,gardens_and_parks",
    "shopping": "commercial,shops",
    "nightlife": "foods,adult",
    "temple-visits": "religion",
    "heritage-sites": "historic,architecture,cultural",
    "ayurveda-wellness": "sport,foods",
    "wildlife-safari": "natural,zoos",
    "backwaters": "natural,beaches",
    "street-food-tours": "foods",
    "handicrafts": "shops,commercial",
    "yoga-meditation": "sport,religion",
    "hill-stations": "natural,mountains",
    "desert-exploration": "natural",
}

# Checked in order; the first kind present on a place decides cost and duration.
_KIND_ESTIMATES = (
    ("museums", 15, "2-3 hours"),
    ("historic", 10, "1-2 hours"),
    ("amusements", 30, "3-4 hours"),
    ("zoos", 20, "2-3 hours"),
    ("religion", 0, "1 hour"),
    ("natural", 0, "2 hours"),
    ("beaches", 0, "3 hours"),
    ("gardens_and_parks", 0, "1-2 hours"),
)


class OpenTripMapAdapter:
    name = "opentripmap"
    categories: FrozenSet[str] = frozenset({"attraction"})

    def __init__(self, api_key: Optional[str], *, radius: int = 5000, timeout: float = 10.0):
        self.api_key = api_key
        self.radius = radius
        self.timeout = timeout

    async def query(self, q: ResourceQuery) -> List[CandidateItem]:
        if not self.api_key:
            raise ProviderUnavailable("OPENTRIPMAP_API_KEY not configured")

        geo = await fetch_json(
            "GET",
            f"{API_URL}/places/geoname",
            provider=self.name,
            timeout=self.timeout,
            params={"name": q.location, "apikey": self.api_key},
        )
        if not isinstance(geo, dict) or geo.get("lat") is None or geo.get("lon") is None:
            logger.info("OpenTripMap could not geocode %s", q.location)
            return []

        limit = max(10, q.desired_count)
        radius = await fetch_json(
            "GET",
            f"{API_URL}/places/radius",
            provider=self.name,
            timeout=self.timeout,
            params={
                "radius": self.radius,
                "lon": geo["lon"],
                "lat": geo["lat"],
                "kinds": kinds_for(q.interests),
                "rate": 2,
                "limit": limit,
                "format": "geojson",
                "apikey": self.api_key,
            },
        )
        features = radius.get("features") if isinstance(radius, dict) else None
        if not features:
            return []

        places: List[CandidateItem] = []
        for feature in features[:limit]:
            xid = (feature.get("properties") or {}).get("xid")
            if not xid:
                continue
            details = await fetch_json(
                "GET",
                f"{API_URL}/places/xid/{xid}",
                provider=self.name,
                timeout=self.timeout,
                params={"apikey": self.api_key},
            )
            place = _to_attraction(details)
            if place is not None:
                places.append(place)
        logger.info("OpenTripMap returned %d attraction(s) for %s", len(places), q.location)
        return places


def kinds_for(interests: Sequence[str]) -> str:
    kinds = ",".join(_KIND_MAP.get(tag, tag) for tag in interests)
    return kinds or "interesting_places"


def _estimate(kinds: str) -> tuple[float, str]:
    for kind, cost, duration in _KIND_ESTIMATES:
        if kind in kinds:
            return float(cost), duration
    return 10.0, "1 hour"


def _to_attraction(place: Any) -> Optional[Attraction]:
    if not isinstance(place, dict) or not place.get("name"):
        return None
    kinds = place.get("kinds") or ""
    cost, duration = _estimate(kinds)

    description = "Point of interest"
    extracts = place.get("wikipedia_extracts") or {}
    info = place.get("info") or {}
    if extracts.get("text"):
        description = extracts["text"]
    elif info.get("descr"):
        description = info["descr"]

    point = place.get("point") or {}
    preview = place.get("preview") or {}
    return Attraction(
        name=place["name"],
        description=description,
        cost=cost,
        duration=duration,
        image_url=preview.get("source") or _DEFAULT_IMAGE,
        map_url=maps_search_url(f"{point.get('lat')},{point.get('lon')}") if point else None,
        tags=[kind for kind in kinds.split(",") if kind],
        source="opentripmap",
    )
