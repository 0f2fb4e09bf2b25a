"""Priority-ordered provider chains per resource category."""
from __future__ import annotations

from typing import Dict, List

from budget_trip.config import Settings
from budget_trip.logs import get_logger
from budget_trip.providers.base import ProviderAdapter
from budget_trip.providers.geoapify import GeoapifyAdapter
from budget_trip.providers.opentripmap import OpenTripMapAdapter
from budget_trip.providers.osm import OverpassAdapter
from budget_trip.providers.triposo import TriposoAdapter
from budget_trip.providers.yelp import YelpAdapter

logger = get_logger(__name__)

ProviderChains = Dict[str, List[ProviderAdapter]]


def build_default_chains(settings: Settings) -> ProviderChains:
    """Return the adapters to try for each category, richest source first.

    Adapters whose credentials are missing are left out entirely rather than
    failing on every request; OSM needs no key and closes each chain unless
    it has been switched off.
    """
    opentripmap = OpenTripMapAdapter(settings.opentripmap_api_key) if settings.opentripmap_api_key else None
    triposo = (
        TriposoAdapter(settings.triposo_account, settings.triposo_api_token)
        if settings.triposo_account and settings.triposo_api_token
        else None
    )
    geoapify = GeoapifyAdapter(settings.geoapify_api_key) if settings.geoapify_api_key else None
    yelp = YelpAdapter(settings.yelp_api_key) if settings.yelp_api_key else None
    osm = OverpassAdapter() if settings.enable_osm else None

    chains: ProviderChains = {
        "attraction": [a for a in (opentripmap, triposo, osm) if a is not None],
        "accommodation": [a for a in (triposo, geoapify, osm) if a is not None],
        "food": [a for a in (geoapify, yelp, osm) if a is not None],
    }
    for category, adapters in chains.items():
        logger.info(
            "Provider chain for %s: %s",
            category,
            " -> ".join(a.name for a in adapters) or "static catalog only",
        )
    return chains
