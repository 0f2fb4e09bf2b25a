"""Environment-driven settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from budget_trip.logs import get_logger

logger = get_logger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    provider_timeout: float = 8.0
    generation_timeout: float = 90.0
    parallel_days: bool = False
    enable_osm: bool = True
    random_seed: Optional[int] = None
    opentripmap_api_key: Optional[str] = None
    triposo_account: Optional[str] = None
    triposo_api_token: Optional[str] = None
    geoapify_api_key: Optional[str] = None
    yelp_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and a ``.env`` file if present)."""
        load_dotenv()

        raw_origins = os.getenv("TRIP_PLANNER_ALLOWED_ORIGINS") or "*"
        origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

        seed_raw = os.getenv("TRIP_PLANNER_RANDOM_SEED")
        seed: Optional[int] = None
        if seed_raw:
            try:
                seed = int(seed_raw)
            except ValueError:
                logger.warning("Ignoring non-integer TRIP_PLANNER_RANDOM_SEED=%r", seed_raw)

        return cls(
            allowed_origins=origins or ["*"],
            provider_timeout=_float_env("TRIP_PLANNER_PROVIDER_TIMEOUT", 8.0),
            generation_timeout=_float_env("TRIP_PLANNER_GENERATION_TIMEOUT", 90.0),
            parallel_days=_bool_env("TRIP_PLANNER_PARALLEL_DAYS", False),
            enable_osm=_bool_env("TRIP_PLANNER_ENABLE_OSM", True),
            random_seed=seed,
            opentripmap_api_key=os.getenv("OPENTRIPMAP_API_KEY") or None,
            triposo_account=os.getenv("TRIPOSO_ACCOUNT") or None,
            triposo_api_token=os.getenv("TRIPOSO_API_TOKEN") or None,
            geoapify_api_key=os.getenv("GEOAPIFY_API_KEY") or None,
            yelp_api_key=os.getenv("YELP_API_KEY") or None,
        )


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %.1f", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r; using %.1f", name, raw, default)
        return default
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY
