"""Provider fallback chain with a static-catalog safety net."""
from __future__ import annotations

import asyncio
import random
from typing import Dict, List, Mapping, Optional, Sequence

from budget_trip.catalog import DEFAULT_CATALOG, StaticCatalog
from budget_trip.errors import CatalogError, ProviderUnavailable
from budget_trip.logs import get_logger
from budget_trip.providers.base import ProviderAdapter, ResourceQuery
from budget_trip.schemas import CandidateItem

logger = get_logger(__name__)

CATEGORIES = ("attraction", "accommodation", "food")


class FallbackResolver:
    """Try each provider for a category in priority order, then the catalog.

    Provider exceptions and timeouts are logged and treated as "no results";
    only an empty catalog bucket (a broken catalog) escapes as ``CatalogError``.
    Cancellation is never swallowed, so an abandoned generation stops its
    in-flight provider calls.
    """

    def __init__(
        self,
        chains: Mapping[str, Sequence[ProviderAdapter]] | None = None,
        catalog: StaticCatalog | None = None,
        *,
        rng: random.Random | None = None,
        provider_timeout: float = 8.0,
    ):
        self.chains: Dict[str, List[ProviderAdapter]] = {
            category: list((chains or {}).get(category, ())) for category in CATEGORIES
        }
        self.catalog = catalog or DEFAULT_CATALOG
        self.rng = rng or random.Random()
        self.provider_timeout = provider_timeout

    def provider_names(self) -> Dict[str, List[str]]:
        return {category: [a.name for a in adapters] for category, adapters in self.chains.items()}

    async def resolve(
        self,
        category: str,
        city: str,
        country: Optional[str] = None,
        tier: Optional[str] = None,
        desired_count: int = 1,
        interests: Sequence[str] = (),
    ) -> List[CandidateItem]:
        if category not in self.chains:
            raise ValueError(f"Unknown resource category {category!r}")
        desired_count = max(1, desired_count)
        query = ResourceQuery(
            category=category,
            city=city,
            country=country,
            tier=tier,
            interests=tuple(interests),
            desired_count=desired_count,
        )

        for adapter in self.chains[category]:
            candidates = await self._try_adapter(adapter, query)
            if candidates:
                logger.debug("Using %d %s candidate(s) from %s for %s", len(candidates), category, adapter.name, city)
                return self.pick(candidates, desired_count)

        candidates = self.catalog.candidates(category, city, tier)
        if not candidates:
            raise CatalogError(f"Static catalog returned no {category} candidates for {city!r}")
        logger.info(
            "Falling back to static catalog for %s in %s (%s)",
            category,
            city,
            "known city" if self.catalog.has_city(city) else "default entry",
        )
        return self.pick(candidates, desired_count)

    def pick(self, candidates: Sequence[CandidateItem], count: int) -> List[CandidateItem]:
        """Choose up to ``count`` items uniformly at random, without repeating a name."""
        unique: List[CandidateItem] = []
        seen = set()
        for item in candidates:
            key = item.name.strip().lower()
            if key in seen:
                continue
            seen.add(key)
            unique.append(item)
        if count == 1:
            return [self.rng.choice(unique)]
        return self.rng.sample(unique, min(count, len(unique)))

    async def _try_adapter(self, adapter: ProviderAdapter, query: ResourceQuery) -> List[CandidateItem]:
        try:
            result = await asyncio.wait_for(adapter.query(query), timeout=self.provider_timeout)
        except ProviderUnavailable as exc:
            logger.debug("Skipping %s for %s: %s", adapter.name, query.category, exc)
            return []
        except asyncio.TimeoutError:
            logger.warning(
                "%s timed out after %.1fs fetching %s for %s",
                adapter.name,
                self.provider_timeout,
                query.category,
                query.location,
            )
            return []
        except Exception:
            logger.warning(
                "%s failed fetching %s for %s; trying next provider",
                adapter.name,
                query.category,
                query.location,
                exc_info=True,
            )
            return []
        return list(result or [])
