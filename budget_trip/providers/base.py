"""Shared contract for external point-of-interest, lodging and food providers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Protocol, Sequence, runtime_checkable
from urllib.parse import quote_plus

import httpx

from budget_trip.errors import ProviderError
from budget_trip.schemas import CandidateItem

USER_AGENT = "budget-trip-planner/1.0"


@dataclass(frozen=True)
class ResourceQuery:
    category: str
    city: str
    country: Optional[str] = None
    tier: Optional[str] = None
    interests: Sequence[str] = field(default_factory=tuple)
    desired_count: int = 1

    @property
    def location(self) -> str:
        return f"{self.city}, {self.country}" if self.country else self.city

    @property
    def is_india(self) -> bool:
        return (self.country or "").strip().lower() == "india"


@runtime_checkable
class ProviderAdapter(Protocol):
    """Anything that can turn a ``ResourceQuery`` into candidate items.

    Implementations raise on failure (``ProviderUnavailable`` when they are
    not configured) and return an empty list when the provider simply has no
    matches.
    """

    name: str
    categories: FrozenSet[str]

    async def query(self, q: ResourceQuery) -> List[CandidateItem]:
        ...


async def fetch_json(
    method: str,
    url: str,
    *,
    provider: str,
    timeout: float = 10.0,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Any:
    """Issue one request and decode the JSON body, wrapping failures in ``ProviderError``."""
    merged_headers = {"User-Agent": USER_AGENT, **(headers or {})}
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.request(method, url, params=params, headers=merged_headers, data=data)
            response.raise_for_status()
            return response.json()
    except httpx.HTTPError as exc:
        raise ProviderError(f"{provider} request to {url} failed: {exc}") from exc
    except ValueError as exc:
        raise ProviderError(f"{provider} returned a non-JSON payload") from exc


def maps_search_url(*parts: Any) -> str:
    query = " ".join(str(part) for part in parts if part not in (None, ""))
    return f"https://www.google.com/maps/search/?api=1&query={quote_plus(query)}"


def clamp_rating(value: float) -> float:
    return round(min(5.0, max(1.0, value)), 1)
