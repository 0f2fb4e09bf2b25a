import asyncio
import random
from typing import List

import pytest

from budget_trip.catalog import StaticCatalog
from budget_trip.errors import CatalogError, ProviderError, ProviderUnavailable
from budget_trip.resolver import FallbackResolver
from budget_trip.schemas import Attraction


class StubAdapter:
    categories = frozenset({"attraction"})

    def __init__(self, name: str, names: List[str] = (), exc: Exception = None, delay: float = 0.0):
        self.name = name
        self.names = list(names)
        self.exc = exc
        self.delay = delay
        self.calls = 0

    async def query(self, q):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return [Attraction(name=n, source=self.name) for n in self.names]


def _resolver(*adapters, **kwargs) -> FallbackResolver:
    kwargs.setdefault("rng", random.Random(7))
    return FallbackResolver({"attraction": list(adapters)}, **kwargs)


def test_first_non_empty_provider_wins():
    empty = StubAdapter("empty")
    primary = StubAdapter("primary", ["Louvre"])
    never = StubAdapter("never", ["Orsay"])

    result = asyncio.run(_resolver(empty, primary, never).resolve("attraction", "Paris"))

    assert [item.name for item in result] == ["Louvre"]
    assert result[0].source == "primary"
    assert (empty.calls, primary.calls, never.calls) == (1, 1, 0)


def test_failing_and_unconfigured_providers_are_skipped():
    broken = StubAdapter("broken", exc=ProviderError("quota exceeded"))
    unconfigured = StubAdapter("unconfigured", exc=ProviderUnavailable("no key"))
    crashing = StubAdapter("crashing", exc=KeyError("lat"))
    good = StubAdapter("good", ["Eiffel Tower"])

    result = asyncio.run(_resolver(broken, unconfigured, crashing, good).resolve("attraction", "Paris"))

    assert [item.source for item in result] == ["good"]


def test_slow_provider_times_out_and_chain_continues():
    slow = StubAdapter("slow", ["Too Late"], delay=1.0)
    fast = StubAdapter("fast", ["On Time"])

    result = asyncio.run(_resolver(slow, fast, provider_timeout=0.05).resolve("attraction", "Paris"))

    assert [item.name for item in result] == ["On Time"]


def test_catalog_is_used_when_every_provider_is_empty():
    resolver = _resolver(StubAdapter("empty"), StubAdapter("broken", exc=ProviderError("down")))

    result = asyncio.run(resolver.resolve("attraction", "Paris", desired_count=2))

    assert len(result) == 2
    assert all(item.source == "catalog" for item in result)


def test_unknown_city_uses_default_catalog_entry():
    result = asyncio.run(FallbackResolver(rng=random.Random(1)).resolve("attraction", "Nowhereville", desired_count=3))

    assert {item.name for item in result} == {"City Tour", "Local Museum", "Nature Walk"}


def test_catalog_lookup_ignores_case():
    resolver = FallbackResolver(rng=random.Random(3))

    result = asyncio.run(resolver.resolve("accommodation", "tOkYo", tier="luxury"))

    assert result[0].source == "catalog"
    assert result[0].name in {a.name for a in resolver.catalog.accommodations("Tokyo", "luxury")}


def test_multiple_picks_are_distinct():
    provider = StubAdapter("dupes", ["Louvre", "louvre", "Orsay", "Orangerie"])

    for seed in range(20):
        result = asyncio.run(_resolver(provider, rng=random.Random(seed)).resolve("attraction", "Paris", desired_count=3))
        names = [item.name.lower() for item in result]
        assert len(names) == len(set(names)) == 3


def test_desired_count_larger_than_candidates_returns_all_unique():
    provider = StubAdapter("small", ["Louvre", "Orsay"])

    result = asyncio.run(_resolver(provider).resolve("attraction", "Paris", desired_count=5))

    assert sorted(item.name for item in result) == ["Louvre", "Orsay"]


def test_seeded_rng_makes_selection_reproducible():
    names = ["A1", "B2", "C3", "D4", "E5"]

    first = asyncio.run(_resolver(StubAdapter("p", names), rng=random.Random(42)).resolve("attraction", "X", desired_count=2))
    second = asyncio.run(_resolver(StubAdapter("p", names), rng=random.Random(42)).resolve("attraction", "X", desired_count=2))

    assert [i.name for i in first] == [i.name for i in second]


def test_unknown_category_is_rejected():
    with pytest.raises(ValueError):
        asyncio.run(FallbackResolver().resolve("nightclub", "Paris"))


def test_empty_catalog_bucket_raises_catalog_error(monkeypatch):
    resolver = FallbackResolver(rng=random.Random(0))
    monkeypatch.setattr(StaticCatalog, "candidates", lambda self, category, city, tier=None: [])

    with pytest.raises(CatalogError):
        asyncio.run(resolver.resolve("food", "Paris", tier="local"))


def test_provider_names_reports_chain_order():
    resolver = _resolver(StubAdapter("first"), StubAdapter("second"))

    assert resolver.provider_names() == {"attraction": ["first", "second"], "accommodation": [], "food": []}


class RaisingAdapter:
    categories = frozenset({"attraction", "accommodation", "food"})

    def __init__(self, name, exc):
        self.name = name
        self.exc = exc
        self.calls = 0

    async def query(self, q):
        self.calls += 1
        raise self.exc


@pytest.mark.parametrize(
    "category, tier, expected",
    [
        ("attraction", None, {"Eiffel Tower", "Louvre Museum", "Notre-Dame Cathedral", "Seine River Cruise", "Montmartre", "Champs-Élysées"}),
        ("accommodation", "budget", {"Le Budget Hostel"}),
        ("accommodation", "luxury", {"Grand Palais Hotel"}),
        ("food", "budget", {"Le Petit Café", "Boulangerie Moderne", "Crêpe Stand"}),
        ("food", "fine", {"L'Authentique", "Bistro Élégant", "Le Grand Restaurant"}),
    ],
)
def test_every_provider_failing_falls_back_to_tier_matched_catalog_item(category, tier, expected):
    adapters = [
        RaisingAdapter("quota", ProviderError("429 Too Many Requests")),
        RaisingAdapter("unconfigured", ProviderUnavailable("no key")),
        RaisingAdapter("bug", RuntimeError("unexpected payload")),
    ]
    resolver = FallbackResolver({category: adapters}, rng=random.Random(6))

    result = asyncio.run(resolver.resolve(category, "Paris", "France", tier))

    assert len(result) == 1
    assert result[0].source == "catalog"
    assert result[0].name in expected
    assert [a.calls for a in adapters] == [1, 1, 1]
