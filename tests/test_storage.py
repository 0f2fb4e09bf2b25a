import asyncio
import random

import pytest

from budget_trip.errors import StorageError
from budget_trip.planner import compose_itinerary
from budget_trip.resolver import FallbackResolver
from budget_trip.schemas import TripRequest
from budget_trip.storage import DestinationDirectory, InMemoryItineraryStore


def _itinerary():
    trip = TripRequest.model_validate(
        {
            "destination": "Jaipur, India",
            "days": 2,
            "totalBudget": 400,
            "preferences": {"accommodation": "budget", "food": "budget", "activities": ["heritage-sites"]},
        }
    )
    return asyncio.run(compose_itinerary(trip, FallbackResolver(rng=random.Random(8))))


def test_store_assigns_sequential_ids_and_echoes_fields():
    store = InMemoryItineraryStore()
    itinerary = _itinerary()

    first = store.create(itinerary)
    second = store.create(itinerary, user_id=4)

    assert (first.id, second.id) == (1, 2)
    assert first.destination == "Jaipur, India"
    assert first.country == "India"
    assert first.total_budget == 400
    assert first.itinerary_data == itinerary
    assert store.get(2).user_id == 4
    assert store.get(3) is None


def test_store_filters_by_user():
    store = InMemoryItineraryStore()
    itinerary = _itinerary()
    store.create(itinerary, user_id=1)
    store.create(itinerary, user_id=2)
    store.create(itinerary)

    assert [r.id for r in store.list()] == [1, 2, 3]
    assert [r.id for r in store.list(user_id=2)] == [2]


def test_update_and_delete():
    store = InMemoryItineraryStore()
    record = store.create(_itinerary())

    updated = store.update(record.id, user_id=9, id=500)

    assert updated.id == record.id
    assert store.get(record.id).user_id == 9
    assert store.update(42, user_id=1) is None
    assert store.delete(record.id) is True
    assert store.delete(record.id) is False
    assert store.create(_itinerary()).id == 2


def test_invalid_update_raises_storage_error():
    store = InMemoryItineraryStore()
    record = store.create(_itinerary())

    with pytest.raises(StorageError):
        store.update(record.id, total_budget="lots")


def test_destination_directory_lookup():
    directory = DestinationDirectory()

    assert len(directory.list()) == 20
    assert directory.get(1).name == "Paris"
    assert directory.find_by_name("  rishikesh ").region == "Northern India"
    assert directory.find_by_name("Atlantis") is None
    assert directory.get(999) is None
