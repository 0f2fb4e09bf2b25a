import asyncio
import random
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from budget_trip.config import Settings
from budget_trip.errors import CatalogError, StorageError
from budget_trip.main import create_app
from budget_trip.resolver import FallbackResolver
from budget_trip.storage import InMemoryItineraryStore


def _sample_payload() -> dict:
    return {
        "destination": "Paris, France",
        "startDate": "2025-07-10",
        "endDate": "2025-07-14",
        "days": 5,
        "totalBudget": 1500,
        "preferences": {"accommodation": "mid-range", "food": "local", "activities": ["sightseeing", "cultural"]},
    }


def _client(**kwargs) -> TestClient:
    kwargs.setdefault("settings", Settings(enable_osm=False))
    kwargs.setdefault("resolver", FallbackResolver(rng=random.Random(1)))
    return TestClient(create_app(**kwargs))


def test_generate_itinerary_endpoint():
    client = _client()

    response = client.post("/api/generate-itinerary", json=_sample_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["destination"] == "Paris, France"
    assert body["budgetAllocation"] == {"accommodation": 525, "food": 375, "activities": 375, "transportation": 225}
    assert body["preferences"]["accommodation"] == "mid-range"
    assert body["dateRange"] == {"start": "2025-07-10", "end": "2025-07-14"}
    days = body["itineraryDays"]
    assert [d["dayIndex"] for d in days] == [1, 2, 3, 4, 5]
    assert days[0]["date"] == "2025-07-10"
    assert [m["mealSlot"] for m in days[0]["meals"]] == ["breakfast", "lunch", "dinner"]
    assert days[0]["accommodation"]["costPerNight"] > 0
    assert days[0]["dailyCost"] == 300


def test_generate_itinerary_reports_first_invalid_field():
    client = _client()
    payload = {**_sample_payload(), "totalBudget": 50}

    response = client.post("/api/generate-itinerary", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["field"] == "totalBudget"
    assert "totalBudget" in body["message"]
    assert body["errors"][0]["field"] == "totalBudget"


def test_generate_itinerary_rejects_non_object_body():
    client = _client()

    response = client.post("/api/generate-itinerary", json=["Paris"])

    assert response.status_code == 400


def test_generate_itinerary_internal_failure(monkeypatch):
    resolver = FallbackResolver(rng=random.Random(1))
    client = _client(resolver=resolver)

    resolve = AsyncMock(side_effect=CatalogError("empty bucket"))
    monkeypatch.setattr(resolver, "resolve", resolve)

    response = client.post("/api/generate-itinerary", json=_sample_payload())

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to generate itinerary"}
    resolve.assert_awaited()


def test_generate_itinerary_timeout(monkeypatch):
    client = _client(settings=Settings(enable_osm=False, generation_timeout=0.01))

    async def slow(*args, **kwargs):
        await asyncio.sleep(1)

    monkeypatch.setattr(client.app.state.resolver, "resolve", slow)

    response = client.post("/api/generate-itinerary", json=_sample_payload())

    assert response.status_code == 504


def test_save_and_fetch_itinerary():
    client = _client()
    itinerary = client.post("/api/generate-itinerary", json=_sample_payload()).json()

    saved = client.post("/api/save-itinerary", json={"itineraryData": itinerary, "userId": 7})

    assert saved.status_code == 201
    record = saved.json()
    assert record["id"] == 1
    assert record["userId"] == 7
    assert record["destination"] == "Paris, France"
    assert record["startDate"] == "2025-07-10"
    assert record["itineraryData"] == itinerary

    second = client.post("/api/save-itinerary", json={"itineraryData": itinerary})
    assert second.json()["id"] == 2

    fetched = client.get("/api/itineraries/1")
    assert fetched.status_code == 200
    assert fetched.json()["itineraryData"]["itineraryDays"] == itinerary["itineraryDays"]

    assert [r["id"] for r in client.get("/api/itineraries").json()] == [1, 2]
    assert [r["id"] for r in client.get("/api/itineraries", params={"userId": 7}).json()] == [1]


def test_save_itinerary_requires_data():
    client = _client()

    response = client.post("/api/save-itinerary", json={"userId": 3})

    assert response.status_code == 400
    assert response.json()["message"] == "Itinerary data is required"


def test_save_itinerary_storage_failure(monkeypatch):
    store = InMemoryItineraryStore()
    client = _client(store=store)
    itinerary = client.post("/api/generate-itinerary", json=_sample_payload()).json()

    def fail(*args, **kwargs):
        raise StorageError("disk full")

    monkeypatch.setattr(store, "create", fail)

    response = client.post("/api/save-itinerary", json={"itineraryData": itinerary})

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to save itinerary"}


def test_missing_itinerary_returns_404():
    client = _client()

    response = client.get("/api/itineraries/99")

    assert response.status_code == 404
    assert response.json() == {"message": "Itinerary not found"}


def test_destinations_endpoint():
    client = _client()

    destinations = client.get("/api/destinations").json()

    names = [d["name"] for d in destinations]
    assert names[:3] == ["Paris", "Tokyo", "New York"]
    assert "Varanasi" in names
    kochi = next(d for d in destinations if d["name"] == "Kochi")
    assert kochi["country"] == "India"
    assert kochi["localLanguage"] == "Malayalam"


def test_health_reports_provider_chains():
    client = _client()

    body = client.get("/api/health").json()

    assert body == {"status": "ok", "providers": {"attraction": [], "accommodation": [], "food": []}}


def test_get_destination_by_id():
    client = _client()

    response = client.get("/api/destinations/2")

    assert response.status_code == 200
    assert response.json()["name"] == "Tokyo"
    assert client.get("/api/destinations/999").status_code == 404


def test_generate_itinerary_fills_country_from_destination_directory():
    client = _client()
    payload = {**_sample_payload(), "destination": "jaipur", "totalBudget": 600}

    body = client.post("/api/generate-itinerary", json=payload).json()

    assert body["destination"] == "jaipur"
    assert body["country"] == "India"


def test_generate_itinerary_keeps_country_for_unlisted_city():
    client = _client()
    payload = {**_sample_payload(), "destination": "Nowhereville"}

    body = client.post("/api/generate-itinerary", json=payload).json()

    assert body["country"] is None
