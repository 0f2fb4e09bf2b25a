"""In-memory persistence for saved itineraries and the destination directory."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from budget_trip.errors import StorageError
from budget_trip.logs import get_logger
from budget_trip.schemas import Destination, GeneratedItinerary, StoredItinerary

logger = get_logger(__name__)


class ItineraryStore(Protocol):
    def create(self, itinerary: GeneratedItinerary, user_id: Optional[int] = None) -> StoredItinerary:
        ...

    def list(self, user_id: Optional[int] = None) -> List[StoredItinerary]:
        ...

    def get(self, itinerary_id: int) -> Optional[StoredItinerary]:
        ...

    def update(self, itinerary_id: int, **fields: Any) -> Optional[StoredItinerary]:
        ...

    def delete(self, itinerary_id: int) -> bool:
        ...


class InMemoryItineraryStore:
    """Process-local store; ids start at 1 and are never reused."""

    def __init__(self) -> None:
        self._records: Dict[int, StoredItinerary] = {}
        self._next_id = 1

    def create(self, itinerary: GeneratedItinerary, user_id: Optional[int] = None) -> StoredItinerary:
        try:
            record = StoredItinerary(
                id=self._next_id,
                user_id=user_id,
                destination=itinerary.destination,
                country=itinerary.country,
                start_date=itinerary.date_range.start,
                end_date=itinerary.date_range.end,
                total_budget=itinerary.total_budget,
                days=itinerary.days,
                preferences=itinerary.preferences,
                itinerary_data=itinerary,
                created_at=datetime.now(timezone.utc),
            )
        except ValidationError as exc:
            raise StorageError(f"Could not build itinerary record: {exc}") from exc

        self._records[record.id] = record
        self._next_id += 1
        logger.info("Saved itinerary %d for %s", record.id, record.destination)
        return record

    def list(self, user_id: Optional[int] = None) -> List[StoredItinerary]:
        records = list(self._records.values())
        if user_id is not None:
            records = [r for r in records if r.user_id == user_id]
        return records

    def get(self, itinerary_id: int) -> Optional[StoredItinerary]:
        return self._records.get(itinerary_id)

    def update(self, itinerary_id: int, **fields: Any) -> Optional[StoredItinerary]:
        existing = self._records.get(itinerary_id)
        if existing is None:
            return None
        fields.pop("id", None)
        try:
            updated = StoredItinerary.model_validate({**existing.model_dump(), **fields})
        except ValidationError as exc:
            raise StorageError(f"Invalid update for itinerary {itinerary_id}: {exc}") from exc
        self._records[itinerary_id] = updated
        return updated

    def delete(self, itinerary_id: int) -> bool:
        return self._records.pop(itinerary_id, None) is not None


_POPULAR_DESTINATIONS: List[Dict[str, Any]] = [
    {"name": "Paris", "country": "France", "description": "The City of Light",
     "imageUrl": "https://images.unsplash.com/photo-1502602898657-3e91760cbb34"},
    {"name": "Tokyo", "country": "Japan", "description": "Modern meets traditional",
     "imageUrl": "https://images.unsplash.com/photo-1513407030348-c983a97b98d8"},
    {"name": "New York", "country": "USA", "description": "The Big Apple",
     "imageUrl": "https://images.unsplash.com/photo-1496442226666-8d4d0e62e6e9"},
    {"name": "Rome", "country": "Italy", "description": "The Eternal City",
     "imageUrl": "https://images.unsplash.com/photo-1552832230-c0197dd311b5"},
    {"name": "Barcelona", "country": "Spain", "description": "Catalonian gem",
     "imageUrl": "https://images.unsplash.com/photo-1539037116277-4db20889f2d4"},
    {"name": "Bangkok", "country": "Thailand", "description": "City of Angels",
     "imageUrl": "https://images.unsplash.com/photo-1508009603885-50cf7c8dd0d5"},
    {"name": "Bali", "country": "Indonesia", "description": "Island of the Gods",
     "imageUrl": "https://images.unsplash.com/photo-1536599424071-0b215a388ba7"},
]

_INDIAN_DESTINATIONS: List[Dict[str, Any]] = [
    {"name": "Delhi", "description": "Historic capital with Mughal heritage",
     "imageUrl": "https://images.unsplash.com/photo-1587474260584-136574528ed5",
     "region": "Northern India", "bestTimeToVisit": "October to March",
     "famousFor": "Red Fort, India Gate, Qutub Minar, street food", "localLanguage": "Hindi, Urdu"},
    {"name": "Mumbai", "description": "Financial capital and home of Bollywood",
     "imageUrl": "https://images.unsplash.com/photo-1529253355930-ddbe423a2ac7",
     "region": "Western India", "bestTimeToVisit": "November to February",
     "famousFor": "Gateway of India, Marine Drive, street food", "localLanguage": "Marathi, Hindi"},
    {"name": "Jaipur", "description": "The Pink City of palaces and forts",
     "imageUrl": "https://images.unsplash.com/photo-1599661046289-e31897846e41",
     "region": "Northern India", "bestTimeToVisit": "October to March",
     "famousFor": "Hawa Mahal, City Palace, Amber Fort, textiles", "localLanguage": "Hindi, Rajasthani"},
    {"name": "Agra", "description": "Home of the Taj Mahal",
     "imageUrl": "https://images.unsplash.com/photo-1564507592333-c60657eea523",
     "region": "Northern India", "bestTimeToVisit": "October to March",
     "famousFor": "Taj Mahal, Agra Fort, Fatehpur Sikri", "localLanguage": "Hindi, Urdu"},
    {"name": "Varanasi", "description": "Spiritual city on the banks of the Ganges",
     "imageUrl": "https://images.unsplash.com/photo-1561361058-c24cecde1159",
     "region": "Northern India", "bestTimeToVisit": "October to March",
     "famousFor": "Ghats, Ganga Aarti, temples, silk weaving", "localLanguage": "Hindi, Bhojpuri"},
    {"name": "Goa", "description": "Beaches and Portuguese heritage",
     "imageUrl": "https://images.unsplash.com/photo-1512343879784-a960bf40e7f2",
     "region": "Western India", "bestTimeToVisit": "November to February",
     "famousFor": "Beaches, nightlife, seafood", "localLanguage": "Konkani, Marathi"},
    {"name": "Kolkata", "description": "City of Joy",
     "imageUrl": "https://images.unsplash.com/photo-1558431382-27e303142255",
     "region": "Eastern India", "bestTimeToVisit": "October to March",
     "famousFor": "Victoria Memorial, Howrah Bridge, sweets", "localLanguage": "Bengali"},
    {"name": "Udaipur", "description": "City of Lakes",
     "imageUrl": "https://images.unsplash.com/photo-1602642977157-f0d1ce405303",
     "region": "Northern India", "bestTimeToVisit": "October to March",
     "famousFor": "Lake Palace, City Palace", "localLanguage": "Hindi, Rajasthani"},
    {"name": "Amritsar", "description": "Home of the Golden Temple",
     "imageUrl": "https://images.unsplash.com/photo-1590090232385-005bbe46273c",
     "region": "Northern India", "bestTimeToVisit": "October to March",
     "famousFor": "Golden Temple, Wagah Border, Punjabi cuisine", "localLanguage": "Punjabi"},
    {"name": "Darjeeling", "description": "Tea gardens and Himalayan views",
     "imageUrl": "https://images.unsplash.com/photo-1606117331085-5760e3b58520",
     "region": "Eastern India", "bestTimeToVisit": "April to June, September to November",
     "famousFor": "Tea gardens, toy train, Kanchenjunga views", "localLanguage": "Nepali, Bengali"},
    {"name": "Rishikesh", "description": "Yoga town on the Ganges",
     "imageUrl": "https://images.unsplash.com/photo-1588970698009-c9b338ac00ea",
     "region": "Northern India", "bestTimeToVisit": "September to April",
     "famousFor": "Yoga, meditation, river rafting", "localLanguage": "Hindi, Garhwali"},
    {"name": "Chennai", "description": "Cultural capital of the south",
     "imageUrl": "https://images.unsplash.com/photo-1582510003544-4d00b7f74220",
     "region": "Southern India", "bestTimeToVisit": "November to February",
     "famousFor": "Marina Beach, temples, Carnatic music", "localLanguage": "Tamil"},
    {"name": "Kochi", "description": "Historic port city",
     "imageUrl": "https://images.unsplash.com/photo-1590123292784-ea000b38b3be",
     "region": "Southern India", "bestTimeToVisit": "October to March",
     "famousFor": "Chinese fishing nets, Fort Kochi, spice markets", "localLanguage": "Malayalam"},
]


class DestinationDirectory:
    """Read-only list of suggested destinations, ids assigned in seed order."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        if records is None:
            records = _POPULAR_DESTINATIONS + [{"country": "India", **r} for r in _INDIAN_DESTINATIONS]
        self._destinations = [
            Destination.model_validate({**record, "id": index}) for index, record in enumerate(records, start=1)
        ]

    def list(self) -> List[Destination]:
        return list(self._destinations)

    def get(self, destination_id: int) -> Optional[Destination]:
        for destination in self._destinations:
            if destination.id == destination_id:
                return destination
        return None

    def find_by_name(self, name: str) -> Optional[Destination]:
        needle = name.strip().lower()
        for destination in self._destinations:
            if destination.name.lower() == needle:
                return destination
        return None
