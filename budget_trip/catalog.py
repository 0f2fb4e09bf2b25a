"""Hand-authored fallback data used when every provider comes back empty."""
from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from budget_trip.errors import CatalogError
from budget_trip.schemas import Accommodation, Attraction, CandidateItem, FoodPlace

DEFAULT_KEY = "default"
ACCOMMODATION_TIERS = ("budget", "mid-range", "luxury")
FOOD_TIERS = ("budget", "local", "fine")

_FALLBACK_TIER = {"accommodation": "mid-range", "food": "local"}

_UNSPLASH = "https://images.unsplash.com/"

_CATALOG_DATA: Dict[str, Dict[str, Any]] = {
    "Paris": {
        "attractions": [
            {"name": "Eiffel Tower", "description": "Iconic iron lattice tower", "cost": 25, "duration": "2-3 hours", "imageUrl": _UNSPLASH + "photo-1543349689-9a4d426bee8e"},
            {"name": "Louvre Museum", "description": "World's largest art museum", "cost": 15, "duration": "3-4 hours", "imageUrl": _UNSPLASH + "photo-1499856871958-5b9357976b82"},
            {"name": "Notre-Dame Cathedral", "description": "Medieval Catholic cathedral", "cost": 0, "duration": "1-2 hours", "imageUrl": _UNSPLASH + "photo-1478391679764-b2d8b3cd1e94"},
            {"name": "Seine River Cruise", "description": "Scenic boat tour of Paris", "cost": 35, "duration": "1 hour", "imageUrl": _UNSPLASH + "photo-1583265627959-fb7042f5133b"},
            {"name": "Montmartre", "description": "Historic arts district with stunning views", "cost": 0, "duration": "2-3 hours", "imageUrl": _UNSPLASH + "photo-1551634979-2b11f8c218da"},
            {"name": "Champs-Élysées", "description": "Famous avenue with luxury shopping", "cost": 0, "duration": "2 hours", "imageUrl": _UNSPLASH + "photo-1520939817895-060bdaf4fe1b"},
        ],
        "accommodation": {
            "budget": [{"name": "Le Budget Hostel", "description": "Affordable hostel in central Paris", "costPerNight": 60, "rating": 3.5, "imageUrl": _UNSPLASH + "photo-1590856029826-c7a73142bbf1"}],
            "mid-range": [{"name": "Hotel Parisien", "description": "Comfortable hotel in Montmartre district", "costPerNight": 135, "rating": 4.0, "imageUrl": _UNSPLASH + "photo-1566073771259-6a8506099945"}],
            "luxury": [{"name": "Grand Palais Hotel", "description": "Luxury 5-star hotel near Champs-Élysées", "costPerNight": 350, "rating": 4.8, "imageUrl": _UNSPLASH + "photo-1551882547-ff40c63fe5fa"}],
        },
        "food": {
            "budget": [
                {"name": "Le Petit Café", "description": "Simple French breakfast", "cost": 10},
                {"name": "Boulangerie Moderne", "description": "Fresh baguettes and pastries", "cost": 8},
                {"name": "Crêpe Stand", "description": "Street food crêpes", "cost": 6},
            ],
            "local": [
                {"name": "Café de Paris", "description": "Traditional French breakfast", "cost": 15},
                {"name": "Le Petit Bistro", "description": "Local cuisine lunch", "cost": 25},
                {"name": "Chez Marie", "description": "Traditional dinner", "cost": 35},
            ],
            "fine": [
                {"name": "L'Authentique", "description": "Gourmet French breakfast", "cost": 25},
                {"name": "Bistro Élégant", "description": "Fine dining lunch", "cost": 45},
                {"name": "Le Grand Restaurant", "description": "Michelin-starred dinner", "cost": 120},
            ],
        },
    },
    "Tokyo": {
        "attractions": [
            {"name": "Shibuya Crossing", "description": "Famous bustling intersection", "cost": 0, "duration": "1 hour", "imageUrl": _UNSPLASH + "photo-1542051841857-5f90071e7989"},
            {"name": "Tokyo Skytree", "description": "Tallest tower in Japan", "cost": 20, "duration": "2 hours", "imageUrl": _UNSPLASH + "photo-1536098561742-ca998e48cbcc"},
            {"name": "Meiji Shrine", "description": "Shinto shrine dedicated to Emperor Meiji", "cost": 0, "duration": "1-2 hours", "imageUrl": _UNSPLASH + "photo-1583889659384-ac0295c95f40"},
            {"name": "Sensō-ji Temple", "description": "Ancient Buddhist temple", "cost": 0, "duration": "1 hour", "imageUrl": _UNSPLASH + "photo-1570459027562-4a916cc6b0a6"},
        ],
        "accommodation": {
            "budget": [{"name": "Tokyo Backpackers", "description": "Clean and modern hostel", "costPerNight": 45, "rating": 3.7, "imageUrl": _UNSPLASH + "photo-1598928636135-d146006ff4be"}],
            "mid-range": [{"name": "Shinjuku City Hotel", "description": "Convenient location near train station", "costPerNight": 125, "rating": 4.1, "imageUrl": _UNSPLASH + "photo-1621293954908-907159247fc8"}],
            "luxury": [{"name": "Imperial Tokyo", "description": "Elegant 5-star accommodation", "costPerNight": 290, "rating": 4.7, "imageUrl": _UNSPLASH + "photo-1445019980597-93fa8acb246c"}],
        },
        "food": {
            "budget": [
                {"name": "Yoshinoya", "description": "Fast-food beef bowls", "cost": 7},
                {"name": "Convenience Store Bento", "description": "Pre-made meals", "cost": 5},
                {"name": "Ramen Stand", "description": "Quick noodle soup", "cost": 8},
            ],
            "local": [
                {"name": "Sushi-Ya", "description": "Fresh local sushi", "cost": 30},
                {"name": "Izakaya Tanuki", "description": "Japanese pub food", "cost": 25},
                {"name": "Tempura House", "description": "Traditional tempura dishes", "cost": 20},
            ],
            "fine": [
                {"name": "Ginza Kaiseki", "description": "Multi-course traditional meal", "cost": 80},
                {"name": "Tokyo Teppanyaki", "description": "Premium grilled dishes", "cost": 60},
                {"name": "Sushi Omakase", "description": "Chef's selection sushi experience", "cost": 100},
            ],
        },
    },
    "Delhi": {
        "attractions": [
            {"name": "Red Fort", "description": "Mughal fortress and UNESCO World Heritage Site", "cost": 7, "duration": "2-3 hours", "tags": ["heritage-sites"]},
            {"name": "Qutub Minar", "description": "Soaring 13th-century minaret", "cost": 7, "duration": "1-2 hours", "tags": ["heritage-sites"]},
            {"name": "Humayun's Tomb", "description": "Garden tomb that inspired the Taj Mahal", "cost": 7, "duration": "1-2 hours", "tags": ["heritage-sites"]},
            {"name": "Akshardham Temple", "description": "Vast contemporary Hindu temple complex", "cost": 0, "duration": "2-3 hours", "tags": ["temple-visits"]},
            {"name": "Chandni Chowk Food Walk", "description": "Street food trail through Old Delhi", "cost": 10, "duration": "2 hours", "tags": ["street-food-tours"]},
        ],
        "accommodation": {
            "budget": [{"name": "Paharganj Backpackers", "description": "Guest house near New Delhi station", "costPerNight": 21, "rating": 3.6}],
            "mid-range": [{"name": "Connaught Residency", "description": "Business hotel in central Delhi", "costPerNight": 75, "rating": 4.0}],
            "luxury": [{"name": "Lutyens Palace Hotel", "description": "Heritage luxury hotel in New Delhi", "costPerNight": 180, "rating": 4.7}],
        },
        "food": {
            "budget": [
                {"name": "Paratha Wali Gali", "description": "Stuffed flatbreads in Old Delhi", "cost": 3},
                {"name": "Chole Bhature Corner", "description": "Classic Punjabi street breakfast", "cost": 2},
                {"name": "Dhaba on the Ring Road", "description": "Roadside North Indian meals", "cost": 4},
            ],
            "local": [
                {"name": "Karim's", "description": "Mughlai specialities since 1913", "cost": 10},
                {"name": "Saravana Bhavan", "description": "South Indian vegetarian thalis", "cost": 8},
                {"name": "Punjabi Rasoi", "description": "Home-style Punjabi dinner", "cost": 11},
            ],
            "fine": [
                {"name": "Indian Accent", "description": "Inventive modern Indian tasting menu", "cost": 60},
                {"name": "Bukhara", "description": "Tandoor cooking in a rustic setting", "cost": 45},
                {"name": "Dum Pukht", "description": "Slow-cooked Awadhi cuisine", "cost": 50},
            ],
        },
    },
    "Jaipur": {
        "attractions": [
            {"name": "Amber Fort", "description": "Hilltop fort of red sandstone and marble", "cost": 7, "duration": "2-3 hours", "tags": ["heritage-sites"]},
            {"name": "Hawa Mahal", "description": "Palace of Winds with 953 latticed windows", "cost": 3, "duration": "1 hour", "tags": ["heritage-sites"]},
            {"name": "City Palace", "description": "Royal residence and museum", "cost": 8, "duration": "2 hours", "tags": ["cultural"]},
            {"name": "Johari Bazaar", "description": "Jewellery and textile market", "cost": 0, "duration": "2 hours", "tags": ["shopping", "handicrafts"]},
        ],
        "accommodation": {
            "budget": [{"name": "Pink City Guest House", "description": "Family-run guest house in the old city", "costPerNight": 21, "rating": 3.7}],
            "mid-range": [{"name": "Haveli Rajputana", "description": "Restored haveli with courtyard rooms", "costPerNight": 70, "rating": 4.2}],
            "luxury": [{"name": "Rambagh Heritage Palace", "description": "Former royal residence turned hotel", "costPerNight": 180, "rating": 4.8}],
        },
        "food": {
            "budget": [
                {"name": "Rawat Mishtan Bhandar", "description": "Famous pyaaz kachori", "cost": 2},
                {"name": "Lassiwala", "description": "Thick lassi in clay cups", "cost": 1},
                {"name": "Masala Chowk", "description": "Open-air street food court", "cost": 4},
            ],
            "local": [
                {"name": "Laxmi Misthan Bhandar", "description": "Rajasthani thali", "cost": 9},
                {"name": "Chokhi Dhani", "description": "Village-style Rajasthani dinner", "cost": 12},
                {"name": "Peacock Rooftop", "description": "Rooftop dining with fort views", "cost": 10},
            ],
            "fine": [
                {"name": "Suvarna Mahal", "description": "Royal dining hall", "cost": 55},
                {"name": "Baradari", "description": "Contemporary dining in the City Palace", "cost": 35},
                {"name": "1135 AD", "description": "Regal dining inside Amber Fort", "cost": 45},
            ],
        },
    },
    DEFAULT_KEY: {
        "attractions": [
            {"name": "City Tour", "description": "Explore the city highlights", "cost": 30, "duration": "3 hours", "imageUrl": _UNSPLASH + "photo-1476304884326-cd2c88572c5f"},
            {"name": "Local Museum", "description": "Learn about the local history", "cost": 15, "duration": "2 hours", "imageUrl": _UNSPLASH + "photo-1553701879-4aa576804f65"},
            {"name": "Nature Walk", "description": "Enjoy the natural surroundings", "cost": 0, "duration": "2 hours", "imageUrl": _UNSPLASH + "photo-1513836279014-a89f7a76ae86"},
        ],
        "accommodation": {
            "budget": [{"name": "City Hostel", "description": "Budget-friendly option", "costPerNight": 40, "rating": 3.5, "imageUrl": _UNSPLASH + "photo-1555854877-bab0e564b8d5"}],
            "mid-range": [{"name": "Comfort Inn", "description": "Mid-range hotel with good amenities", "costPerNight": 100, "rating": 4.0, "imageUrl": _UNSPLASH + "photo-1537833633404-f09d5f12f41a"}],
            "luxury": [{"name": "Grand Plaza Hotel", "description": "Luxury accommodation", "costPerNight": 250, "rating": 4.5, "imageUrl": _UNSPLASH + "photo-1551882547-ff40c63fe5fa"}],
        },
        "food": {
            "budget": [
                {"name": "City Cafe", "description": "Quick breakfast options", "cost": 8},
                {"name": "Corner Deli", "description": "Sandwiches and salads", "cost": 10},
                {"name": "Street Food Stand", "description": "Local fast food", "cost": 7},
            ],
            "local": [
                {"name": "Local Breakfast Spot", "description": "Regional morning dishes", "cost": 12},
                {"name": "Traditional Lunch", "description": "Authentic midday meal", "cost": 18},
                {"name": "Neighborhood Restaurant", "description": "Evening local specialties", "cost": 25},
            ],
            "fine": [
                {"name": "Gourmet Café", "description": "Upscale breakfast", "cost": 20},
                {"name": "Fine Dining Lunch", "description": "Elegant midday meal", "cost": 40},
                {"name": "Premium Restaurant", "description": "Sophisticated dinner experience", "cost": 75},
            ],
        },
    },
}


class StaticCatalog:
    """Read-only city → category → tier lookup table.

    City names are matched case-insensitively and unknown cities use the
    ``default`` entry. Every lookup returns freshly built models so callers
    can never mutate the underlying records.
    """

    def __init__(self, entries: Mapping[str, Mapping[str, Any]]):
        frozen: Dict[str, Mapping[str, Any]] = {}
        for city, entry in entries.items():
            frozen[city.strip().lower()] = MappingProxyType(copy.deepcopy(dict(entry)))
        self._entries: Mapping[str, Mapping[str, Any]] = MappingProxyType(frozen)
        self.validate()

    def cities(self) -> List[str]:
        return sorted(key for key in self._entries if key != DEFAULT_KEY)

    def has_city(self, city: str) -> bool:
        key = (city or "").strip().lower()
        return key != DEFAULT_KEY and key in self._entries

    def attractions(self, city: str) -> List[Attraction]:
        records = self._entry(city).get("attractions") or self._entries[DEFAULT_KEY]["attractions"]
        return [Attraction.model_validate({**record, "source": "catalog"}) for record in records]

    def accommodations(self, city: str, tier: str) -> List[Accommodation]:
        records = self._tiered(city, "accommodation", tier)
        return [Accommodation.model_validate({**record, "source": "catalog"}) for record in records]

    def food_places(self, city: str, tier: str) -> List[FoodPlace]:
        records = self._tiered(city, "food", tier)
        return [FoodPlace.model_validate({**record, "source": "catalog"}) for record in records]

    def candidates(self, category: str, city: str, tier: str | None = None) -> List[CandidateItem]:
        if category == "attraction":
            return list(self.attractions(city))
        if category == "accommodation":
            return list(self.accommodations(city, tier or _FALLBACK_TIER["accommodation"]))
        if category == "food":
            return list(self.food_places(city, tier or _FALLBACK_TIER["food"]))
        raise CatalogError(f"Unknown catalog category {category!r}")

    def validate(self) -> None:
        """Raise ``CatalogError`` unless every record parses and ``default`` covers every bucket."""
        default = self._entries.get(DEFAULT_KEY)
        if default is None:
            raise CatalogError("Static catalog is missing the 'default' entry")
        models = {"attractions": Attraction, "accommodation": Accommodation, "food": FoodPlace}
        for city, entry in self._entries.items():
            for key, model in models.items():
                for record in _records(city, key, entry.get(key)):
                    try:
                        model.model_validate(record)
                    except ValidationError as exc:
                        raise CatalogError(f"Malformed {key} record for {city!r}: {exc}") from exc

        if not default.get("attractions"):
            raise CatalogError("Static catalog 'default' entry has no attractions")
        for category, tiers in (("accommodation", ACCOMMODATION_TIERS), ("food", FOOD_TIERS)):
            buckets = default.get(category) or {}
            for tier in tiers:
                if not buckets.get(tier):
                    raise CatalogError(f"Static catalog 'default' entry has no {category} for tier {tier!r}")

    def _entry(self, city: str) -> Mapping[str, Any]:
        key = (city or "").strip().lower()
        return self._entries.get(key) or self._entries[DEFAULT_KEY]

    def _tiered(self, city: str, category: str, tier: str) -> List[Dict[str, Any]]:
        fallback_tier = _FALLBACK_TIER[category]
        for entry in (self._entry(city), self._entries[DEFAULT_KEY]):
            buckets = entry.get(category) or {}
            records = buckets.get(tier) or buckets.get(fallback_tier)
            if records:
                return list(records)
        raise CatalogError(f"No {category} records for tier {tier!r}")


def _records(city: str, key: str, block: Any) -> List[Any]:
    # Attractions are a flat list; lodging and food are keyed by tier.
    if block is None:
        return []
    if key == "attractions":
        if not isinstance(block, (list, tuple)):
            raise CatalogError(f"'{key}' for {city!r} must be a list, got {type(block).__name__}")
        return list(block)
    if not isinstance(block, Mapping):
        raise CatalogError(f"'{key}' for {city!r} must map tiers to records, got {type(block).__name__}")
    records: List[Any] = []
    for tier, bucket in block.items():
        if not isinstance(bucket, (list, tuple)):
            raise CatalogError(f"'{key}' tier {tier!r} for {city!r} must be a list")
        records.extend(bucket)
    return records


DEFAULT_CATALOG = StaticCatalog(_CATALOG_DATA)
