from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

AccommodationTier = Literal["budget", "mid-range", "luxury"]
FoodTier = Literal["budget", "local", "fine"]
MealSlot = Literal["breakfast", "lunch", "dinner"]
Category = Literal["attraction", "accommodation", "food"]
ActivityInterest = Literal[
    "sightseeing",
    "cultural",
    "adventure",
    "relaxation",
    "shopping",
    "nightlife",
    # regional extensions
    "temple-visits",
    "heritage-sites",
    "ayurveda-wellness",
    "wildlife-safari",
    "backwaters",
    "street-food-tours",
    "handicrafts",
    "yoga-meditation",
    "hill-stations",
    "desert-exploration",
]

MEAL_SLOTS: tuple[MealSlot, ...] = ("breakfast", "lunch", "dinner")


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ------- Request models -------
class Preferences(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    accommodation_tier: AccommodationTier = Field(
        validation_alias=AliasChoices("accommodation", "accommodationTier", "accommodation_tier"),
        serialization_alias="accommodation",
    )
    food_tier: FoodTier = Field(
        validation_alias=AliasChoices("food", "foodTier", "food_tier"),
        serialization_alias="food",
    )
    activity_interests: List[ActivityInterest] = Field(
        min_length=1,
        validation_alias=AliasChoices("activities", "activityInterests", "activity_interests"),
        serialization_alias="activities",
    )

    @field_validator("activity_interests")
    @classmethod
    def _dedupe_interests(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class TripRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    destination: str = Field(min_length=3)
    country: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    days: int = Field(ge=1, le=30)
    total_budget: int = Field(
        ge=200,
        validation_alias=AliasChoices("totalBudget", "total_budget", "budget"),
    )
    preferences: Preferences

    @model_validator(mode="before")
    @classmethod
    def _days_from_dates(cls, data: Any) -> Any:
        # A full date range always wins over a caller-supplied day count.
        if not isinstance(data, dict):
            return data
        start = _coerce_date(_first_present(data, "startDate", "start_date"))
        end = _coerce_date(_first_present(data, "endDate", "end_date"))
        if start is None or end is None:
            return data
        data = dict(data)
        data["days"] = (end - start).days + 1
        return data

    @field_validator("country", mode="before")
    @classmethod
    def _blank_country(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _country_from_destination(self) -> "TripRequest":
        if not self.country and "," in self.destination:
            tail = self.destination.rsplit(",", 1)[1].strip()
            if tail:
                self.country = tail
        return self

    @property
    def city(self) -> str:
        """Destination up to the first comma; the key for provider and catalog lookups."""
        head = self.destination.split(",", 1)[0].strip()
        return head or self.destination


# ------- Budget models -------
class BudgetAllocation(BaseModel):
    accommodation: int
    food: int
    activities: int
    transportation: int

    @property
    def total(self) -> int:
        return self.accommodation + self.food + self.activities + self.transportation


class DailyAmounts(BaseModel):
    accommodation: int
    food: int
    activities: int
    transportation: int
    total: int


# ------- Candidate items -------
class Attraction(CamelModel):
    name: str
    description: str = ""
    cost: float = 0.0
    duration: str = "1-2 hours"
    image_url: Optional[str] = None
    map_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    source: Optional[str] = None


class Accommodation(CamelModel):
    name: str
    description: str = ""
    cost_per_night: float
    rating: float = Field(ge=1.0, le=5.0)
    image_url: Optional[str] = None
    map_url: Optional[str] = None
    source: Optional[str] = None


class FoodPlace(CamelModel):
    name: str
    description: str = ""
    cost: float
    rating: Optional[float] = None
    review_count: Optional[int] = None
    image_url: Optional[str] = None
    map_url: Optional[str] = None
    source: Optional[str] = None


CandidateItem = Union[Attraction, Accommodation, FoodPlace]


# ------- Response models -------
class Meal(FoodPlace):
    meal_slot: MealSlot


class Transportation(CamelModel):
    type: str
    description: str
    cost: int


class DayPlan(CamelModel):
    day_index: int = Field(ge=1)
    date: Optional[dt.date] = None
    title: str
    accommodation: Accommodation
    meals: List[Meal] = Field(min_length=3, max_length=3)
    activities: List[Attraction] = Field(min_length=2, max_length=2)
    transportation: Transportation
    daily_cost: int
    summary: str


class DateRange(CamelModel):
    start: Optional[date] = None
    end: Optional[date] = None


class GeneratedItinerary(CamelModel):
    destination: str
    country: Optional[str] = None
    days: int
    total_budget: int
    budget_allocation: BudgetAllocation
    preferences: Preferences
    date_range: DateRange = Field(default_factory=DateRange)
    itinerary_days: List[DayPlan] = Field(default_factory=list)

    @model_validator(mode="after")
    def _days_are_contiguous(self) -> "GeneratedItinerary":
        indices = [day.day_index for day in self.itinerary_days]
        if indices != list(range(1, self.days + 1)):
            raise ValueError(
                f"itineraryDays must cover days 1..{self.days} in order, got {indices}"
            )
        return self


# ------- Persistence models -------
class SaveItineraryRequest(CamelModel):
    itinerary_data: Optional[GeneratedItinerary] = None
    user_id: Optional[int] = None


class StoredItinerary(CamelModel):
    id: int
    user_id: Optional[int] = None
    destination: str
    country: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_budget: int
    days: int
    preferences: Preferences
    itinerary_data: GeneratedItinerary
    created_at: datetime


class Destination(CamelModel):
    id: int
    name: str
    country: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    region: Optional[str] = None
    best_time_to_visit: Optional[str] = None
    famous_for: Optional[str] = None
    local_language: Optional[str] = None


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def _coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None
