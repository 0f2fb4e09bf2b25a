import pytest

from budget_trip.catalog import DEFAULT_CATALOG, StaticCatalog
from budget_trip.errors import CatalogError


def _minimal_default():
    return {
        "attractions": [{"name": "Old Town", "cost": 0, "duration": "1 hour"}],
        "accommodation": {
            "budget": [{"name": "Hostel", "costPerNight": 30, "rating": 3.0}],
            "mid-range": [{"name": "Inn", "costPerNight": 90, "rating": 4.0}],
            "luxury": [{"name": "Palace", "costPerNight": 300, "rating": 5.0}],
        },
        "food": {
            "budget": [{"name": "Stall", "cost": 5}],
            "local": [{"name": "Bistro", "cost": 15}],
            "fine": [{"name": "Salon", "cost": 60}],
        },
    }


def test_city_lookup_is_case_insensitive():
    upper = DEFAULT_CATALOG.attractions("PARIS")
    lower = DEFAULT_CATALOG.attractions("paris")

    assert [a.name for a in upper] == [a.name for a in lower]
    assert "Eiffel Tower" in {a.name for a in upper}
    assert DEFAULT_CATALOG.has_city("Tokyo")


def test_unknown_city_uses_default_entry():
    names = {a.name for a in DEFAULT_CATALOG.attractions("Nowhereville")}

    assert names == {"City Tour", "Local Museum", "Nature Walk"}
    assert not DEFAULT_CATALOG.has_city("Nowhereville")
    assert not DEFAULT_CATALOG.has_city("default")


def test_every_bucket_is_non_empty_for_known_and_unknown_cities():
    for city in DEFAULT_CATALOG.cities() + ["Nowhereville"]:
        assert DEFAULT_CATALOG.attractions(city)
        for tier in ("budget", "mid-range", "luxury"):
            assert DEFAULT_CATALOG.accommodations(city, tier)
        for tier in ("budget", "local", "fine"):
            assert DEFAULT_CATALOG.food_places(city, tier)


def test_lookups_return_fresh_models():
    first = DEFAULT_CATALOG.attractions("Paris")
    first[0].name = "Mutated"

    again = DEFAULT_CATALOG.attractions("Paris")

    assert "Mutated" not in {a.name for a in again}
    assert all(a.source == "catalog" for a in again)


def test_missing_tier_falls_back_to_city_mid_tier_then_default():
    entries = {
        "default": _minimal_default(),
        "Smallville": {
            "attractions": [{"name": "Water Tower"}],
            "accommodation": {"mid-range": [{"name": "Main Street Motel", "costPerNight": 70, "rating": 3.2}]},
        },
    }
    catalog = StaticCatalog(entries)

    assert [a.name for a in catalog.accommodations("Smallville", "luxury")] == ["Main Street Motel"]
    assert [f.name for f in catalog.food_places("Smallville", "fine")] == ["Salon"]


def test_candidates_dispatches_by_category():
    assert DEFAULT_CATALOG.candidates("attraction", "Tokyo")
    assert DEFAULT_CATALOG.candidates("accommodation", "Tokyo", "luxury")[0].cost_per_night > 0
    assert DEFAULT_CATALOG.candidates("food", "Tokyo", "budget")

    with pytest.raises(CatalogError):
        DEFAULT_CATALOG.candidates("nightclub", "Tokyo")


def test_catalog_without_default_entry_is_rejected():
    with pytest.raises(CatalogError):
        StaticCatalog({"Paris": _minimal_default()})


def test_catalog_with_empty_default_bucket_is_rejected():
    broken = _minimal_default()
    broken["food"]["fine"] = []

    with pytest.raises(CatalogError):
        StaticCatalog({"default": broken})


def test_catalog_with_malformed_record_is_rejected():
    broken = _minimal_default()
    broken["accommodation"]["luxury"] = [{"name": "Nameless rating", "costPerNight": 100, "rating": 9}]

    with pytest.raises(CatalogError):
        StaticCatalog({"default": broken})


def test_city_entry_without_tiered_blocks_is_accepted():
    catalog = StaticCatalog({"default": _minimal_default(), "Smallville": {"attractions": [{"name": "Water Tower"}]}})

    assert catalog.has_city("Smallville")
    assert [a.name for a in catalog.attractions("Smallville")] == ["Water Tower"]
    assert [h.name for h in catalog.accommodations("Smallville", "budget")] == ["Hostel"]
    assert [f.name for f in catalog.food_places("Smallville", "local")] == ["Bistro"]


@pytest.mark.parametrize(
    "city_entry",
    [
        {"attractions": {"name": "Water Tower"}},
        {"accommodation": [{"name": "Motel", "costPerNight": 50, "rating": 3.0}]},
        {"food": {"local": {"name": "Diner", "cost": 12}}},
    ],
)
def test_wrongly_shaped_blocks_raise_catalog_error(city_entry):
    with pytest.raises(CatalogError):
        StaticCatalog({"default": _minimal_default(), "Smallville": city_entry})
