class TripPlannerError(Exception):
    """Base class for planner failures."""


class ProviderError(TripPlannerError):
    """An external data provider failed (network, quota, malformed payload)."""


class ProviderUnavailable(ProviderError):
    """A provider is not configured, usually because its API key is missing."""


class CatalogError(TripPlannerError):
    """The static catalog cannot serve a request; this is a programming error."""


class GenerationTimeout(TripPlannerError):
    """Itinerary generation exceeded its overall time budget."""


class StorageError(TripPlannerError):
    """The itinerary store failed to persist or read a record."""
