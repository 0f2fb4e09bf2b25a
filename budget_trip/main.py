from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from budget_trip.config import Settings
from budget_trip.errors import GenerationTimeout, StorageError
from budget_trip.logs import get_logger
from budget_trip.planner import generate_itinerary
from budget_trip.providers.registry import build_default_chains
from budget_trip.resolver import FallbackResolver
from budget_trip.schemas import SaveItineraryRequest, TripRequest
from budget_trip.storage import DestinationDirectory, InMemoryItineraryStore, ItineraryStore

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    resolver: Optional[FallbackResolver] = None,
    store: Optional[ItineraryStore] = None,
    directory: Optional[DestinationDirectory] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if resolver is None:
        resolver = FallbackResolver(
            build_default_chains(settings),
            rng=random.Random(settings.random_seed),
            provider_timeout=settings.provider_timeout,
        )

    app = FastAPI(title="Budget Trip Planner API")
    app.state.settings = settings
    app.state.resolver = resolver
    app.state.store = store if store is not None else InMemoryItineraryStore()
    app.state.directory = directory or DestinationDirectory()

    # Local UIs (Vite dev server, static builds) call the API directly.
    # TRIP_PLANNER_ALLOWED_ORIGINS narrows this when needed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _validation_response(exc.errors())

    @app.post("/api/generate-itinerary")
    async def api_generate_itinerary(payload: Dict[str, Any] = Body(...)):
        """Validate a trip request and return a freshly generated itinerary."""
        try:
            trip = TripRequest.model_validate(payload)
        except ValidationError as exc:
            return _validation_response(exc.errors())

        if trip.country is None:
            known = app.state.directory.find_by_name(trip.city)
            if known is not None:
                trip = trip.model_copy(update={"country": known.country})

        try:
            itinerary = await generate_itinerary(
                trip,
                app.state.resolver,
                timeout=settings.generation_timeout,
                parallel_days=settings.parallel_days,
            )
        except GenerationTimeout:
            return _error(504, "Itinerary generation timed out")
        except Exception:
            logger.exception("Error generating itinerary for %s", trip.destination)
            return _error(500, "Failed to generate itinerary")
        return itinerary.model_dump(mode="json", by_alias=True)

    @app.post("/api/save-itinerary", status_code=201)
    async def api_save_itinerary(payload: Dict[str, Any] = Body(...)):
        if not payload.get("itineraryData") and not payload.get("itinerary_data"):
            return _error(400, "Itinerary data is required")
        try:
            request = SaveItineraryRequest.model_validate(payload)
        except ValidationError as exc:
            return _validation_response(exc.errors())

        try:
            record = app.state.store.create(request.itinerary_data, user_id=request.user_id)
        except StorageError:
            logger.exception("Error saving itinerary")
            return _error(500, "Failed to save itinerary")
        return record.model_dump(mode="json", by_alias=True)

    @app.get("/api/itineraries")
    async def api_list_itineraries(userId: Optional[int] = None) -> List[Dict[str, Any]]:
        records = app.state.store.list(user_id=userId)
        return [record.model_dump(mode="json", by_alias=True) for record in records]

    @app.get("/api/itineraries/{itinerary_id}")
    async def api_get_itinerary(itinerary_id: int):
        record = app.state.store.get(itinerary_id)
        if record is None:
            return _error(404, "Itinerary not found")
        return record.model_dump(mode="json", by_alias=True)

    @app.get("/api/destinations")
    async def api_destinations() -> List[Dict[str, Any]]:
        return [d.model_dump(mode="json", by_alias=True) for d in app.state.directory.list()]

    @app.get("/api/destinations/{destination_id}")
    async def api_get_destination(destination_id: int):
        destination = app.state.directory.get(destination_id)
        if destination is None:
            return _error(404, "Destination not found")
        return destination.model_dump(mode="json", by_alias=True)

    @app.get("/api/health")
    async def api_health() -> Dict[str, Any]:
        return {"status": "ok", "providers": app.state.resolver.provider_names()}

    return app


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **extra})


def _validation_response(errors: List[Dict[str, Any]]) -> JSONResponse:
    """Report the first violated field; the full list rides along under ``errors``."""
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in errors
    ]
    first = details[0] if details else {"field": "", "message": "Invalid request"}
    label = first["field"] or "request"
    return _error(400, f"Validation error: {first['message']} at \"{label}\"", field=first["field"], errors=details)


app = create_app()
