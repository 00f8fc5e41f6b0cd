"""
API routes.

Endpoints:
- GET  `/api/spots`: all tourist spots, highest rating first.
- GET  `/api/spots/map`: map markers + center for a set of spots.
- GET  `/api/users/{user_id}/preferences`: the user's preference record.
- GET  `/api/users/{user_id}/recommendations`: auto-select ranking with explanations.
- POST `/api/itineraries`: create an itinerary from a manual or auto selection.
- POST `/hooks/send-verification-email`: auth hook that sends the verification email.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from wanderer.config.settings import Settings, get_settings
from wanderer.core.errors import DataStoreError, PersistenceError, ValidationError, WebhookVerificationError
from wanderer.domain.models import (
    ItineraryCreateRequest,
    ItineraryCreateResponse,
    MapView,
    TouristSpot,
    UserPreferences,
)
from wanderer.email.sender import ResendClient, VerificationEmailService
from wanderer.itinerary.flow import validate_submission
from wanderer.itinerary.map_view import build_map_view
from wanderer.itinerary.persistence import create_itinerary, derive_categories
from wanderer.itinerary.selection import SelectionSet
from wanderer.recommender.select import rank_spots, select_top_k
from wanderer.store.base import DataStore
from wanderer.store.supabase import SupabaseStore

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _store() -> DataStore:
    return SupabaseStore(get_settings())


@lru_cache
def _email_service() -> VerificationEmailService:
    settings = get_settings()
    return VerificationEmailService(settings, ResendClient(settings))


def _cors_headers(settings: Settings, request: Request) -> dict[str, str]:
    """CORS headers for the hook; a configured origin list is matched against `Origin`."""
    headers = {"Access-Control-Allow-Headers": ", ".join(settings.cors.allow_headers)}
    origins = settings.cors.allow_origins
    if "*" in origins:
        headers["Access-Control-Allow-Origin"] = "*"
        return headers
    headers["Vary"] = "Origin"
    origin = request.headers.get("origin")
    if origin in origins:
        headers["Access-Control-Allow-Origin"] = origin
    return headers


def _fetch_spots() -> list[TouristSpot]:
    try:
        return _store().list_tourist_spots()
    except DataStoreError as e:
        raise HTTPException(status_code=502, detail={"code": "FETCH_FAILED", "message": str(e)}) from e


def _fetch_preferences(user_id: str) -> UserPreferences | None:
    # Missing preferences only degrade ranking to random order.
    try:
        return _store().get_user_preferences(user_id)
    except DataStoreError:
        return None


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/spots")
def get_spots() -> dict:
    """Return every tourist spot (read-only snapshot from the data store)."""
    spots = _fetch_spots()
    return {"count": len(spots), "spots": [s.model_dump(mode="json") for s in spots]}


@router.get("/api/spots/map", response_model=MapView)
def get_spots_map(ids: str | None = None) -> MapView:
    """Return map markers for the given comma-separated spot IDs (all spots when omitted)."""
    spots = _fetch_spots()
    if ids:
        selection = SelectionSet(s.strip() for s in ids.split(",") if s.strip())
        spots = selection.ordered_view(spots)
    return build_map_view(spots, default_center=get_settings().map.default_center)


@router.get("/api/users/{user_id}/preferences")
def get_user_preferences(user_id: str) -> dict:
    try:
        prefs = _store().get_user_preferences(user_id)
    except DataStoreError as e:
        raise HTTPException(status_code=502, detail={"code": "FETCH_FAILED", "message": str(e)}) from e
    return {"user_id": user_id, "preferences": prefs.model_dump(mode="json") if prefs else None}


@router.get("/api/users/{user_id}/recommendations")
def get_recommendations(user_id: str, limit: int | None = None) -> dict:
    """Return the auto-select ranking for a user (top entries, with per-signal explanations)."""
    settings = get_settings()
    k = max(1, min(50, int(limit))) if limit is not None else settings.selection.auto_select_count
    preferences = _fetch_preferences(user_id)
    spots = _fetch_spots()
    ranked = rank_spots(spots, preferences)[:k]
    return {
        "user_id": user_id,
        "has_preferences": preferences is not None and not preferences.is_empty(),
        "selected_ids": [spot.id for spot, _ in ranked],
        "results": [score.model_dump(mode="json") for _, score in ranked],
    }


@router.post("/api/itineraries", response_model=ItineraryCreateResponse, status_code=201)
def post_itinerary(request: ItineraryCreateRequest) -> ItineraryCreateResponse:
    """Create an itinerary; validation happens before any data-store call."""
    settings = get_settings()
    try:
        if not request.name.strip():
            raise ValidationError("Please enter an itinerary name")
        if not request.spot_ids and not request.auto_select:
            raise ValidationError("Please select at least one spot")

        spots = _fetch_spots()
        selection = SelectionSet(request.spot_ids)
        if request.auto_select:
            preferences = _fetch_preferences(request.user_id)
            selection.replace_all(
                select_top_k(spots, preferences, k=settings.selection.auto_select_count)
            )
        selected = selection.ordered_view(spots)
        validate_submission(request.name, selected)

        itinerary_id = create_itinerary(_store(), request.user_id, request.name, selected)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except PersistenceError as e:
        raise HTTPException(
            status_code=502,
            detail={"code": "PERSISTENCE_FAILED", "message": str(e)},
        ) from e

    return ItineraryCreateResponse(
        id=itinerary_id,
        name=request.name,
        spot_ids=[s.id for s in selected],
        selected_categories=derive_categories(selected),
    )


@router.options("/hooks/send-verification-email")
def options_send_verification_email(request: Request) -> Response:
    return Response(status_code=200, headers=_cors_headers(get_settings(), request))


@router.post("/hooks/send-verification-email")
async def post_send_verification_email(request: Request) -> JSONResponse:
    """Render and send the verification email for an auth hook call."""
    cors = _cors_headers(get_settings(), request)
    try:
        payload = (await request.body()).decode("utf-8")
        result = await run_in_threadpool(_email_service().handle, payload, dict(request.headers))
    except WebhookVerificationError as e:
        return JSONResponse(status_code=401, content={"error": str(e)}, headers=cors)
    except Exception as e:
        logger.error("Error sending verification email: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)}, headers=cors)
    return JSONResponse(status_code=200, content=result, headers=cors)
