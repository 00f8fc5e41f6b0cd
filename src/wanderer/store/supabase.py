"""
Data-store client (PostgREST over HTTP).

Talks to the hosted backend's REST endpoint:
- `tourist_spots`: read all rows ordered by rating (descending)
- `profiles`: read one user's `user_preferences` (falling back to `onboarding_answers`)
- `itineraries`: insert one row

Transport and HTTP failures are wrapped in `DataStoreError` so callers handle a single
error type.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from wanderer.config.settings import Settings
from wanderer.core.errors import DataStoreError
from wanderer.core.http import get_json, post_json
from wanderer.domain.models import TouristSpot, UserPreferences

logger = logging.getLogger(__name__)

_SPOTS_ADAPTER = TypeAdapter(list[TouristSpot])


class SupabaseStore:
    """Reads spots/preferences and inserts itineraries via the PostgREST API."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _table_url(self, table: str) -> str:
        store = self._settings.store
        return f"{store.url.rstrip('/')}{store.rest_path}/{table}"

    def _headers(self) -> dict[str, str]:
        key = self._settings.store.key
        if not key:
            return {}
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    def list_tourist_spots(self) -> list[TouristSpot]:
        """Return every tourist spot, highest rating first."""
        url = self._table_url(self._settings.store.tables.tourist_spots)
        try:
            rows = get_json(
                url,
                params={"select": "*", "order": "rating.desc"},
                headers=self._headers(),
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
            spots = _SPOTS_ADAPTER.validate_python(rows or [])
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Fetching tourist spots failed: %s", e)
            raise DataStoreError("Failed to fetch tourist spots") from e
        logger.info("Fetched %d tourist spots", len(spots))
        return spots

    def get_user_preferences(self, user_id: str) -> UserPreferences | None:
        """Return the user's preferences (or onboarding answers), None when absent."""
        url = self._table_url(self._settings.store.tables.profiles)
        try:
            rows = get_json(
                url,
                params={"select": "user_preferences,onboarding_answers", "id": f"eq.{user_id}"},
                headers=self._headers(),
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Fetching preferences for user %s failed: %s", user_id, e)
            raise DataStoreError("Failed to fetch user preferences") from e

        if not isinstance(rows, list) or not rows:
            return None
        row = rows[0] or {}
        raw = row.get("user_preferences") or row.get("onboarding_answers")
        if not isinstance(raw, dict):
            return None
        try:
            return UserPreferences.model_validate(raw)
        except PydanticValidationError as e:
            # A malformed profile should not block itinerary creation.
            logger.warning("Ignoring malformed preferences for user %s: %s", user_id, e)
            return None

    def insert_itinerary(self, record: dict[str, Any]) -> dict[str, Any] | None:
        """Insert one itinerary row and return it as stored (when echoed back)."""
        url = self._table_url(self._settings.store.tables.itineraries)
        headers = {**self._headers(), "Prefer": "return=representation"}
        try:
            rows = post_json(
                url,
                payload=[record],
                headers=headers,
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Inserting itinerary failed: %s", e)
            raise DataStoreError("Failed to insert itinerary") from e
        if isinstance(rows, list) and rows and isinstance(rows[0], dict):
            return rows[0]
        return None
