"""
Data-store interface.

The hosted backend is consumed as a black box through three calls. Anything that
implements this protocol (the PostgREST client, or a stub in tests) can back the
creation flow, the API and the CLI.
"""

from __future__ import annotations

from typing import Any, Protocol

from wanderer.domain.models import TouristSpot, UserPreferences


class DataStore(Protocol):
    def list_tourist_spots(self) -> list[TouristSpot]:
        """All spots, highest rating first."""
        ...

    def get_user_preferences(self, user_id: str) -> UserPreferences | None:
        """The user's preference record, or None when none is on file."""
        ...

    def insert_itinerary(self, record: dict[str, Any]) -> dict[str, Any] | None:
        """Insert one itinerary row; returns the stored row when the store echoes it."""
        ...
