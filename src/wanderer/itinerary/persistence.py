"""
Itinerary persistence adapter.

Packages a selection into one itinerary row (denormalized spot snapshots plus the
derived category set) and inserts it through the data store. Input validation is the
caller's job; this module assumes a non-empty name and selection.
"""

from __future__ import annotations

import logging
from typing import Any

from wanderer.core.errors import DataStoreError, PersistenceError
from wanderer.domain.models import Itinerary, TouristSpot
from wanderer.store.base import DataStore

logger = logging.getLogger(__name__)


def derive_categories(spots: list[TouristSpot]) -> list[str]:
    """Union of the spots' category tags, duplicates removed, first-seen order kept."""
    return list(dict.fromkeys(c for spot in spots for c in spot.category))


def build_itinerary_record(owner_id: str, name: str, spots: list[TouristSpot]) -> dict[str, Any]:
    itinerary = Itinerary(
        user_id=owner_id,
        name=name,
        spots=spots,
        selected_categories=derive_categories(spots),
    )
    # The store assigns id and created_at.
    return itinerary.model_dump(mode="json", exclude={"id", "created_at"})


def create_itinerary(store: DataStore, owner_id: str, name: str, selected_spots: list[TouristSpot]) -> str | None:
    """Insert one itinerary and return its id (None if the store does not echo one).

    Raises:
        PersistenceError: If the insert fails. There is no retry; repeating the call
            creates a second record.
    """
    record = build_itinerary_record(owner_id, name, selected_spots)
    try:
        row = store.insert_itinerary(record)
    except DataStoreError as e:
        raise PersistenceError("Failed to create itinerary") from e

    itinerary_id = (row or {}).get("id")
    logger.info(
        "Created itinerary %r for user %s with %d spots",
        name,
        owner_id,
        len(selected_spots),
    )
    return str(itinerary_id) if itinerary_id is not None else None
