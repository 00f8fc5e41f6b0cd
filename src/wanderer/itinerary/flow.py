"""
Itinerary creation flow.

One flow object lives for one creation session and walks through:

    IDLE -> NAME_ENTERED -> SPOTS_SELECTED -> SUBMITTING -> CREATED | FAILED

A failed submit keeps the name and selection and drops back to `SPOTS_SELECTED` so the
user can resubmit; `last_outcome` still reports `FAILED`. There is no automatic retry.
Every outcome is reported as a `Notification` instead of an exception, so the
caller always gets control back in an interactive state.
"""

from __future__ import annotations

import logging
import random
from enum import Enum

from wanderer.core.errors import DataStoreError, PersistenceError, ValidationError
from wanderer.domain.models import Notification, TouristSpot, UserPreferences
from wanderer.itinerary.persistence import create_itinerary
from wanderer.itinerary.selection import SelectionSet
from wanderer.recommender.select import DEFAULT_TOP_K, select_top_k
from wanderer.store.base import DataStore

logger = logging.getLogger(__name__)


def validate_submission(name: str, selected: list[TouristSpot]) -> None:
    """Reject a submission before any network call."""
    if not name.strip():
        raise ValidationError("Please enter an itinerary name")
    if not selected:
        raise ValidationError("Please select at least one spot")


class FlowState(str, Enum):
    IDLE = "idle"
    NAME_ENTERED = "name_entered"
    SPOTS_SELECTED = "spots_selected"
    SUBMITTING = "submitting"
    CREATED = "created"
    FAILED = "failed"


class ItineraryCreationFlow:
    """Coordinates fetching, selecting and submitting a new itinerary for one user."""

    def __init__(
        self,
        store: DataStore,
        user_id: str,
        *,
        auto_select_count: int = DEFAULT_TOP_K,
        rng: random.Random | None = None,
    ):
        self._store = store
        self.user_id = user_id
        self._auto_select_count = auto_select_count
        self._rng = rng
        self.name = ""
        self.spots: list[TouristSpot] = []
        self.preferences: UserPreferences | None = None
        self.selection = SelectionSet()
        self.notifications: list[Notification] = []
        self.created_id: str | None = None
        self._submitting = False
        self.last_outcome: FlowState | None = None

    @property
    def state(self) -> FlowState:
        if self._submitting:
            return FlowState.SUBMITTING
        if self.last_outcome is FlowState.CREATED:
            return FlowState.CREATED
        if len(self.selection):
            return FlowState.SPOTS_SELECTED
        if self.name.strip():
            return FlowState.NAME_ENTERED
        return FlowState.IDLE

    def _notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))

    def _touch(self) -> None:
        # Any edit after an outcome starts a new attempt.
        self.last_outcome = None

    def open(self) -> None:
        """Load preferences and candidate spots; failures degrade to empty data."""
        try:
            self.preferences = self._store.get_user_preferences(self.user_id)
        except DataStoreError:
            self.preferences = None

        try:
            self.spots = self._store.list_tourist_spots()
        except DataStoreError:
            self.spots = []
            self._notify("error", "Failed to fetch tourist spots")

    def set_name(self, name: str) -> None:
        self._touch()
        self.name = name

    def toggle_spot(self, spot_id: str) -> bool:
        self._touch()
        return self.selection.toggle(spot_id)

    def auto_select(self) -> list[str]:
        """Replace the selection with the best-scoring spots for this user."""
        self._touch()
        ids = select_top_k(self.spots, self.preferences, k=self._auto_select_count, rng=self._rng)
        self.selection.replace_all(ids)
        self._notify(
            "success",
            f"Auto-selected top {self._auto_select_count} recommended spots based on your preferences!",
        )
        return ids

    def selected_spots(self) -> list[TouristSpot]:
        return self.selection.ordered_view(self.spots)

    def submit(self) -> bool:
        """Validate and persist the itinerary; returns True when it was created."""
        selected = self.selected_spots()
        try:
            validate_submission(self.name, selected)
        except ValidationError as e:
            self._notify("error", str(e))
            return False

        self._submitting = True
        try:
            self.created_id = create_itinerary(self._store, self.user_id, self.name, selected)
        except PersistenceError as e:
            logger.warning("Itinerary submission failed for user %s: %s", self.user_id, e)
            self._notify("error", "Failed to create itinerary")
            self.last_outcome = FlowState.FAILED
            return False
        finally:
            self._submitting = False

        self._notify("success", "Itinerary created successfully!")
        self.name = ""
        self.selection.clear()
        self.last_outcome = FlowState.CREATED
        return True
