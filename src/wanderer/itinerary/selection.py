"""
Selection set for one itinerary-creation session.

Holds the identifiers of the spots currently marked as selected. Storage order is
irrelevant; `ordered_view` re-applies the candidate list's order for display.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from wanderer.domain.models import TouristSpot


class SelectionSet:
    """Mutable set of selected spot identifiers with toggle semantics."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    def toggle(self, spot_id: str) -> bool:
        """Flip membership of `spot_id`; returns True when it is now selected."""
        if spot_id in self._ids:
            self._ids.discard(spot_id)
            return False
        self._ids.add(spot_id)
        return True

    def replace_all(self, ids: Iterable[str]) -> None:
        """Replace the whole selection (used by auto-select)."""
        self._ids = set(ids)

    def clear(self) -> None:
        self._ids = set()

    def __contains__(self, spot_id: object) -> bool:
        return spot_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def ordered_view(self, candidates: list[TouristSpot]) -> list[TouristSpot]:
        """Return the selected candidates in candidate-list order."""
        return [spot for spot in candidates if spot.id in self._ids]
