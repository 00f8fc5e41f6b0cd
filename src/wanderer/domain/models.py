"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- data-store rows (`TouristSpot`, `UserPreferences`)
- persisted records (`Itinerary`)
- explainable scoring output (`SpotScore`)
- API/CLI payloads (`ItineraryCreateRequest`, `MapView`)

Keeping these models in one place helps validation (reject bad rows early) and keeps
JSON output consistent across CLI and API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TouristSpot(BaseModel):
    """A tourist spot row, read-only from the application's perspective."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    description: str | None = None
    location: str = ""
    municipality: str | None = None
    category: list[str] = Field(default_factory=list)
    image_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    budget_level: str | None = None
    scenery_type: list[str] = Field(default_factory=list)
    spot_type: list[str] = Field(default_factory=list)
    is_hidden_gem: bool = False

    @field_validator("category", "scenery_type", "spot_type", mode="before")
    @classmethod
    def _null_list_to_empty(cls, value: Any) -> Any:
        # Array columns come back as null when never populated.
        return [] if value is None else value

    @field_validator("is_hidden_gem", mode="before")
    @classmethod
    def _null_flag_to_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class UserPreferences(BaseModel):
    """Onboarding preferences; every field is optional and absent fields skip their signal.

    The profile row stores camelCase keys, so both spellings are accepted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    preferred_activities: list[str] | None = Field(default=None, alias="preferredActivities")
    budget_range: str | None = Field(default=None, alias="budgetRange")
    scenery_type: list[str] | None = Field(default=None, alias="sceneryType")
    hidden_gems: bool | None = Field(default=None, alias="hiddenGems")

    def is_empty(self) -> bool:
        """True when no recognized field carries a signal."""
        return (
            self.preferred_activities is None
            and self.budget_range is None
            and self.scenery_type is None
            and self.hidden_gems is None
        )


class Itinerary(BaseModel):
    """A persisted itinerary: a named, denormalized snapshot of selected spots."""

    id: str | None = None
    user_id: str
    name: str = Field(..., min_length=1)
    spots: list[TouristSpot]
    selected_categories: list[str]
    created_at: datetime | None = None


class ScoreSignal(BaseModel):
    """One additive signal of the preference score."""

    name: Literal["activity", "budget", "scenery", "hidden_gem", "rating"]
    contribution: float
    matches: list[str] = Field(default_factory=list)


class SpotScore(BaseModel):
    """Explainable score for one spot."""

    spot_id: str
    spot_name: str
    total_score: float
    random_fallback: bool = False
    signals: list[ScoreSignal] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)


class ItineraryCreateRequest(BaseModel):
    """API payload for creating an itinerary from a manual or auto selection."""

    user_id: str
    name: str = ""
    spot_ids: list[str] = Field(default_factory=list)
    auto_select: bool = False


class ItineraryCreateResponse(BaseModel):
    id: str | None = None
    name: str
    spot_ids: list[str]
    selected_categories: list[str]


class MapMarker(BaseModel):
    id: str
    name: str
    location: str
    lat: float
    lon: float
    description: str | None = None
    municipality: str | None = None


class MapView(BaseModel):
    """Map-friendly projection of an itinerary's spots."""

    center_lat: float
    center_lon: float
    markers: list[MapMarker]


class Notification(BaseModel):
    """A transient user-facing message."""

    level: Literal["success", "error", "info"]
    message: str
