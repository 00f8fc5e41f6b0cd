# src/wanderer/scoring/preference.py
"""
Preference scorer (spot-level).

This module implements the additive heuristic used to rank candidate spots for auto-select:
- activity match: +3 per preferred activity found (case-insensitive substring) in the spot's categories
- budget match: +2 when the spot's budget level equals the preferred budget range (case-insensitive)
- scenery match: +2 per spot scenery tag listed in the preferred scenery types (exact match)
- hidden gem: +2 when the user opted in and the spot is flagged
- rating boost: + rating / 2

Scores are intentionally NOT normalized. When there is no preference signal at all the
score degrades to a uniform random value in [0, 1), so ranking becomes arbitrary.
"""

from __future__ import annotations

import random

from wanderer.domain.models import ScoreSignal, SpotScore, TouristSpot, UserPreferences

ACTIVITY_MATCH_WEIGHT = 3.0
BUDGET_MATCH_BONUS = 2.0
SCENERY_MATCH_WEIGHT = 2.0
HIDDEN_GEM_BONUS = 2.0
RATING_FACTOR = 0.5


def _has_signal(preferences: UserPreferences | None) -> bool:
    return preferences is not None and not preferences.is_empty()


def _activity_matches(spot: TouristSpot, activities: list[str]) -> list[str]:
    # An activity counts once if it appears inside any category tag.
    categories = [c.lower() for c in spot.category]
    return [a for a in activities if any(a.lower() in c for c in categories)]


def _score_signals(spot: TouristSpot, preferences: UserPreferences) -> list[ScoreSignal]:
    signals: list[ScoreSignal] = []

    if preferences.preferred_activities is not None:
        matched = _activity_matches(spot, preferences.preferred_activities)
        signals.append(
            ScoreSignal(name="activity", contribution=ACTIVITY_MATCH_WEIGHT * len(matched), matches=matched)
        )

    if preferences.budget_range is not None and spot.budget_level is not None:
        same = spot.budget_level.lower() == preferences.budget_range.lower()
        signals.append(
            ScoreSignal(
                name="budget",
                contribution=BUDGET_MATCH_BONUS if same else 0.0,
                matches=[spot.budget_level] if same else [],
            )
        )

    if preferences.scenery_type is not None:
        wanted = set(preferences.scenery_type)
        matched = [s for s in spot.scenery_type if s in wanted]
        signals.append(
            ScoreSignal(name="scenery", contribution=SCENERY_MATCH_WEIGHT * len(matched), matches=matched)
        )

    if preferences.hidden_gems and spot.is_hidden_gem:
        signals.append(ScoreSignal(name="hidden_gem", contribution=HIDDEN_GEM_BONUS))

    if spot.rating:
        signals.append(ScoreSignal(name="rating", contribution=spot.rating * RATING_FACTOR))

    return signals


def score_spot(
    spot: TouristSpot,
    preferences: UserPreferences | None,
    *,
    rng: random.Random | None = None,
) -> float:
    """Return the additive preference score for `spot` (random in [0, 1) without preferences)."""
    if not _has_signal(preferences):
        return (rng or random).random()
    return sum(s.contribution for s in _score_signals(spot, preferences))


def explain_spot_score(
    spot: TouristSpot,
    preferences: UserPreferences | None,
    *,
    rng: random.Random | None = None,
) -> SpotScore:
    """Score `spot` and keep the per-signal contributions for CLI and API output."""
    if not _has_signal(preferences):
        return SpotScore(
            spot_id=spot.id,
            spot_name=spot.name,
            total_score=(rng or random).random(),
            random_fallback=True,
            reasons=["No preferences on file; random order"],
        )

    signals = _score_signals(spot, preferences)
    reasons: list[str] = []
    for s in signals:
        if s.contribution <= 0:
            continue
        if s.name == "activity":
            reasons.append("Activities: " + ", ".join(s.matches[:6]))
        elif s.name == "budget":
            reasons.append(f"Budget: {s.matches[0]}")
        elif s.name == "scenery":
            reasons.append("Scenery: " + ", ".join(s.matches[:6]))
        elif s.name == "hidden_gem":
            reasons.append("Hidden gem")
        elif s.name == "rating":
            reasons.append(f"Rated {spot.rating:g}/5")
    if not reasons:
        reasons.append("No strong preference match")

    return SpotScore(
        spot_id=spot.id,
        spot_name=spot.name,
        total_score=sum(s.contribution for s in signals),
        signals=signals,
        reasons=reasons,
    )
