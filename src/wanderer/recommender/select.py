from __future__ import annotations

# Top-K selector used by the auto-select flow.
#
# Ranking order (explicit, so results do not depend on sort-stability accidents):
#   1. preference score, descending
#   2. rating, descending (spots without a rating sort after rated ones)
#   3. name, ascending (case-insensitive)
#   4. original input order (Python's sort is stable)

import logging
import random

from wanderer.domain.models import SpotScore, TouristSpot, UserPreferences
from wanderer.scoring.preference import explain_spot_score, score_spot

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 8


def _rank_key(spot: TouristSpot, score: float) -> tuple[float, float, str]:
    rating = spot.rating if spot.rating is not None else float("-inf")
    return (-score, -rating, spot.name.casefold())


def select_top_k(
    spots: list[TouristSpot],
    preferences: UserPreferences | None,
    *,
    k: int = DEFAULT_TOP_K,
    rng: random.Random | None = None,
) -> list[str]:
    """Return the identifiers of the `k` highest-scoring spots (fewer if the pool is smaller)."""
    if k <= 0:
        return []
    scored = [(spot, score_spot(spot, preferences, rng=rng)) for spot in spots]
    scored.sort(key=lambda pair: _rank_key(*pair))
    chosen = [spot.id for spot, _ in scored[:k]]
    logger.debug("Selected %d of %d candidate spots", len(chosen), len(spots))
    return chosen


def rank_spots(
    spots: list[TouristSpot],
    preferences: UserPreferences | None,
    *,
    rng: random.Random | None = None,
) -> list[tuple[TouristSpot, SpotScore]]:
    """Return every spot with its explainable score, best first (same order as `select_top_k`)."""
    ranked = [(spot, explain_spot_score(spot, preferences, rng=rng)) for spot in spots]
    ranked.sort(key=lambda pair: _rank_key(pair[0], pair[1].total_score))
    return ranked
