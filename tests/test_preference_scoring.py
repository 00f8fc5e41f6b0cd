import random

import pytest

from wanderer.domain.models import TouristSpot, UserPreferences
from wanderer.scoring.explain import one_line_summary
from wanderer.scoring.preference import explain_spot_score, score_spot


def _spot(**kwargs) -> TouristSpot:
    base = {"id": "s1", "name": "Spot", "location": "Legazpi"}
    base.update(kwargs)
    return TouristSpot(**base)


def test_end_to_end_example_scores_nine():
    prefs = UserPreferences.model_validate(
        {"preferredActivities": ["hiking"], "budgetRange": "low", "hiddenGems": True}
    )
    spot = _spot(category=["Hiking"], budget_level="low", is_hidden_gem=True, rating=4)

    assert score_spot(spot, prefs) == pytest.approx(9.0)


def test_missing_preferences_fall_back_to_random_unit_interval():
    spot = _spot(category=["Hiking"], rating=5)
    rng = random.Random(7)

    for prefs in (None, UserPreferences(), UserPreferences.model_validate({"unrelated": 1})):
        value = score_spot(spot, prefs, rng=rng)
        assert 0.0 <= value < 1.0


def test_each_additional_activity_hit_adds_three():
    spot = _spot(category=["Hiking Trails", "Food Trip", "Beach"], rating=3)
    scores = [
        score_spot(spot, UserPreferences(preferred_activities=acts))
        for acts in (["museum"], ["museum", "hiking"], ["museum", "hiking", "food"], ["museum", "hiking", "food", "beach"])
    ]

    assert [b - a for a, b in zip(scores, scores[1:])] == [pytest.approx(3.0)] * 3


def test_activity_match_is_case_insensitive_substring():
    spot = _spot(category=["Mountain Hiking"])
    prefs = UserPreferences(preferred_activities=["HIKING"])

    assert score_spot(spot, prefs) == pytest.approx(3.0)


def test_activity_counts_once_even_when_several_categories_contain_it():
    spot = _spot(category=["Hiking", "Night Hiking"])
    prefs = UserPreferences(preferred_activities=["hiking"])

    assert score_spot(spot, prefs) == pytest.approx(3.0)


def test_budget_match_is_case_insensitive():
    spot = _spot(budget_level="Medium")

    assert score_spot(spot, UserPreferences(budget_range="medium")) == pytest.approx(2.0)
    assert score_spot(spot, UserPreferences(budget_range="high")) == pytest.approx(0.0)


def test_scenery_match_is_exact_and_counted_per_tag():
    spot = _spot(scenery_type=["coastal", "mountain", "Urban"])
    prefs = UserPreferences(scenery_type=["coastal", "mountain", "urban"])

    assert score_spot(spot, prefs) == pytest.approx(4.0)


def test_hidden_gem_requires_both_opt_in_and_flag():
    gem = _spot(is_hidden_gem=True)
    plain = _spot(is_hidden_gem=False)

    assert score_spot(gem, UserPreferences(hidden_gems=True)) == pytest.approx(2.0)
    assert score_spot(gem, UserPreferences(hidden_gems=False)) == pytest.approx(0.0)
    assert score_spot(plain, UserPreferences(hidden_gems=True)) == pytest.approx(0.0)


def test_rating_adds_half_its_value():
    prefs = UserPreferences(budget_range="low")

    assert score_spot(_spot(rating=4.5), prefs) == pytest.approx(2.25)
    assert score_spot(_spot(rating=None), prefs) == pytest.approx(0.0)


def test_explain_lists_contributions_and_reasons():
    prefs = UserPreferences(preferred_activities=["food"], hidden_gems=True)
    spot = _spot(category=["Food"], is_hidden_gem=True, rating=4)

    explained = explain_spot_score(spot, prefs)

    assert explained.total_score == pytest.approx(score_spot(spot, prefs))
    assert {s.name for s in explained.signals} == {"activity", "hidden_gem", "rating"}
    assert "Hidden gem" in explained.reasons
    assert one_line_summary(explained).startswith("total=7.0")


def test_explain_marks_random_fallback():
    explained = explain_spot_score(_spot(), None, rng=random.Random(1))

    assert explained.random_fallback
    assert "(random)" in one_line_summary(explained)
