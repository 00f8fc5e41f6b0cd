import httpx
import pytest

from wanderer.config.settings import get_settings
from wanderer.core.errors import DataStoreError
from wanderer.store.supabase import SupabaseStore


def _settings():
    settings = get_settings()
    store = settings.store.model_copy(update={"url": "https://example.test/", "key": "anon-key"})
    return settings.model_copy(update={"store": store})


def test_list_tourist_spots_orders_by_rating_and_sends_key(monkeypatch):
    seen = {}

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen.update(url=url, params=params, headers=headers)
        return [
            {"id": "1", "name": "Mayon", "location": "Daraga", "category": ["Nature"], "rating": 4.8,
             "scenery_type": None, "spot_type": None, "is_hidden_gem": None},
        ]

    monkeypatch.setattr("wanderer.store.supabase.get_json", fake_get_json)

    spots = SupabaseStore(_settings()).list_tourist_spots()

    assert seen["url"] == "https://example.test/rest/v1/tourist_spots"
    assert seen["params"]["order"] == "rating.desc"
    assert seen["headers"]["apikey"] == "anon-key"
    assert spots[0].scenery_type == []
    assert spots[0].is_hidden_gem is False


def test_list_tourist_spots_wraps_http_errors(monkeypatch):
    def fake_get_json(url, **_kwargs):
        request = httpx.Request("GET", url)
        response = httpx.Response(503, request=request)
        raise httpx.HTTPStatusError("503", request=request, response=response)

    monkeypatch.setattr("wanderer.store.supabase.get_json", fake_get_json)

    with pytest.raises(DataStoreError, match="Failed to fetch tourist spots"):
        SupabaseStore(_settings()).list_tourist_spots()


def test_preferences_fall_back_to_onboarding_answers(monkeypatch):
    def fake_get_json(url, *, params=None, **_kwargs):
        assert params["id"] == "eq.user-1"
        return [{"user_preferences": None, "onboarding_answers": {"preferredActivities": ["hiking"], "budgetRange": "low"}}]

    monkeypatch.setattr("wanderer.store.supabase.get_json", fake_get_json)

    prefs = SupabaseStore(_settings()).get_user_preferences("user-1")

    assert prefs is not None
    assert prefs.preferred_activities == ["hiking"]
    assert prefs.budget_range == "low"


def test_preferences_absent_profile_returns_none(monkeypatch):
    monkeypatch.setattr("wanderer.store.supabase.get_json", lambda *_a, **_k: [])

    assert SupabaseStore(_settings()).get_user_preferences("nobody") is None


def test_insert_itinerary_posts_one_row_and_returns_representation(monkeypatch):
    seen = {}

    def fake_post_json(url, *, payload, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen.update(url=url, payload=payload, headers=headers)
        return [{"id": "it-9", **payload[0]}]

    monkeypatch.setattr("wanderer.store.supabase.post_json", fake_post_json)

    row = SupabaseStore(_settings()).insert_itinerary({"user_id": "u", "name": "Trip"})

    assert seen["url"].endswith("/rest/v1/itineraries")
    assert seen["headers"]["Prefer"] == "return=representation"
    assert len(seen["payload"]) == 1
    assert row["id"] == "it-9"
