import pytest

from wanderer.config.settings import get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults_load():
    settings = get_settings()

    assert settings.selection.auto_select_count == 8
    assert settings.store.tables.itineraries == "itineraries"
    assert settings.email.enforce_webhook_signature is False


def test_environment_overrides_secrets_and_urls(monkeypatch, fresh_settings):
    monkeypatch.setenv("SUPABASE_URL", "https://project.example.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    monkeypatch.setenv("SEND_VERIFICATION_EMAIL_HOOK_SECRET", "v1,whsec_abc")
    monkeypatch.setenv("WANDERER_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.store.url == "https://project.example.co"
    assert settings.store.key == "anon-key"
    assert settings.email.resend.api_key == "re_key"
    assert settings.email.hook_secret == "v1,whsec_abc"
    assert settings.app.log_level == "debug"


def test_external_config_file(monkeypatch, tmp_path, fresh_settings):
    path = tmp_path / "wanderer.yaml"
    path.write_text("selection:\n  auto_select_count: 5\n", encoding="utf-8")
    monkeypatch.setenv("WANDERER_CONFIG_PATH", str(path))

    assert get_settings().selection.auto_select_count == 5
