import base64
import json
from datetime import datetime, timedelta, timezone

import pytest

from wanderer.config.settings import get_settings
from wanderer.core.errors import EmailDeliveryError, WebhookVerificationError
from wanderer.email.sender import ResendClient, VerificationEmailService
from wanderer.email.verification import build_verification_link, render_verification_email
from wanderer.email.webhook import hook_webhook, verify_hook_request

SECRET = "v1,whsec_" + base64.b64encode(b"super-secret-key").decode("ascii")

PAYLOAD = json.dumps(
    {
        "user": {"email": "traveler@example.com"},
        "email_data": {
            "token": "123456",
            "token_hash": "abc123",
            "redirect_to": "https://app.example.com/welcome",
            "email_action_type": "signup",
        },
    }
)


class _StubSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    def send(self, *, to, subject, html):
        if self.fail:
            raise EmailDeliveryError("provider down")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": "email-1"}


def _settings(**email_updates):
    settings = get_settings()
    store = settings.store.model_copy(update={"url": "https://project.example.co"})
    email = settings.email.model_copy(update=email_updates)
    return settings.model_copy(update={"store": store, "email": email})


def _signed_headers(payload: str, *, at: datetime | None = None) -> dict[str, str]:
    at = at or datetime.now(tz=timezone.utc)
    return {
        "webhook-id": "msg_1",
        "webhook-timestamp": str(int(at.timestamp())),
        "webhook-signature": hook_webhook(SECRET).sign("msg_1", at, payload),
    }


def test_verification_link_format():
    link = build_verification_link(
        "https://project.example.co/", token_hash="abc123", action="signup", redirect_to="https://app/welcome"
    )

    assert link == "https://project.example.co/auth/v1/verify?token=abc123&type=signup&redirect_to=https://app/welcome"


def test_rendered_email_embeds_link_and_code():
    html = render_verification_email(verification_link="https://x/auth/v1/verify?token=t&type=signup", token="987654")

    assert 'href="https://x/auth/v1/verify?token=t&amp;type=signup"' in html
    assert "987654" in html
    assert "Verify Email Address" in html


def test_verify_hook_request_accepts_valid_signature():
    verify_hook_request(PAYLOAD, _signed_headers(PAYLOAD), SECRET)


def test_verify_hook_request_rejects_tampered_payload_and_stale_timestamp():
    headers = _signed_headers(PAYLOAD)
    with pytest.raises(WebhookVerificationError, match="No matching"):
        verify_hook_request(PAYLOAD + " ", headers, SECRET)

    old = _signed_headers(PAYLOAD, at=datetime.now(tz=timezone.utc) - timedelta(hours=1))
    with pytest.raises(WebhookVerificationError, match="too old"):
        verify_hook_request(PAYLOAD, old, SECRET)

    with pytest.raises(WebhookVerificationError, match="Missing"):
        verify_hook_request(PAYLOAD, {}, SECRET)


def test_verify_hook_request_maps_malformed_signature_and_secret():
    headers = {**_signed_headers(PAYLOAD), "webhook-signature": "v1,not-base64!"}
    with pytest.raises(WebhookVerificationError):
        verify_hook_request(PAYLOAD, headers, SECRET)

    with pytest.raises(WebhookVerificationError, match="empty"):
        verify_hook_request(PAYLOAD, _signed_headers(PAYLOAD), "v1,")


def test_service_renders_and_sends():
    sender = _StubSender()
    service = VerificationEmailService(_settings(), sender)

    result = service.handle(PAYLOAD, {})

    assert result == {"id": "email-1"}
    sent = sender.sent[0]
    assert sent["to"] == ["traveler@example.com"]
    assert sent["subject"] == "Verify your Wanderer account"
    assert "https://project.example.co/auth/v1/verify?token=abc123&amp;type=signup" in sent["html"]


def test_bad_signature_is_logged_but_not_fatal_by_default(caplog):
    sender = _StubSender()
    service = VerificationEmailService(_settings(hook_secret=SECRET), sender)

    with caplog.at_level("ERROR"):
        service.handle(PAYLOAD, {"webhook-id": "x", "webhook-timestamp": "0", "webhook-signature": "v1,bad"})

    assert len(sender.sent) == 1
    assert "Webhook verification failed" in caplog.text


def test_bad_signature_aborts_when_enforced():
    sender = _StubSender()
    service = VerificationEmailService(_settings(hook_secret=SECRET, enforce_webhook_signature=True), sender)

    with pytest.raises(WebhookVerificationError):
        service.handle(PAYLOAD, {})
    assert sender.sent == []

    service.handle(PAYLOAD, _signed_headers(PAYLOAD))
    assert len(sender.sent) == 1


def test_resend_client_posts_email(monkeypatch):
    seen = {}

    def fake_post_json(url, *, payload, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen.update(url=url, payload=payload, headers=headers)
        return {"id": "re_1"}

    monkeypatch.setattr("wanderer.email.sender.post_json", fake_post_json)
    settings = _settings()
    resend = settings.email.resend.model_copy(update={"api_key": "re_key"})
    settings = settings.model_copy(update={"email": settings.email.model_copy(update={"resend": resend})})

    result = ResendClient(settings).send(to=["a@example.com"], subject="Hi", html="<p>x</p>")

    assert result == {"id": "re_1"}
    assert seen["url"] == "https://api.resend.com/emails"
    assert seen["headers"]["Authorization"] == "Bearer re_key"
    assert seen["payload"]["from"] == "Wanderer <onboarding@resend.dev>"


def test_resend_client_requires_api_key():
    settings = _settings()
    resend = settings.email.resend.model_copy(update={"api_key": None})
    settings = settings.model_copy(update={"email": settings.email.model_copy(update={"resend": resend})})

    with pytest.raises(EmailDeliveryError):
        ResendClient(settings).send(to=["a@example.com"], subject="Hi", html="")
