"""
Transactional-email sender (Resend HTTP API) and the verification hook service.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from wanderer.config.settings import Settings
from wanderer.core.errors import EmailDeliveryError, WebhookVerificationError
from wanderer.core.http import post_json
from wanderer.email.verification import (
    VerificationHookPayload,
    build_verification_link,
    render_verification_email,
)
from wanderer.email.webhook import verify_hook_request

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, *, to: list[str], subject: str, html: str) -> dict[str, Any]:
        ...


class ResendClient:
    """Sends HTML email through `POST {base_url}/emails`."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def send(self, *, to: list[str], subject: str, html: str) -> dict[str, Any]:
        email = self._settings.email
        if not email.resend.api_key:
            raise EmailDeliveryError("RESEND_API_KEY is not configured")
        try:
            result = post_json(
                f"{email.resend.base_url.rstrip('/')}/emails",
                payload={"from": email.sender, "to": to, "subject": subject, "html": html},
                headers={"Authorization": f"Bearer {email.resend.api_key}"},
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except httpx.HTTPStatusError as e:
            raise EmailDeliveryError(f"Email provider returned {e.response.status_code}: {e.response.text}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise EmailDeliveryError(str(e)) from e
        return result if isinstance(result, dict) else {}


class VerificationEmailService:
    """Handles one send-verification-email hook call end to end."""

    def __init__(self, settings: Settings, sender: EmailSender):
        self._settings = settings
        self._sender = sender

    def _check_signature(self, payload: str, headers: Mapping[str, str]) -> None:
        secret = self._settings.email.hook_secret
        if not secret:
            return
        try:
            verify_hook_request(payload, headers, secret)
        except WebhookVerificationError as e:
            logger.error("Webhook verification failed: %s", e)
            if self._settings.email.enforce_webhook_signature:
                raise

    def handle(self, payload: str, headers: Mapping[str, str]) -> dict[str, Any]:
        """Verify, render and send; returns the provider's send result.

        Raises:
            WebhookVerificationError: Only when signature enforcement is enabled.
            ValueError: If the payload is not a valid hook body.
            EmailDeliveryError: If the provider rejects the send.
        """
        self._check_signature(payload, headers)

        try:
            body = VerificationHookPayload.model_validate(json.loads(payload))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise ValueError(f"Invalid hook payload: {e}") from e

        data = body.email_data
        base_url = self._settings.email.verify_base_url or self._settings.store.url
        link = build_verification_link(
            base_url,
            token_hash=data.token_hash,
            action=data.email_action_type,
            redirect_to=data.redirect_to,
        )
        html = render_verification_email(
            verification_link=link,
            token=data.token,
            app_name=self._settings.app.name,
        )
        result = self._sender.send(to=[body.user.email], subject=self._settings.email.subject, html=html)
        logger.info("Verification email sent successfully to %s: %s", body.user.email, result)
        return result
