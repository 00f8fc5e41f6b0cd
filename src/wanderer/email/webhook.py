"""
Standard Webhooks signature verification for the auth hook.

The auth provider signs each hook request with the shared hook secret and sends the
`webhook-id`, `webhook-timestamp` and `webhook-signature` headers. Verification
(HMAC check and the five-minute timestamp window) is done by `standardwebhooks`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

from standardwebhooks.webhooks import Webhook
from standardwebhooks.webhooks import WebhookVerificationError as StandardWebhookError

from wanderer.core.errors import WebhookVerificationError


def hook_webhook(secret: str) -> Webhook:
    """Build a `Webhook` from a secret in the provider's `v1,whsec_<base64>` form."""
    raw = secret.strip()
    if raw.startswith("v1,"):
        raw = raw[len("v1,"):]
    if not raw:
        raise WebhookVerificationError("Webhook secret is empty")
    try:
        return Webhook(raw)
    except ValueError as e:
        raise WebhookVerificationError("Webhook secret is not valid base64") from e


def verify_hook_request(payload: str, headers: Mapping[str, str], secret: str) -> None:
    """Raise `WebhookVerificationError` unless `payload` carries a valid, fresh signature."""
    webhook = hook_webhook(secret)
    try:
        webhook.verify(payload, dict(headers))
    except json.JSONDecodeError:
        # Signature matched; the body itself is rejected when the payload is parsed.
        return
    except StandardWebhookError as e:
        raise WebhookVerificationError(str(e)) from e
    except ValueError as e:
        # Malformed signature entries (bad base64, missing version separator).
        raise WebhookVerificationError("Malformed webhook signature") from e
