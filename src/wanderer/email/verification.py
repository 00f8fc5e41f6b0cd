"""
Verification email: payload schema, link builder and HTML renderer.

The auth provider calls our hook with the user's address plus a one-time token and its
hash. We build a clickable verify link from the hash and embed the raw token as a code
the user can type in instead.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class HookUser(BaseModel):
    email: str


class EmailData(BaseModel):
    token: str
    token_hash: str
    redirect_to: str = ""
    email_action_type: str


class VerificationHookPayload(BaseModel):
    """Body of the send-email hook request."""

    user: HookUser
    email_data: EmailData


def build_verification_link(base_url: str, *, token_hash: str, action: str, redirect_to: str) -> str:
    """Return `{base_url}/auth/v1/verify?token=...&type=...&redirect_to=...`."""
    return f"{base_url.rstrip('/')}/auth/v1/verify?token={token_hash}&type={action}&redirect_to={redirect_to}"


@lru_cache
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )


def render_verification_email(
    *,
    verification_link: str,
    token: str,
    app_name: str = "Wanderer",
    year: int | None = None,
) -> str:
    """Render the verification email HTML."""
    template = _environment().get_template("verification.html")
    return template.render(
        verification_link=verification_link,
        token=token,
        app_name=app_name,
        year=year or datetime.now(timezone.utc).year,
    )
