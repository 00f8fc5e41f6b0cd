"""
Error taxonomy.

Every failure path returns control to an interactive state; the API layer maps
these to HTTP status codes and the creation flow maps them to notifications.
"""

from __future__ import annotations


class WandererError(Exception):
    """Base class for application errors."""


class DataStoreError(WandererError):
    """A read or write against the external data store failed."""


class PersistenceError(WandererError):
    """Persisting an itinerary failed (no retry, no partial success)."""


class ValidationError(WandererError, ValueError):
    """User input was rejected before any network call."""


class EmailDeliveryError(WandererError):
    """The transactional-email provider rejected or failed the send."""


class WebhookVerificationError(WandererError):
    """A hook payload's signature could not be verified."""
