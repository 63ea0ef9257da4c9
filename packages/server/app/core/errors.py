"""
Domain error taxonomy.

Services raise these; the action boundary (``app.core.results``) turns them
into failure envelopes. Only ``TransientUnavailableError`` is worth retrying.
"""

from __future__ import annotations


class AppError(Exception):
    """Base for errors whose message is safe to show to the caller."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequiredError(AppError):
    default_message = "User not authenticated"


class PermissionDeniedError(AppError):
    default_message = "Permission denied"


class NotFoundError(AppError):
    default_message = "Not found"


class ExpiredError(AppError):
    default_message = "Invitation has expired"


class CreationError(AppError):
    """The store rejected a write."""
    default_message = "Failed to create record"


class TransientUnavailableError(AppError):
    """The store could not be read (transport failure or staleness)."""
    default_message = "Service temporarily unavailable"
