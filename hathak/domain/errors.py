"""Errors raised by the notification domain.

All errors derive from :class:`ValueError` so callers that only care about
"the operation was rejected" can keep catching ``ValueError``.
"""

from __future__ import annotations


class HatHakError(ValueError):
    """Base class for domain errors."""


class NotFoundError(HatHakError):
    """A referenced entity (request, notification) does not exist."""


class ValidationError(HatHakError):
    """Input data (metadata, recipient type, notification fields) is malformed."""


class DeliveryError(HatHakError):
    """A downstream delivery channel failed to accept a notification."""

    def __init__(self, message: str, *, channel: str | None = None) -> None:
        super().__init__(message)
        self.channel = channel


__all__ = ["DeliveryError", "HatHakError", "NotFoundError", "ValidationError"]
