"""Domain errors raised by the service layer.

Routers translate these into ``HTTPException`` responses.
"""

from __future__ import annotations


class AmbassadorError(Exception):
    """Base class for service-level failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AmbassadorError):
    status_code = 404


class ValidationError(AmbassadorError):
    """Rejected input; raised before anything is written."""

    status_code = 400


class ConcurrentReviewError(AmbassadorError):
    """The submission changed between read and write inside a review."""

    status_code = 409


class AuthenticationError(AmbassadorError):
    status_code = 401


__all__ = [
    "AmbassadorError",
    "AuthenticationError",
    "ConcurrentReviewError",
    "NotFoundError",
    "ValidationError",
]
