"""Input checks shared by the request-facing services."""

from __future__ import annotations

from typing import Any, Optional, Type

from .errors import AmbassadorError, ValidationError


def optional_text(
    value: Any,
    label: str,
    error: Type[AmbassadorError] = ValidationError,
    message: Optional[str] = None,
) -> str:
    """Return ``value`` stripped, ``""`` for null, or raise for non-strings."""

    if value is None:
        return ""
    if not isinstance(value, str):
        raise error(message or f"{label} must be a string")
    return value.strip()


__all__ = ["optional_text"]
