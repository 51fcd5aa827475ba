"""bcrypt password hashing."""

from __future__ import annotations

from typing import Any

import bcrypt

from .errors import ValidationError


def hash_password(password: str) -> str:
    if not isinstance(password, str):
        raise ValidationError("Password must be a string")
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(password: Any, password_hash: str | None) -> bool:
    if not isinstance(password, str) or not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash in storage or configuration.
        return False


__all__ = ["hash_password", "verify_password"]
