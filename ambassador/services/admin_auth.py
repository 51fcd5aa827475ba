"""Admin credential verification."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from ..core.config import ADMIN_CREDENTIALS
from ..core.logging import get_logger
from .errors import AuthenticationError
from .passwords import verify_password
from .validation import optional_text

logger = get_logger(__name__)


def verify_admin_credentials(
    username: str,
    password: str,
    credentials: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Dict[str, str]:
    """Return the admin record for valid credentials.

    Passwords are compared against bcrypt hashes from configuration; a
    single generic error is raised for unknown users and wrong passwords.
    """

    admins = ADMIN_CREDENTIALS if credentials is None else credentials
    login = optional_text(
        username, "Username", AuthenticationError, "Invalid username or password"
    )
    admin = admins.get(login)
    if not admin or not verify_password(password, admin.get("password_hash")):
        logger.warning("admin_login_failed", username=username)
        raise AuthenticationError("Invalid username or password")
    logger.info("admin_login", username=admin["username"])
    return {"username": admin["username"], "name": admin.get("name") or admin["username"]}


__all__ = ["verify_admin_credentials"]
