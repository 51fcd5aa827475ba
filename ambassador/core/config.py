"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def _parse_admin_credentials(raw: str | None) -> Dict[str, Dict[str, str]]:
    """Parse ``user:bcrypt-hash[:Display Name]`` entries.

    bcrypt hashes never contain ``:``.
    """

    admins: Dict[str, Dict[str, str]] = {}
    for item in _split_csv(raw):
        parts = item.split(":", 2)
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise RuntimeError(
                "ADMIN_CREDENTIALS entries must look like user:bcrypt-hash[:Name]"
            )
        username = parts[0].strip()
        admins[username] = {
            "username": username,
            "password_hash": parts[1].strip(),
            "name": (parts[2].strip() if len(parts) > 2 else "") or username,
        }
    return admins


# Application security -------------------------------------------------------
SECRET_KEY = _require_env("SECRET_KEY")

# FRONTEND_ORIGIN can contain a comma-separated list for multi-domain deploys.
_frontend_origins = _split_csv(_require_env("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

FRONTEND_ORIGINS = _frontend_origins
FRONTEND_ORIGIN = FRONTEND_ORIGINS[0] if FRONTEND_ORIGINS else ""

ADMIN_CREDENTIALS = _parse_admin_credentials(os.getenv("ADMIN_CREDENTIALS"))


# Google sign-in -------------------------------------------------------------
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
OAUTH_REDIRECT_URL = os.getenv(
    "OAUTH_REDIRECT_URL", "http://127.0.0.1:3000/auth/google/callback"
)


# Runtime behaviour ----------------------------------------------------------
BACKEND_URL = os.getenv("BACKEND_URL", "")
DATABASE_URL = os.getenv("DATABASE_URL") or None

COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))
MAX_UPLOAD_BYTES = _env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
DB_RESET = _env_bool("DB_RESET", False)

LEADERBOARD_SIZE = _env_int("LEADERBOARD_SIZE", 10)
LEADERBOARD_CACHE_TTL = _env_int("LEADERBOARD_CACHE_TTL", 120)
TASKS_CACHE_TTL = _env_int("TASKS_CACHE_TTL", 300)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = _env_bool("LOG_JSON", True)


__all__ = [
    "ADMIN_CREDENTIALS",
    "ALLOWED_CORS_ORIGINS",
    "BACKEND_URL",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "FRONTEND_ORIGIN",
    "FRONTEND_ORIGINS",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "LEADERBOARD_CACHE_TTL",
    "LEADERBOARD_SIZE",
    "LOG_JSON",
    "LOG_LEVEL",
    "MAX_UPLOAD_BYTES",
    "OAUTH_REDIRECT_URL",
    "SECRET_KEY",
    "TASKS_CACHE_TTL",
    "UPLOAD_DIR",
]
