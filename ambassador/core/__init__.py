"""Core configuration and infrastructure helpers."""

from .config import (
    ADMIN_CREDENTIALS,
    ALLOWED_CORS_ORIGINS,
    BACKEND_URL,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    FRONTEND_ORIGIN,
    FRONTEND_ORIGINS,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    LEADERBOARD_CACHE_TTL,
    LEADERBOARD_SIZE,
    LOG_JSON,
    LOG_LEVEL,
    MAX_UPLOAD_BYTES,
    OAUTH_REDIRECT_URL,
    SECRET_KEY,
    TASKS_CACHE_TTL,
    UPLOAD_DIR,
)
from .database import engine, get_session
from .logging import configure_logging, get_logger
from .time import isoformat, utcnow

__all__ = [
    "ADMIN_CREDENTIALS",
    "ALLOWED_CORS_ORIGINS",
    "BACKEND_URL",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
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
    "configure_logging",
    "engine",
    "get_logger",
    "get_session",
    "isoformat",
    "utcnow",
]
