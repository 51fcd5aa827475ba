"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import BACKEND_URL, GOOGLE_CLIENT_ID, LEADERBOARD_SIZE

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose frontend configuration values."""

    return {
        "backend_url": BACKEND_URL,
        "leaderboard_size": LEADERBOARD_SIZE,
        "google_sign_in": bool(GOOGLE_CLIENT_ID),
    }


__all__ = ["router"]
