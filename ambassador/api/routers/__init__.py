"""Aggregate API routers."""

from fastapi import APIRouter

from .admin import router as admin_router
from .auth import router as auth_router
from .leaderboard import router as leaderboard_router
from .system import router as system_router
from .tasks import router as tasks_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    tasks_router,
    leaderboard_router,
    admin_router,
)

__all__ = ["ALL_ROUTERS"]
