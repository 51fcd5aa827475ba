"""API assembly helpers."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..services.errors import AmbassadorError
from .routers import ALL_ROUTERS


async def _service_error_handler(request: Request, exc: AmbassadorError) -> JSONResponse:
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


def register_routes(app: FastAPI) -> None:
    """Attach all application routers and service error handling to the app."""

    app.add_exception_handler(AmbassadorError, _service_error_handler)
    for router in ALL_ROUTERS:
        app.include_router(router)


__all__ = ["register_routes"]
