"""API assembly helpers."""

from __future__ import annotations

from fastapi import FastAPI

from ..core.errors import register_exception_handlers
from .routers import ALL_ROUTERS


def register_api(app: FastAPI) -> None:
    """Install the error envelope and attach every router."""

    register_exception_handlers(app)
    for router in ALL_ROUTERS:
        app.include_router(router)


__all__ = ["register_api"]
