"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .notifications import router as notifications_router
from .profile import router as profile_router
from .scores import router as scores_router
from .system import router as system_router
from .tournaments import router as tournaments_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    profile_router,
    scores_router,
    notifications_router,
    tournaments_router,
)

__all__ = ["ALL_ROUTERS"]
