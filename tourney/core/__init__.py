"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DATABASE_URL,
    DB_RESET,
    FRONTEND_ORIGIN,
    FRONTEND_ORIGINS,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    NOTIFICATION_LIST_DEFAULT_LIMIT,
    NOTIFICATION_LIST_MAX_LIMIT,
    OAUTH_REDIRECT_URL,
    RANKING_SERVICE_URL,
    RANKING_TIMEOUT_SEC,
    SECRET_KEY,
)
from .database import engine, get_session
from .logging import logger
from .time import isoformat, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "FRONTEND_ORIGIN",
    "FRONTEND_ORIGINS",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "NOTIFICATION_LIST_DEFAULT_LIMIT",
    "NOTIFICATION_LIST_MAX_LIMIT",
    "OAUTH_REDIRECT_URL",
    "RANKING_SERVICE_URL",
    "RANKING_TIMEOUT_SEC",
    "SECRET_KEY",
    "engine",
    "get_session",
    "isoformat",
    "logger",
    "utcnow",
]
