"""Database model for public user profiles."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Profile(SQLModel, table=True):
    """Display data for a user; the primary key is the user's own id."""

    id: uuid.UUID = ORMField(primary_key=True, foreign_key="oauth_user.id")
    display_name: str
    avatar_url: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Profile"]
