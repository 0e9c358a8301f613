"""Database model for per-user notifications."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Notification(SQLModel, table=True):
    """Message addressed to exactly one user."""

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    user_id: uuid.UUID = ORMField(index=True, foreign_key="oauth_user.id")
    message: str
    tournament_id: Optional[uuid.UUID] = None
    link_url: Optional[str] = None
    is_read: bool = ORMField(default=False)
    created_at: datetime = ORMField(default_factory=utcnow, index=True)


__all__ = ["Notification"]
