"""Database models for tournaments and their participants."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Tournament(SQLModel, table=True):
    """Tournament owned by a single organizer."""

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    title: str
    description: Optional[str] = None
    organizer_id: uuid.UUID = ORMField(index=True, foreign_key="oauth_user.id")
    is_public: bool = True
    status: str = ORMField(default="active")  # 'draft'|'active'|'ended'
    created_at: datetime = ORMField(default_factory=utcnow)


class Participant(SQLModel, table=True):
    """Membership of a user in a tournament."""

    __table_args__ = (UniqueConstraint("tournament_id", "user_id"),)

    id: Optional[int] = ORMField(default=None, primary_key=True)
    tournament_id: uuid.UUID = ORMField(index=True, foreign_key="tournament.id")
    user_id: uuid.UUID = ORMField(index=True, foreign_key="oauth_user.id")
    joined_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Participant", "Tournament"]
