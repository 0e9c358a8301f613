"""Database model for submitted scores."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

MAX_SCORE = 1_010_000

SCORE_PENDING = "pending"
SCORE_APPROVED = "approved"
SCORE_REJECTED = "rejected"


class Score(SQLModel, table=True):
    """A player's score on one song of a tournament."""

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    tournament_id: uuid.UUID = ORMField(index=True, foreign_key="tournament.id")
    user_id: uuid.UUID = ORMField(index=True, foreign_key="oauth_user.id")
    song_id: Optional[str] = None
    score: int
    status: str = ORMField(default=SCORE_PENDING)
    approved_at: Optional[datetime] = None
    approved_by: Optional[uuid.UUID] = None
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = [
    "MAX_SCORE",
    "SCORE_APPROVED",
    "SCORE_PENDING",
    "SCORE_REJECTED",
    "Score",
]
