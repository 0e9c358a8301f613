"""Shared steps of every access-controlled endpoint.

Each handler authenticates, loads the target row (joined with whatever row
holds authority over it), authorizes against that freshly loaded row,
validates its payload and then issues one write whose filter repeats the
ownership constraint. Nothing here caches an authorization decision.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple, Type, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.database import get_session
from ..core.errors import (
    SYSTEM_DATABASE_ERROR,
    VALIDATION_INVALID_FORMAT,
    AuthRequired,
    NotFound,
    NotOrganizer,
    StorageError,
    ValidationFailed,
)
from ..core.logging import logger
from ..models import OAuthUser, Score, Tournament

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def get_session_uid(request: Request) -> Optional[str]:
    """Identity recorded in the signed session cookie at login."""

    uid = request.session.get("uid")
    return str(uid) if uid else None


def get_current_user(
    uid: Optional[str] = Depends(get_session_uid),
    session: Session = Depends(get_session),
) -> OAuthUser:
    """FastAPI dependency resolving the caller or raising ``AuthRequired``."""

    if not uid:
        raise AuthRequired()
    try:
        user_id = uuid.UUID(uid)
    except ValueError:
        raise AuthRequired() from None
    user = session.get(OAuthUser, user_id)
    if not user:
        raise AuthRequired()
    return user


def get_optional_user(
    uid: Optional[str] = Depends(get_session_uid),
    session: Session = Depends(get_session),
) -> Optional[OAuthUser]:
    if not uid:
        return None
    try:
        return session.get(OAuthUser, uuid.UUID(uid))
    except ValueError:
        return None


async def json_body(
    request: Request, user: OAuthUser = Depends(get_current_user)
) -> Any:
    """Decoded JSON body, read only once the caller is authenticated.

    Undecodable bodies come back as ``None`` so the handler rejects them
    through ``parse_payload`` at its own validation step, with its own code.
    """

    try:
        return await request.json()
    except ValueError:
        return None


def parse_id(raw: str, message: str) -> uuid.UUID:
    """Parse a path identifier; malformed ids cannot exist, so they 404."""

    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFound(message) from None


@contextmanager
def store_guard(
    session: Session,
    context: str,
    message: str,
    *,
    code: str = SYSTEM_DATABASE_ERROR,
) -> Iterator[None]:
    """Turn store failures into a generic ``StorageError``.

    The cause is logged here and never reaches the response.
    """

    try:
        yield
    except SQLAlchemyError:
        logger.exception("Store failure during %s", context)
        session.rollback()
        raise StorageError(message, code=code) from None


def parse_payload(
    model: Type[PayloadT],
    body: Any,
    *,
    code: str = VALIDATION_INVALID_FORMAT,
    message: Optional[str] = None,
) -> PayloadT:
    """Validate ``body`` against ``model``; the first violation wins."""

    try:
        return model.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        reason = message
        error = (first.get("ctx") or {}).get("error")
        if first.get("type") == "value_error" and error is not None:
            reason = str(error)
        raise ValidationFailed(reason, code=code) from None


def load_tournament(session: Session, tournament_id: uuid.UUID) -> Tournament:
    with store_guard(session, "tournament lookup", "大会の取得に失敗しました"):
        tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise NotFound("大会が見つかりません")
    return tournament


def load_score_with_tournament(
    session: Session, score_id: uuid.UUID
) -> Tuple[Score, Tournament]:
    """Load a score together with the tournament that holds authority over it."""

    with store_guard(session, "score lookup", "スコアの取得に失敗しました"):
        row = session.exec(
            select(Score, Tournament)
            .join(Tournament, Tournament.id == Score.tournament_id)
            .where(Score.id == score_id)
        ).first()
    if row is None:
        raise NotFound("スコアが見つかりません")
    score, tournament = row
    return score, tournament


def require_organizer(tournament: Tournament, user: OAuthUser, message: str) -> None:
    if tournament.organizer_id != user.id:
        raise NotOrganizer(message)


def organized_tournament_ids(user_id: uuid.UUID):
    """Subquery of tournaments the user organizes, for write filters."""

    return select(Tournament.id).where(Tournament.organizer_id == user_id)


__all__ = [
    "get_current_user",
    "get_optional_user",
    "get_session_uid",
    "json_body",
    "load_score_with_tournament",
    "load_tournament",
    "organized_tournament_ids",
    "parse_id",
    "parse_payload",
    "require_organizer",
    "store_guard",
]
