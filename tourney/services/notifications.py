"""Notification rows addressed to a single recipient."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from sqlmodel import Session

from ..core.time import isoformat
from ..models import Notification


def notification_to_dict(notification: Notification) -> Dict[str, Any]:
    return {
        "id": str(notification.id),
        "user_id": str(notification.user_id),
        "message": notification.message,
        "tournament_id": str(notification.tournament_id) if notification.tournament_id else None,
        "link_url": notification.link_url,
        "is_read": notification.is_read,
        "created_at": isoformat(notification.created_at),
    }


def add_notification(
    session: Session,
    user_id: uuid.UUID,
    message: str,
    *,
    tournament_id: Optional[uuid.UUID] = None,
    link_url: Optional[str] = None,
) -> Notification:
    """Stage a notification in ``session``; the caller owns the commit."""

    notification = Notification(
        user_id=user_id,
        message=message,
        tournament_id=tournament_id,
        link_url=link_url,
    )
    session.add(notification)
    return notification


def tournament_link(tournament_id: uuid.UUID) -> str:
    return f"/tournaments/{tournament_id}"


__all__ = ["add_notification", "notification_to_dict", "tournament_link"]
