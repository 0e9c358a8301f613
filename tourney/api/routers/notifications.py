"""Notification inbox endpoints."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy import update
from sqlmodel import Session, select

from ...core import NOTIFICATION_LIST_DEFAULT_LIMIT, NOTIFICATION_LIST_MAX_LIMIT, get_session
from ...core.errors import EXTERNAL_STORE_ERROR, Forbidden
from ...models import Notification, OAuthUser
from ...services.gateway import get_current_user, json_body, parse_payload, store_guard
from ...services.notifications import notification_to_dict
from ..schemas import NotificationUpdate

router = APIRouter(tags=["notifications"])

_FORBIDDEN_MESSAGE = "この通知を更新する権限がありません"


@router.get("/notifications")
def list_notifications(
    limit: int = Query(
        NOTIFICATION_LIST_DEFAULT_LIMIT, ge=1, le=NOTIFICATION_LIST_MAX_LIMIT
    ),
    unread_only: bool = False,
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """List the caller's notifications, newest first."""

    query = select(Notification).where(Notification.user_id == user.id)
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712
    query = query.order_by(Notification.created_at.desc()).limit(limit)

    with store_guard(
        session, "notification listing", "通知の取得に失敗しました", code=EXTERNAL_STORE_ERROR
    ):
        notifications = session.exec(query).all()

    return {"notifications": [notification_to_dict(n) for n in notifications]}


@router.patch("/notifications/{notification_id}")
def mark_notification(
    notification_id: str,
    user: OAuthUser = Depends(get_current_user),
    body: Any = Depends(json_body),
    session: Session = Depends(get_session),
):
    """Set the read flag on one of the caller's notifications.

    Ownership is enforced by the write filter itself: a notification that does
    not exist and one owned by someone else are indistinguishable here.
    """

    payload = parse_payload(
        NotificationUpdate, body, message="is_readはboolean型である必要があります"
    )
    try:
        notification_uuid = uuid.UUID(notification_id)
    except ValueError:
        raise Forbidden(_FORBIDDEN_MESSAGE) from None

    with store_guard(
        session, f"notification update {notification_uuid}", "通知の更新に失敗しました",
        code=EXTERNAL_STORE_ERROR,
    ):
        result = session.execute(
            update(Notification)
            .where(Notification.id == notification_uuid, Notification.user_id == user.id)
            .values(is_read=payload.is_read)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise Forbidden(_FORBIDDEN_MESSAGE)
        session.commit()
        notification = session.get(Notification, notification_uuid)

    return {"notification": notification_to_dict(notification)}


__all__ = ["router"]
