"""Profile endpoints for the signed-in user."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import update
from sqlmodel import Session

from ...core import get_session, utcnow
from ...core.errors import NotFound
from ...models import OAuthUser, Profile
from ...services.gateway import get_current_user, json_body, parse_payload, store_guard
from ...services.profiles import profile_to_dict
from ..schemas import ProfileUpdate

router = APIRouter(tags=["profile"])


@router.get("/profile")
def get_profile(
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Return the caller's own profile."""

    with store_guard(session, "profile lookup", "プロフィールの取得に失敗しました"):
        profile = session.get(Profile, user.id)
    if not profile:
        raise NotFound("プロフィールが見つかりません")
    return {"profile": profile_to_dict(profile)}


@router.patch("/profile")
def update_profile(
    user: OAuthUser = Depends(get_current_user),
    body: Any = Depends(json_body),
    session: Session = Depends(get_session),
):
    """Change the caller's display name."""

    payload = parse_payload(ProfileUpdate, body, message="表示名が正しくありません")

    with store_guard(session, "profile update", "プロフィールの更新に失敗しました"):
        result = session.execute(
            update(Profile)
            .where(Profile.id == user.id)
            .values(display_name=payload.display_name, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFound("プロフィールが見つかりません")
        session.commit()
        profile = session.get(Profile, user.id)

    return {"profile": profile_to_dict(profile)}


__all__ = ["router"]
