"""OAuth authentication routes."""

from __future__ import annotations

import uuid
from typing import Optional

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlmodel import Session, func, select

from ...core import (
    FRONTEND_ORIGIN,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    OAUTH_REDIRECT_URL,
    get_session,
)
from ...core.errors import ValidationFailed
from ...core.logging import logger
from ...models import OAuthUser, Profile
from ...services.profiles import DISPLAY_NAME_MAX_LENGTH, sanitize_display_name

router = APIRouter(tags=["auth"])

oauth = OAuth()

if GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET:
    oauth.register(
        name="google",
        client_id=GOOGLE_CLIENT_ID,
        client_secret=GOOGLE_CLIENT_SECRET,
        server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
        client_kwargs={"scope": "openid email profile"},
    )
else:  # pragma: no cover - allows app to boot without credentials
    oauth.register(
        name="google",
        client_id="dummy",
        client_secret="dummy",
        server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
        client_kwargs={"scope": "openid email profile"},
    )


def _initial_display_name(name: Optional[str], email: str) -> str:
    cleaned = sanitize_display_name(name or "") or sanitize_display_name(email.split("@")[0])
    return (cleaned or "ユーザー")[:DISPLAY_NAME_MAX_LENGTH]


def upsert_google_user(
    session: Session,
    *,
    email: str,
    sub: str,
    name: Optional[str],
    picture: Optional[str],
) -> OAuthUser:
    """Record the provider identity; first sign-in also creates the profile."""

    email = (email or "").strip().lower()

    user = session.exec(
        select(OAuthUser).where(func.lower(OAuthUser.email) == email)
    ).first()
    if user:
        changed = False
        if not user.provider_sub:
            user.provider_sub = sub
            changed = True
        if name and user.name != name:
            user.name = name
            changed = True
        if picture and user.avatar_url != picture:
            user.avatar_url = picture
            changed = True
        if changed:
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    user = OAuthUser(
        email=email,
        name=name,
        avatar_url=picture,
        provider="google",
        provider_sub=sub,
    )
    session.add(user)
    session.flush()
    session.add(
        Profile(
            id=user.id,
            display_name=_initial_display_name(name, email),
            avatar_url=picture,
        )
    )
    session.commit()
    session.refresh(user)
    logger.info("Signed up user %s", user.id)
    return user


@router.get("/auth/google/start")
async def auth_google_start(request: Request, next: str | None = None):
    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
        raise HTTPException(
            status_code=500,
            detail="Google OAuth not configured. Check GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.",
        )

    if next:
        request.session["next"] = next
    return await oauth.google.authorize_redirect(request, OAUTH_REDIRECT_URL)


@router.get("/auth/google/callback")
async def auth_google_callback(
    request: Request, session: Session = Depends(get_session)
):
    try:
        token = await oauth.google.authorize_access_token(request)
    except OAuthError as exc:
        logger.warning("OAuth callback rejected: %s", exc.error)
        raise ValidationFailed("ログインに失敗しました") from None
    userinfo = token.get("userinfo") or await oauth.google.parse_id_token(request, token)
    email = userinfo.get("email")
    sub = userinfo.get("sub")
    if not email or not sub:
        raise ValidationFailed("Googleアカウント情報を取得できませんでした")

    user = upsert_google_user(
        session,
        email=email,
        sub=sub,
        name=userinfo.get("name"),
        picture=userinfo.get("picture"),
    )
    request.session["uid"] = str(user.id)

    next_url = request.session.pop("next", None) or FRONTEND_ORIGIN
    if not str(next_url).startswith(FRONTEND_ORIGIN):
        next_url = FRONTEND_ORIGIN
    return RedirectResponse(next_url, status_code=302)


@router.post("/auth/logout")
def auth_logout(request: Request):
    request.session.clear()
    return JSONResponse({"success": True})


@router.get("/me")
def me(request: Request, session: Session = Depends(get_session)):
    uid = request.session.get("uid")
    if not uid:
        return JSONResponse({"user": None})
    try:
        user = session.get(OAuthUser, uuid.UUID(uid))
    except ValueError:
        request.session.clear()
        return JSONResponse({"user": None})
    if not user:
        request.session.clear()
        return JSONResponse({"user": None})
    profile = session.get(Profile, user.id)
    return JSONResponse(
        {
            "user": {
                "id": str(user.id),
                "email": user.email,
                "display_name": profile.display_name if profile else None,
                "avatar_url": user.avatar_url,
            }
        }
    )


__all__ = ["router", "upsert_google_user"]
