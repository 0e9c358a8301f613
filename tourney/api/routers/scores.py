"""Organizer score management endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import delete, update
from sqlmodel import Session

from ...core import get_session, utcnow
from ...core.errors import VALIDATION_INVALID_SCORE, NotFound
from ...core.logging import logger
from ...models import OAuthUser, Score
from ...models.score import SCORE_APPROVED
from ...services.gateway import (
    get_current_user,
    json_body,
    load_score_with_tournament,
    organized_tournament_ids,
    parse_id,
    parse_payload,
    require_organizer,
    store_guard,
)
from ...services.notifications import add_notification, tournament_link
from ...services.scores import score_to_dict
from ..schemas import ScoreReview, ScoreUpdate

router = APIRouter(tags=["scores"])

_SCORE_NOT_FOUND = "スコアが見つかりません"


def _owned_score(score_id, user_id):
    """Filter matching the score only while the caller organizes its tournament."""

    return (
        Score.id == score_id,
        Score.tournament_id.in_(organized_tournament_ids(user_id)),
    )


@router.patch("/scores/{score_id}")
def update_score(
    score_id: str,
    user: OAuthUser = Depends(get_current_user),
    body: Any = Depends(json_body),
    session: Session = Depends(get_session),
):
    """Overwrite a score value as the tournament organizer."""

    score_uuid = parse_id(score_id, _SCORE_NOT_FOUND)
    score, tournament = load_score_with_tournament(session, score_uuid)
    require_organizer(tournament, user, "開催者のみがスコアを更新できます")
    payload = parse_payload(
        ScoreUpdate,
        body,
        code=VALIDATION_INVALID_SCORE,
        message="スコアは0から1,010,000の範囲で指定してください",
    )

    with store_guard(session, f"score update {score_uuid}", "スコアの更新に失敗しました"):
        result = session.execute(
            update(Score)
            .where(*_owned_score(score_uuid, user.id))
            .values(score=payload.score, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFound(_SCORE_NOT_FOUND)
        session.commit()
        session.refresh(score)

    return {"success": True, "score": score_to_dict(score)}


@router.delete("/scores/{score_id}")
def delete_score(
    score_id: str,
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Delete a score as the tournament organizer."""

    score_uuid = parse_id(score_id, _SCORE_NOT_FOUND)
    _, tournament = load_score_with_tournament(session, score_uuid)
    require_organizer(tournament, user, "開催者のみがスコアを削除できます")

    with store_guard(session, f"score delete {score_uuid}", "スコアの削除に失敗しました"):
        result = session.execute(
            delete(Score)
            .where(*_owned_score(score_uuid, user.id))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFound(_SCORE_NOT_FOUND)
        session.commit()

    logger.info("Score %s deleted by organizer %s", score_uuid, user.id)
    return {"success": True, "message": "スコアを削除しました"}


@router.patch("/scores/{score_id}/approve")
def review_score(
    score_id: str,
    user: OAuthUser = Depends(get_current_user),
    body: Any = Depends(json_body),
    session: Session = Depends(get_session),
):
    """Approve or reject a submitted score and tell the submitter."""

    score_uuid = parse_id(score_id, _SCORE_NOT_FOUND)
    score, tournament = load_score_with_tournament(session, score_uuid)
    require_organizer(tournament, user, "この操作を実行する権限がありません")
    payload = parse_payload(ScoreReview, body, message="無効なステータスです")

    now = utcnow()
    values: Dict[str, Any] = {
        "status": payload.status,
        "approved_at": now,
        "approved_by": user.id,
        "updated_at": now,
    }
    if payload.status == SCORE_APPROVED:
        values["score"] = payload.score
        message = f"「{tournament.title}」のスコアが承認されました（{payload.score}点）"
    else:
        message = f"「{tournament.title}」のスコア提出が却下されました"

    with store_guard(session, f"score review {score_uuid}", "スコアの更新に失敗しました"):
        result = session.execute(
            update(Score)
            .where(*_owned_score(score_uuid, user.id))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFound(_SCORE_NOT_FOUND)
        add_notification(
            session,
            score.user_id,
            message,
            tournament_id=tournament.id,
            link_url=tournament_link(tournament.id),
        )
        session.commit()
        session.refresh(score)

    return {
        "message": "スコアを承認しました" if payload.status == SCORE_APPROVED else "スコアを却下しました",
        "score": score_to_dict(score),
    }


__all__ = ["router"]
