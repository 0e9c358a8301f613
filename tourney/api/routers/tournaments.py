"""Tournament participation and ranking endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...core import get_session, isoformat
from ...core.errors import (
    VALIDATION_CANNOT_BAN_SELF,
    AuthRequired,
    Conflict,
    Forbidden,
    NotFound,
    StorageError,
    ValidationFailed,
)
from ...core.logging import logger
from ...models import OAuthUser, Participant, Profile, Score, Tournament
from ...services import ranking
from ...services.gateway import (
    get_current_user,
    get_optional_user,
    load_tournament,
    parse_id,
    require_organizer,
    store_guard,
)
from ...services.notifications import add_notification, tournament_link

router = APIRouter(tags=["tournaments"])

_TOURNAMENT_NOT_FOUND = "大会が見つかりません"


def _find_participant(
    session: Session, tournament: Tournament, user_id
) -> Optional[Participant]:
    with store_guard(session, "participant lookup", "参加情報の取得に失敗しました"):
        return session.exec(
            select(Participant).where(
                Participant.tournament_id == tournament.id,
                Participant.user_id == user_id,
            )
        ).first()


@router.post("/tournaments/{tournament_id}/join")
def join_tournament(
    tournament_id: str,
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Register the caller as a participant and tell the organizer."""

    tournament = load_tournament(session, parse_id(tournament_id, _TOURNAMENT_NOT_FOUND))
    if _find_participant(session, tournament, user.id):
        raise Conflict("既にこの大会に参加しています")

    participant = Participant(tournament_id=tournament.id, user_id=user.id)
    with store_guard(session, f"join {tournament.id}", "参加登録に失敗しました"):
        profile = session.get(Profile, user.id)
        session.add(participant)
        if tournament.organizer_id != user.id:
            display_name = profile.display_name if profile else "ユーザー"
            add_notification(
                session,
                tournament.organizer_id,
                f"{display_name}さんが「{tournament.title}」に参加しました",
                tournament_id=tournament.id,
                link_url=tournament_link(tournament.id),
            )
        try:
            session.commit()
        except IntegrityError:
            # lost a concurrent join on the (tournament_id, user_id) constraint
            session.rollback()
            raise Conflict("既にこの大会に参加しています") from None
        session.refresh(participant)

    return {
        "success": True,
        "participant": {
            "id": participant.id,
            "tournament_id": str(participant.tournament_id),
            "user_id": str(participant.user_id),
            "joined_at": isoformat(participant.joined_at),
        },
    }


@router.post("/tournaments/{tournament_id}/leave")
def leave_tournament(
    tournament_id: str,
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Withdraw the caller from a tournament."""

    tournament = load_tournament(session, parse_id(tournament_id, _TOURNAMENT_NOT_FOUND))
    if not _find_participant(session, tournament, user.id):
        raise NotFound("この大会に参加していません")

    with store_guard(session, f"leave {tournament.id}", "離脱に失敗しました"):
        session.execute(
            delete(Participant)
            .where(
                Participant.tournament_id == tournament.id,
                Participant.user_id == user.id,
            )
            .execution_options(synchronize_session=False)
        )
        session.commit()

    return {"success": True}


@router.delete("/tournaments/{tournament_id}/participants/{user_id}")
def remove_participant(
    tournament_id: str,
    user_id: str,
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Remove a participant and their scores, as the organizer."""

    tournament = load_tournament(session, parse_id(tournament_id, _TOURNAMENT_NOT_FOUND))
    require_organizer(tournament, user, "開催者のみが参加者を除外できます")
    target_id = parse_id(user_id, "参加者が見つかりません")
    if target_id == user.id:
        raise ValidationFailed(
            "開催者は自分自身を除外できません", code=VALIDATION_CANNOT_BAN_SELF
        )

    organized = select(Tournament.id).where(
        Tournament.id == tournament.id, Tournament.organizer_id == user.id
    )
    with store_guard(session, f"remove participant {target_id}", "参加者の除外に失敗しました"):
        session.execute(
            delete(Score)
            .where(Score.tournament_id.in_(organized), Score.user_id == target_id)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(
            delete(Participant)
            .where(Participant.tournament_id.in_(organized), Participant.user_id == target_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFound("参加者が見つかりません")
        session.commit()

    logger.info("Participant %s removed from %s by %s", target_id, tournament.id, user.id)
    return {"success": True, "message": "参加者を除外しました"}


@router.post("/tournaments/{tournament_id}/recalculate")
async def recalculate_ranking(
    tournament_id: str,
    user: OAuthUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Ask the ranking procedure to recompute, as the organizer."""

    tournament = load_tournament(session, parse_id(tournament_id, _TOURNAMENT_NOT_FOUND))
    require_organizer(tournament, user, "開催者のみがランキングを再計算できます")

    try:
        rows = await ranking.calculate_ranking(tournament.id)
    except ranking.RankingUnavailable:
        raise StorageError("ランキングの計算に失敗しました") from None

    return {"success": True, "message": "ランキングを再計算しました", "ranking": rows}


@router.get("/tournaments/{tournament_id}/ranking")
async def get_ranking(
    tournament_id: str,
    user: Optional[OAuthUser] = Depends(get_optional_user),
    session: Session = Depends(get_session),
):
    """Ranking of a tournament; private ones are visible to participants only."""

    tournament = load_tournament(session, parse_id(tournament_id, _TOURNAMENT_NOT_FOUND))
    if not tournament.is_public:
        if user is None:
            raise AuthRequired()
        if not _find_participant(session, tournament, user.id):
            raise Forbidden("この大会のランキングを閲覧する権限がありません")

    try:
        rows = await ranking.calculate_ranking(tournament.id)
    except ranking.RankingUnavailable:
        raise StorageError("ランキングの取得に失敗しました") from None

    return {"ranking": rows}


__all__ = ["router"]
