"""Helpers for score domain objects."""

from __future__ import annotations

from typing import Any, Dict

from ..core.time import isoformat
from ..models import Score


def score_to_dict(score: Score) -> Dict[str, Any]:
    """Serialise a score model to API-friendly dict."""

    return {
        "id": str(score.id),
        "tournament_id": str(score.tournament_id),
        "user_id": str(score.user_id),
        "song_id": score.song_id,
        "score": score.score,
        "status": score.status,
        "approved_at": isoformat(score.approved_at),
        "approved_by": str(score.approved_by) if score.approved_by else None,
        "created_at": isoformat(score.created_at),
        "updated_at": isoformat(score.updated_at),
    }


__all__ = ["score_to_dict"]
