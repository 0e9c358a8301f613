"""
Ranking Client
Calls the remote procedure that computes a tournament's ranking.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import RANKING_SERVICE_URL, RANKING_TIMEOUT_SEC
from ..core.logging import logger


class RankingUnavailable(Exception):
    """The ranking procedure could not be reached or answered with an error."""


async def calculate_ranking(
    tournament_id: uuid.UUID,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Dict[str, Any]]:
    """Run the ranking procedure for one tournament and return its rows."""

    if not RANKING_SERVICE_URL:
        raise RankingUnavailable("RANKING_SERVICE_URL is not configured")

    async with httpx.AsyncClient(timeout=RANKING_TIMEOUT_SEC, transport=transport) as client:
        try:
            r = await client.post(
                RANKING_SERVICE_URL, json={"tournament_id": str(tournament_id)}
            )
            r.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Ranking procedure failed for tournament %s: %s", tournament_id, exc)
            raise RankingUnavailable(str(exc)) from exc

    try:
        payload = r.json()
    except ValueError as exc:
        raise RankingUnavailable("Ranking procedure returned invalid JSON") from exc
    ranking = payload.get("ranking") if isinstance(payload, dict) else payload
    if not isinstance(ranking, list):
        raise RankingUnavailable("Ranking procedure returned an unexpected payload")
    return ranking


__all__ = ["RankingUnavailable", "calculate_ranking"]
