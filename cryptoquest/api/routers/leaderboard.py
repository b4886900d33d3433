"""Leaderboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...core import isoformat, utcnow
from ...services import AggregationEngine
from ...services.aggregation import LEADERBOARD_DEFAULT_LIMIT
from ..deps import get_aggregation_engine, require_ready

router = APIRouter(
    prefix="/api", tags=["leaderboard"], dependencies=[Depends(require_ready)]
)


@router.get("/leaderboard")
def get_leaderboard(
    limit: int = LEADERBOARD_DEFAULT_LIMIT,
    engine: AggregationEngine = Depends(get_aggregation_engine),
):
    """Participants ranked by total score."""

    rows = engine.compute_leaderboard(limit)
    return {
        "leaderboard": [row.to_dict() for row in rows],
        "total_players": engine.count_ranked_participants(),
        "last_updated": isoformat(utcnow()),
    }


__all__ = ["router"]
