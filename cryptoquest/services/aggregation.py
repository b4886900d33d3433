"""On-demand statistics and leaderboard queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import Session, func, select

from ..core.time import isoformat
from ..models import Participant, ScoreEntry
from .validation import clamp, normalize_identifier

LEADERBOARD_DEFAULT_LIMIT = 100
LEADERBOARD_MAX_LIMIT = 500

ANONYMOUS_NAME = "Anonymous"


@dataclass(frozen=True)
class UserStats:
    count: int
    average_score: float
    best_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quizCount": self.count,
            "averageScore": self.average_score,
            "bestScore": self.best_score,
        }


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    identifier: str
    display_name: str
    image_ref: Optional[str]
    score: int
    quiz_count: int
    level: str
    joined_at: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "walletAddress": self.identifier,
            "name": self.display_name,
            "avatar": self.image_ref,
            "score": self.score,
            "quizCount": self.quiz_count,
            "level": self.level,
            "joinedDate": isoformat(self.joined_at),
        }


class AggregationEngine:
    """Read-only views over participants and the score ledger."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def compute_user_stats(self, identifier: str) -> UserStats:
        identifier = normalize_identifier(identifier)
        count, average, best = self.session.exec(
            select(
                func.count(ScoreEntry.id),
                func.avg(ScoreEntry.raw_score),
                func.max(ScoreEntry.raw_score),
            ).where(ScoreEntry.participant_id == identifier)
        ).one()
        if not count:
            return UserStats(count=0, average_score=0.0, best_score=0)
        return UserStats(
            count=int(count),
            average_score=round(float(average), 2),
            best_score=int(best),
        )

    def compute_leaderboard(
        self, limit: int = LEADERBOARD_DEFAULT_LIMIT
    ) -> List[LeaderboardRow]:
        """Participants with a positive total, best first.

        Equal totals are ordered by registration time, earliest first, then
        by row id.
        """

        limit = clamp(limit, 1, LEADERBOARD_MAX_LIMIT)
        quiz_count = (
            select(func.count(ScoreEntry.id))
            .where(ScoreEntry.participant_id == Participant.identifier)
            .correlate(Participant)
            .scalar_subquery()
        )
        rows = self.session.exec(
            select(Participant, quiz_count)
            .where(Participant.total_score > 0)
            .order_by(
                Participant.total_score.desc(),
                Participant.created_at.asc(),
                Participant.id.asc(),
            )
            .limit(limit)
        ).all()

        return [
            LeaderboardRow(
                rank=position,
                identifier=participant.identifier,
                display_name=participant.display_name or ANONYMOUS_NAME,
                image_ref=participant.image_ref,
                score=participant.total_score,
                quiz_count=int(count or 0),
                level=participant.level,
                joined_at=participant.created_at,
            )
            for position, (participant, count) in enumerate(rows, start=1)
        ]

    def count_ranked_participants(self) -> int:
        return self.session.exec(
            select(func.count(Participant.id)).where(Participant.total_score > 0)
        ).one()


__all__ = [
    "AggregationEngine",
    "LEADERBOARD_DEFAULT_LIMIT",
    "LEADERBOARD_MAX_LIMIT",
    "LeaderboardRow",
    "UserStats",
]
