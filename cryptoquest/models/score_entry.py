"""Database model for recorded quiz attempts."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class ScoreEntry(SQLModel, table=True):
    """One quiz attempt. At most one per participant and quiz."""

    __tablename__ = "score_entry"
    __table_args__ = (
        UniqueConstraint(
            "participant_id", "quiz_id", name="uq_score_entry_participant_quiz"
        ),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    participant_id: str = ORMField(index=True)
    quiz_id: str
    raw_score: int
    max_score: int = 20
    percentage: float
    difficulty: str
    created_at: datetime = ORMField(default_factory=utcnow, index=True)


__all__ = ["ScoreEntry"]
