"""Append-only record of quiz attempts."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from ..core.time import isoformat
from ..errors import DuplicateAttempt
from ..models import ScoreEntry
from .validation import (
    DEFAULT_MAX_SCORE,
    clamp,
    normalize_difficulty,
    normalize_identifier,
    percentage_of,
    validate_max_score,
    validate_quiz_id,
    validate_raw_score,
)

logger = logging.getLogger(__name__)

HISTORY_DEFAULT_LIMIT = 20
HISTORY_MAX_LIMIT = 100


class ScoreLedger:
    """Quiz attempts keyed by participant and quiz.

    The ``uq_score_entry_participant_quiz`` constraint is the only guard
    against a second attempt. Inserts are never preceded by a lookup.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def record_attempt(
        self,
        identifier: str,
        quiz_id: str,
        raw_score: Any,
        max_score: Any = DEFAULT_MAX_SCORE,
        difficulty: Any = None,
    ) -> ScoreEntry:
        identifier = normalize_identifier(identifier)
        quiz_id = validate_quiz_id(quiz_id)
        max_value = validate_max_score(max_score)
        raw_value = validate_raw_score(raw_score, max_value)
        level = normalize_difficulty(difficulty)

        entry = ScoreEntry(
            participant_id=identifier,
            quiz_id=quiz_id,
            raw_score=raw_value,
            max_score=max_value,
            percentage=percentage_of(raw_value, max_value),
            difficulty=level,
        )
        try:
            self.session.add(entry)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateAttempt(identifier, quiz_id) from exc
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(entry)
        logger.debug("recorded %s/%s score=%d", identifier, quiz_id, raw_value)
        return entry

    def list_attempts(
        self,
        identifier: str,
        limit: int = HISTORY_DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Tuple[List[ScoreEntry], int]:
        """Newest attempts first, with the total count for pagination."""

        identifier = normalize_identifier(identifier)
        limit = clamp(limit, 1, HISTORY_MAX_LIMIT)
        offset = clamp(offset, 0)

        entries = self.session.exec(
            select(ScoreEntry)
            .where(ScoreEntry.participant_id == identifier)
            .order_by(ScoreEntry.created_at.desc(), ScoreEntry.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(entries), self.count_attempts(identifier)

    def count_attempts(self, identifier: str) -> int:
        identifier = normalize_identifier(identifier)
        return self.session.exec(
            select(func.count(ScoreEntry.id)).where(
                ScoreEntry.participant_id == identifier
            )
        ).one()

    def sum_scores(self, identifier: str) -> int:
        identifier = normalize_identifier(identifier)
        total: Optional[int] = self.session.exec(
            select(func.sum(ScoreEntry.raw_score)).where(
                ScoreEntry.participant_id == identifier
            )
        ).one()
        return int(total or 0)


def score_entry_to_dict(entry: ScoreEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "walletAddress": entry.participant_id,
        "quizId": entry.quiz_id,
        "score": entry.raw_score,
        "maxScore": entry.max_score,
        "percentage": entry.percentage,
        "difficulty": entry.difficulty,
        "createdAt": isoformat(entry.created_at),
    }


__all__ = [
    "HISTORY_DEFAULT_LIMIT",
    "HISTORY_MAX_LIMIT",
    "ScoreLedger",
    "score_entry_to_dict",
]
