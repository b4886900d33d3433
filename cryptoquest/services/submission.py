"""Score intake: validate, record in the ledger, then accrue the total."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import PartialFailureError, ParticipantNotFound, QuizError
from ..models import Participant
from .identity import IdentityStore
from .ledger import ScoreLedger
from .validation import (
    DEFAULT_MAX_SCORE,
    normalize_difficulty,
    normalize_identifier,
    percentage_of,
    validate_max_score,
    validate_quiz_id,
    validate_raw_score,
)

logger = logging.getLogger(__name__)

REWARD_THRESHOLD_PERCENT = 70


class SubmissionState(str, enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    RECORDED = "recorded"
    ACCRUED = "accrued"
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmissionResult:
    score_id: int
    quiz_id: str
    raw_score: int
    max_score: int
    percentage: float
    difficulty: str
    new_total: int
    eligible_for_reward: bool
    state: SubmissionState = SubmissionState.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scoreId": self.score_id,
            "quizId": self.quiz_id,
            "score": self.raw_score,
            "maxScore": self.max_score,
            "percentage": self.percentage,
            "difficulty": self.difficulty,
            "newTotalScore": self.new_total,
            "eligibleForReward": self.eligible_for_reward,
        }


def is_eligible_for_reward(raw_score: int, max_score: int) -> bool:
    # Exact integer comparison; the stored percentage is rounded.
    return raw_score * 100 >= REWARD_THRESHOLD_PERCENT * max_score


class SubmissionCoordinator:
    """Runs one submission through ``RECEIVED`` to ``COMPLETED``.

    Recording and accrual are two commits. If the second one fails the
    attempt stays in the ledger, the submission ends in ``FAILED`` and
    :class:`PartialFailureError` is raised so the caller can alert. Running
    :meth:`reconcile_total_score` afterwards brings the total back in line
    with the ledger.
    """

    def __init__(self, identities: IdentityStore, ledger: ScoreLedger) -> None:
        self.identities = identities
        self.ledger = ledger

    def submit_score(
        self,
        identifier: Any,
        quiz_id: Any,
        raw_score: Any,
        max_score: Any = DEFAULT_MAX_SCORE,
        difficulty: Any = None,
    ) -> SubmissionResult:
        state = SubmissionState.RECEIVED
        try:
            identifier = normalize_identifier(identifier)
            quiz_id = validate_quiz_id(quiz_id)
            max_value = validate_max_score(max_score)
            raw_value = validate_raw_score(raw_score, max_value)
            level = normalize_difficulty(difficulty)
            state = self._advance(identifier, quiz_id, SubmissionState.VALIDATED)

            if self.identities.find_participant(identifier) is None:
                raise ParticipantNotFound(identifier)

            entry = self.ledger.record_attempt(
                identifier, quiz_id, raw_value, max_value, level
            )
            score_id = entry.id
            state = self._advance(identifier, quiz_id, SubmissionState.RECORDED)
        except QuizError as exc:
            logger.info(
                "submission %s/%s %s after %s: %s",
                identifier,
                quiz_id,
                SubmissionState.REJECTED.value,
                state.value,
                exc.message,
            )
            raise

        try:
            participant = self.identities.accrue_score(identifier, raw_value)
        except Exception as exc:
            self.identities.session.rollback()
            logger.exception(
                "submission %s/%s failed: score %s recorded, total not accrued",
                identifier,
                quiz_id,
                score_id,
            )
            self._advance(identifier, quiz_id, SubmissionState.FAILED)
            raise PartialFailureError(identifier, score_id, exc) from exc
        self._advance(identifier, quiz_id, SubmissionState.ACCRUED)

        percentage = percentage_of(raw_value, max_value)
        result = SubmissionResult(
            score_id=score_id,
            quiz_id=quiz_id,
            raw_score=raw_value,
            max_score=max_value,
            percentage=percentage,
            difficulty=level,
            new_total=participant.total_score,
            eligible_for_reward=is_eligible_for_reward(raw_value, max_value),
        )
        logger.info(
            "submission %s/%s completed: %d/%d (%.2f%%), total=%d",
            identifier,
            quiz_id,
            raw_value,
            max_value,
            percentage,
            result.new_total,
        )
        self._advance(identifier, quiz_id, SubmissionState.COMPLETED)
        return result

    def reconcile_total_score(self, identifier: Any) -> Participant:
        """Reset the total score to the sum of the participant's ledger."""

        participant = self.identities.get_participant(identifier)
        expected = self.ledger.sum_scores(participant.identifier)
        previous: Optional[int] = participant.total_score
        if previous == expected:
            return participant
        logger.warning(
            "reconciling %s: total %s -> %s",
            participant.identifier,
            previous,
            expected,
        )
        return self.identities.set_total_score(participant.identifier, expected)

    @staticmethod
    def _advance(
        identifier: str, quiz_id: str, state: SubmissionState
    ) -> SubmissionState:
        logger.debug("submission %s/%s -> %s", identifier, quiz_id, state.value)
        return state


__all__ = [
    "REWARD_THRESHOLD_PERCENT",
    "SubmissionCoordinator",
    "SubmissionResult",
    "SubmissionState",
    "is_eligible_for_reward",
]
