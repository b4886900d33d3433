"""Domain errors raised by the score services.

Every error carries a stable ``code`` and the HTTP status the API layer
answers with, so routers never need to translate them one by one.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class QuizError(Exception):
    """Base class for all domain errors."""

    code = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.code}


# Validation -----------------------------------------------------------------
class ValidationError(QuizError):
    """Malformed input. Raised before any mutation."""

    code = "validation_error"
    status_code = 400


class InvalidIdentifier(ValidationError):
    code = "invalid_identifier"


class InvalidNameLength(ValidationError):
    code = "invalid_name_length"


class InvalidImageReference(ValidationError):
    code = "invalid_image_reference"


class InvalidScore(ValidationError):
    code = "invalid_score"


class InvalidDifficulty(ValidationError):
    code = "invalid_difficulty"


class InvalidQuizId(ValidationError):
    code = "invalid_quiz_id"


class EmptyUpdate(ValidationError):
    code = "empty_update"


# Lookup ---------------------------------------------------------------------
class NotFoundError(QuizError):
    code = "not_found"
    status_code = 404


class ParticipantNotFound(NotFoundError):
    code = "participant_not_found"

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Participant {identifier} not found")
        self.identifier = identifier


# Conflicts ------------------------------------------------------------------
class ConflictError(QuizError):
    code = "conflict"
    status_code = 409


class AlreadyExists(ConflictError):
    code = "already_exists"

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Participant {identifier} already exists")
        self.identifier = identifier


class DuplicateAttempt(ConflictError):
    code = "duplicate_attempt"

    def __init__(self, identifier: str, quiz_id: str) -> None:
        super().__init__(f"Quiz {quiz_id} already completed by {identifier}")
        self.identifier = identifier
        self.quiz_id = quiz_id


# Failures -------------------------------------------------------------------
class PartialFailureError(QuizError):
    """The ledger entry was written but the total score was not accrued.

    The entry stays in place. The participant's total is behind the ledger
    sum until ``SubmissionCoordinator.reconcile_total_score`` runs.
    """

    code = "partial_failure"
    status_code = 500

    def __init__(
        self, identifier: str, score_id: Optional[int], cause: BaseException
    ) -> None:
        super().__init__(
            f"Score {score_id} recorded for {identifier} but total was not updated"
        )
        self.identifier = identifier
        self.score_id = score_id
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["scoreId"] = self.score_id
        return payload


class StoreUnavailable(QuizError):
    code = "store_unavailable"
    status_code = 503

    def __init__(self, message: str = "Database is not ready") -> None:
        super().__init__(message)


__all__ = [
    "AlreadyExists",
    "ConflictError",
    "DuplicateAttempt",
    "EmptyUpdate",
    "InvalidDifficulty",
    "InvalidIdentifier",
    "InvalidImageReference",
    "InvalidNameLength",
    "InvalidQuizId",
    "InvalidScore",
    "NotFoundError",
    "ParticipantNotFound",
    "PartialFailureError",
    "QuizError",
    "StoreUnavailable",
    "ValidationError",
]
