"""Quiz score submission endpoint."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...services import SubmissionCoordinator
from ...services.validation import DEFAULT_MAX_SCORE
from ..deps import get_submission_coordinator, require_ready

router = APIRouter(
    prefix="/api", tags=["scores"], dependencies=[Depends(require_ready)]
)


@router.post("/scores", status_code=201)
def submit_score(
    body: Dict[str, Any],
    coordinator: SubmissionCoordinator = Depends(get_submission_coordinator),
):
    """Record a quiz result and add it to the participant's total."""

    result = coordinator.submit_score(
        body.get("walletAddress"),
        body.get("quizId"),
        body.get("score"),
        body.get("maxScore", DEFAULT_MAX_SCORE),
        body.get("difficulty"),
    )
    return {
        "ok": True,
        "message": "Score submitted successfully",
        "result": result.to_dict(),
    }


__all__ = ["router"]
