"""Participant profile, history and statistics endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...errors import EmptyUpdate
from ...services import (
    AggregationEngine,
    IdentityStore,
    ScoreLedger,
    SubmissionCoordinator,
    participant_to_dict,
    score_entry_to_dict,
)
from ...services.ledger import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT
from ...services.validation import clamp
from ..deps import (
    get_aggregation_engine,
    get_identity_store,
    get_score_ledger,
    get_submission_coordinator,
    require_ready,
)

router = APIRouter(
    prefix="/api/users", tags=["users"], dependencies=[Depends(require_ready)]
)

_PROFILE_FIELDS = {"username": "display_name", "avatar": "image_ref"}


@router.post("", status_code=201)
def create_user(
    body: Dict[str, Any],
    identities: IdentityStore = Depends(get_identity_store),
):
    """Register a participant by wallet address."""

    participant = identities.create_participant(
        body.get("walletAddress"),
        body.get("username"),
        body.get("avatar"),
    )
    return {
        "ok": True,
        "message": "User created successfully",
        "user": participant_to_dict(participant, quiz_count=0),
    }


@router.get("/{wallet_address}")
def get_user(
    wallet_address: str,
    identities: IdentityStore = Depends(get_identity_store),
    ledger: ScoreLedger = Depends(get_score_ledger),
):
    """Get a participant profile with its quiz count."""

    participant = identities.get_participant(wallet_address)
    quiz_count = ledger.count_attempts(participant.identifier)
    return {"user": participant_to_dict(participant, quiz_count=quiz_count)}


@router.patch("/{wallet_address}")
def update_user(
    wallet_address: str,
    body: Dict[str, Any],
    identities: IdentityStore = Depends(get_identity_store),
):
    """Update a participant's name and/or avatar."""

    changes = {
        field: body[key] for key, field in _PROFILE_FIELDS.items() if key in body
    }
    if not changes:
        raise EmptyUpdate("Nothing to update: send username and/or avatar")

    participant = identities.update_profile(wallet_address, **changes)
    return {
        "ok": True,
        "message": "User updated successfully",
        "user": participant_to_dict(participant),
    }


@router.get("/{wallet_address}/history")
def get_user_history(
    wallet_address: str,
    limit: int = HISTORY_DEFAULT_LIMIT,
    offset: int = 0,
    identities: IdentityStore = Depends(get_identity_store),
    ledger: ScoreLedger = Depends(get_score_ledger),
):
    """Paginated quiz history, newest first."""

    participant = identities.get_participant(wallet_address)
    entries, total = ledger.list_attempts(participant.identifier, limit, offset)
    applied_limit = clamp(limit, 1, HISTORY_MAX_LIMIT)
    applied_offset = clamp(offset, 0)
    return {
        "history": [score_entry_to_dict(entry) for entry in entries],
        "pagination": {
            "total": total,
            "limit": applied_limit,
            "offset": applied_offset,
            "hasMore": total > applied_offset + len(entries),
        },
    }


@router.get("/{wallet_address}/stats")
def get_user_stats(
    wallet_address: str,
    identities: IdentityStore = Depends(get_identity_store),
    engine: AggregationEngine = Depends(get_aggregation_engine),
):
    """Attempt count, average and best raw score."""

    participant = identities.get_participant(wallet_address)
    stats = engine.compute_user_stats(participant.identifier)
    return {
        "walletAddress": participant.identifier,
        "totalScore": participant.total_score,
        **stats.to_dict(),
    }


@router.post("/{wallet_address}/reconcile")
def reconcile_user(
    wallet_address: str,
    coordinator: SubmissionCoordinator = Depends(get_submission_coordinator),
):
    """Recompute the total score from the participant's quiz history."""

    participant = coordinator.reconcile_total_score(wallet_address)
    return {"ok": True, "user": participant_to_dict(participant)}


__all__ = ["router"]
