"""FastAPI dependencies wiring request sessions to the score services."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import get_session
from ..errors import StoreUnavailable
from ..services import (
    AggregationEngine,
    IdentityStore,
    ScoreLedger,
    SubmissionCoordinator,
)


def require_ready(request: Request) -> None:
    """Refuse requests until the lifespan has created the tables."""

    if not getattr(request.app.state, "ready", False):
        raise StoreUnavailable()


def get_identity_store(session: Session = Depends(get_session)) -> IdentityStore:
    return IdentityStore(session)


def get_score_ledger(session: Session = Depends(get_session)) -> ScoreLedger:
    return ScoreLedger(session)


def get_aggregation_engine(
    session: Session = Depends(get_session),
) -> AggregationEngine:
    return AggregationEngine(session)


def get_submission_coordinator(
    identities: IdentityStore = Depends(get_identity_store),
    ledger: ScoreLedger = Depends(get_score_ledger),
) -> SubmissionCoordinator:
    return SubmissionCoordinator(identities, ledger)


__all__ = [
    "get_aggregation_engine",
    "get_identity_store",
    "get_score_ledger",
    "get_submission_coordinator",
    "require_ready",
]
