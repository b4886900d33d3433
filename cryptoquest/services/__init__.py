"""Service layer: identity store, score ledger, aggregation and submission."""

from .aggregation import AggregationEngine, LeaderboardRow, UserStats
from .identity import IdentityStore, participant_to_dict
from .ledger import ScoreLedger, score_entry_to_dict
from .submission import (
    REWARD_THRESHOLD_PERCENT,
    SubmissionCoordinator,
    SubmissionResult,
    SubmissionState,
)

__all__ = [
    "AggregationEngine",
    "IdentityStore",
    "LeaderboardRow",
    "REWARD_THRESHOLD_PERCENT",
    "ScoreLedger",
    "SubmissionCoordinator",
    "SubmissionResult",
    "SubmissionState",
    "UserStats",
    "participant_to_dict",
    "score_entry_to_dict",
]
