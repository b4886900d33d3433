"""Database model exports."""

from .participant import DEFAULT_LEVEL, Participant
from .score_entry import ScoreEntry

__all__ = [
    "DEFAULT_LEVEL",
    "Participant",
    "ScoreEntry",
]
