"""Database model for quiz participants."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

DEFAULT_LEVEL = "beginner"


class Participant(SQLModel, table=True):
    """Participant identified by a lowercase wallet address."""

    id: Optional[int] = ORMField(default=None, primary_key=True)
    identifier: str = ORMField(index=True, unique=True)
    display_name: str
    image_ref: Optional[str] = None
    total_score: int = ORMField(default=0)
    level: str = ORMField(default=DEFAULT_LEVEL)
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["DEFAULT_LEVEL", "Participant"]
