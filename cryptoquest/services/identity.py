"""Participant profiles and total-score accrual."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.time import isoformat, utcnow
from ..errors import AlreadyExists, InvalidScore, ParticipantNotFound
from ..models import Participant
from .validation import (
    normalize_identifier,
    validate_display_name,
    validate_image_ref,
)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class IdentityStore:
    """One profile per wallet address, backed by the ``participant`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_participant(
        self,
        identifier: str,
        display_name: str,
        image_ref: Optional[str] = None,
    ) -> Participant:
        identifier = normalize_identifier(identifier)
        participant = Participant(
            identifier=identifier,
            display_name=validate_display_name(display_name),
            image_ref=validate_image_ref(image_ref),
        )
        # The unique index decides between racing registrations.
        try:
            self.session.add(participant)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise AlreadyExists(identifier) from exc
        self.session.refresh(participant)
        logger.info("registered participant %s", identifier)
        return participant

    def find_participant(self, identifier: str) -> Optional[Participant]:
        identifier = normalize_identifier(identifier)
        return self.session.exec(
            select(Participant).where(Participant.identifier == identifier)
        ).first()

    def get_participant(self, identifier: str) -> Participant:
        participant = self.find_participant(identifier)
        if participant is None:
            raise ParticipantNotFound(normalize_identifier(identifier))
        return participant

    def update_profile(
        self,
        identifier: str,
        *,
        display_name: Any = _UNSET,
        image_ref: Any = _UNSET,
    ) -> Participant:
        """Change the name and/or image. Omitted fields stay as they are."""

        new_name = (
            validate_display_name(display_name)
            if display_name is not _UNSET
            else _UNSET
        )
        new_image = validate_image_ref(image_ref) if image_ref is not _UNSET else _UNSET

        participant = self.get_participant(identifier)
        if new_name is not _UNSET:
            participant.display_name = new_name
        if new_image is not _UNSET:
            participant.image_ref = new_image
        participant.updated_at = utcnow()
        self.session.add(participant)
        self.session.commit()
        self.session.refresh(participant)
        return participant

    def accrue_score(self, identifier: str, delta: int) -> Participant:
        """Add ``delta`` to the total in a single UPDATE statement."""

        identifier = normalize_identifier(identifier)
        if isinstance(delta, bool) or not isinstance(delta, int) or delta < 0:
            raise InvalidScore("Accrued score must be a non-negative integer")

        statement = (
            update(Participant)
            .where(Participant.identifier == identifier)
            .values(
                total_score=Participant.total_score + delta,
                updated_at=utcnow(),
            )
        )
        result = self.session.connection().execute(statement)
        if result.rowcount == 0:
            self.session.rollback()
            raise ParticipantNotFound(identifier)
        self.session.commit()
        return self.get_participant(identifier)

    def set_total_score(self, identifier: str, total: int) -> Participant:
        """Overwrite the total. Only reconciliation should call this."""

        participant = self.get_participant(identifier)
        participant.total_score = total
        participant.updated_at = utcnow()
        self.session.add(participant)
        self.session.commit()
        self.session.refresh(participant)
        return participant


def participant_to_dict(
    participant: Participant, quiz_count: Optional[int] = None
) -> Dict[str, Any]:
    """Serialise a participant to an API-friendly dict."""

    payload: Dict[str, Any] = {
        "id": participant.id,
        "walletAddress": participant.identifier,
        "username": participant.display_name,
        "avatar": participant.image_ref,
        "totalScore": participant.total_score,
        "level": participant.level,
        "createdAt": isoformat(participant.created_at),
        "updatedAt": isoformat(participant.updated_at),
    }
    if quiz_count is not None:
        payload["quizCount"] = quiz_count
    return payload


__all__ = ["IdentityStore", "participant_to_dict"]
