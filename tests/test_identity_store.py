"""Tests for participant registration, profile edits and accrual."""
from __future__ import annotations

import unittest

from sqlmodel import Session

from cryptoquest.core import create_db_engine, init_db
from cryptoquest.errors import (
    AlreadyExists,
    InvalidIdentifier,
    InvalidImageReference,
    InvalidNameLength,
    InvalidScore,
    ParticipantNotFound,
)
from cryptoquest.services import IdentityStore, participant_to_dict

WALLET = "0x" + "a1" * 20


class TestIdentityStore(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine("sqlite://")
        init_db(self.engine)
        self.session = Session(self.engine)
        self.store = IdentityStore(self.session)

    def tearDown(self):
        self.session.close()
        self.engine.dispose()

    def test_create_then_get_starts_at_zero(self):
        self.store.create_participant(WALLET, "Alice", "https://img.example/a.png")

        participant = self.store.get_participant(WALLET)
        self.assertEqual(participant.identifier, WALLET)
        self.assertEqual(participant.display_name, "Alice")
        self.assertEqual(participant.image_ref, "https://img.example/a.png")
        self.assertEqual(participant.total_score, 0)
        self.assertEqual(participant.level, "beginner")

    def test_lookup_is_case_insensitive(self):
        self.store.create_participant(WALLET.upper().replace("0X", "0x"), "Alice")
        self.assertEqual(self.store.get_participant(WALLET).identifier, WALLET)

    def test_duplicate_registration_fails_regardless_of_fields(self):
        self.store.create_participant(WALLET, "Alice")
        with self.assertRaises(AlreadyExists):
            self.store.create_participant(WALLET, "Somebody Else", "https://x.io/b")
        with self.assertRaises(AlreadyExists):
            self.store.create_participant(WALLET.replace("a", "A"), "Alice")
        # The session is still usable after the rejected insert.
        self.assertEqual(self.store.get_participant(WALLET).display_name, "Alice")

    def test_create_validates_before_writing(self):
        with self.assertRaises(InvalidIdentifier):
            self.store.create_participant("0xnope", "Alice")
        with self.assertRaises(InvalidNameLength):
            self.store.create_participant(WALLET, "Al")
        with self.assertRaises(InvalidImageReference):
            self.store.create_participant(WALLET, "Alice", "nope")
        self.assertIsNone(self.store.find_participant(WALLET))

    def test_get_unknown_participant(self):
        with self.assertRaises(ParticipantNotFound):
            self.store.get_participant(WALLET)

    def test_update_profile_is_partial(self):
        self.store.create_participant(WALLET, "Alice", "https://x.io/a.png")

        updated = self.store.update_profile(WALLET, display_name="Alicia")
        self.assertEqual(updated.display_name, "Alicia")
        self.assertEqual(updated.image_ref, "https://x.io/a.png")

        updated = self.store.update_profile(WALLET, image_ref=None)
        self.assertEqual(updated.display_name, "Alicia")
        self.assertIsNone(updated.image_ref)

    def test_update_profile_revalidates(self):
        self.store.create_participant(WALLET, "Alice")
        with self.assertRaises(InvalidNameLength):
            self.store.update_profile(WALLET, display_name="x" * 31)
        self.assertEqual(self.store.get_participant(WALLET).display_name, "Alice")

    def test_update_profile_unknown_participant(self):
        with self.assertRaises(ParticipantNotFound):
            self.store.update_profile(WALLET, display_name="Alice")

    def test_accrue_score_adds_to_total(self):
        self.store.create_participant(WALLET, "Alice")
        self.store.accrue_score(WALLET, 18)
        participant = self.store.accrue_score(WALLET, 10)
        self.assertEqual(participant.total_score, 28)

    def test_accrue_score_sees_concurrent_increment(self):
        self.store.create_participant(WALLET, "Alice")
        with Session(self.engine) as other:
            IdentityStore(other).accrue_score(WALLET, 5)
        participant = self.store.accrue_score(WALLET, 7)
        self.assertEqual(participant.total_score, 12)

    def test_accrue_score_rejects_negative_delta(self):
        self.store.create_participant(WALLET, "Alice")
        with self.assertRaises(InvalidScore):
            self.store.accrue_score(WALLET, -1)

    def test_accrue_score_unknown_participant(self):
        with self.assertRaises(ParticipantNotFound):
            self.store.accrue_score(WALLET, 3)

    def test_participant_to_dict(self):
        participant = self.store.create_participant(WALLET, "Alice")
        payload = participant_to_dict(participant, quiz_count=0)
        self.assertEqual(payload["walletAddress"], WALLET)
        self.assertEqual(payload["username"], "Alice")
        self.assertEqual(payload["totalScore"], 0)
        self.assertEqual(payload["quizCount"], 0)
        self.assertTrue(payload["createdAt"].endswith("Z"))


if __name__ == "__main__":
    unittest.main()
