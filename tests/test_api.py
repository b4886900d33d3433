"""End-to-end tests for the HTTP layer."""
from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from cryptoquest.app import create_app

ALICE = "0xABC" + "0" * 37
ALICE_NORMALIZED = ALICE.lower()
BOB = "0x" + "b" * 40


class TestApi(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app("sqlite://", db_reset=False))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def _register(self, wallet=ALICE, username="Alice", **extra):
        body = {"walletAddress": wallet, "username": username, **extra}
        return self.client.post("/api/users", json=body)

    def _submit(self, quiz_id, score, wallet=ALICE, **extra):
        body = {
            "walletAddress": wallet,
            "quizId": quiz_id,
            "score": score,
            "maxScore": 20,
            "difficulty": "medium",
            **extra,
        }
        return self.client.post("/api/scores", json=body)

    def test_index_and_health(self):
        self.assertEqual(self.client.get("/").json()["message"], "CryptoQuest Backend API")
        self.assertTrue(self.client.get("/health").json()["ok"])
        resp = self.client.get("/healthz")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_create_and_fetch_user(self):
        resp = self._register(avatar="https://img.example/alice.png")
        self.assertEqual(resp.status_code, 201)
        user = resp.json()["user"]
        self.assertEqual(user["walletAddress"], ALICE_NORMALIZED)
        self.assertEqual(user["totalScore"], 0)
        self.assertEqual(user["avatar"], "https://img.example/alice.png")

        resp = self.client.get(f"/api/users/{ALICE_NORMALIZED}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["username"], "Alice")
        self.assertEqual(resp.json()["user"]["quizCount"], 0)

    def test_create_user_errors(self):
        resp = self._register(wallet="0x1234")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "invalid_identifier")

        resp = self._register(username="Al")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "invalid_name_length")

        self._register()
        resp = self._register(username="Alice Again")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "already_exists")

    def test_unknown_user_is_404(self):
        resp = self.client.get(f"/api/users/{BOB}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "participant_not_found")

    def test_update_user(self):
        self._register()
        resp = self.client.patch(f"/api/users/{ALICE}", json={"username": "Alicia"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["username"], "Alicia")

        resp = self.client.patch(f"/api/users/{ALICE}", json={"avatar": "bogus"})
        self.assertEqual(resp.status_code, 400)

        resp = self.client.patch(f"/api/users/{ALICE}", json={})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "empty_update")

        resp = self.client.patch(f"/api/users/{BOB}", json={"username": "Bobby"})
        self.assertEqual(resp.status_code, 404)

    def test_submission_flow_and_leaderboard(self):
        self._register()

        resp = self._submit("q1", 18)
        self.assertEqual(resp.status_code, 201)
        result = resp.json()["result"]
        self.assertEqual(result["percentage"], 90.0)
        self.assertTrue(result["eligibleForReward"])
        self.assertEqual(result["newTotalScore"], 18)

        resp = self._submit("q1", 18)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "duplicate_attempt")

        resp = self._submit("q2", 10)
        result = resp.json()["result"]
        self.assertEqual(result["percentage"], 50.0)
        self.assertFalse(result["eligibleForReward"])
        self.assertEqual(result["newTotalScore"], 28)

        resp = self.client.get("/api/leaderboard", params={"limit": 10})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["total_players"], 1)
        top = data["leaderboard"][0]
        self.assertEqual(top["rank"], 1)
        self.assertEqual(top["name"], "Alice")
        self.assertEqual(top["score"], 28)
        self.assertEqual(top["quizCount"], 2)

    def test_submission_rejections(self):
        resp = self._submit("q1", 5, wallet=BOB)
        self.assertEqual(resp.status_code, 404)

        self._register()
        for overrides, code in (
            ({"score": 21}, "invalid_score"),
            ({"score": "18"}, "invalid_score"),
            ({"difficulty": "impossible"}, "invalid_difficulty"),
            ({"quizId": ""}, "invalid_quiz_id"),
            ({"score": 10**20, "maxScore": 10**20}, "invalid_score"),
        ):
            with self.subTest(overrides=overrides):
                body = {
                    "walletAddress": ALICE,
                    "quizId": "q1",
                    "score": 5,
                    "maxScore": 20,
                    "difficulty": "easy",
                    **overrides,
                }
                resp = self.client.post("/api/scores", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["error"], code)

    def test_history_pagination(self):
        self._register()
        for index in range(3):
            self._submit(f"q{index}", index + 1)

        resp = self.client.get(f"/api/users/{ALICE}/history", params={"limit": 2})
        data = resp.json()
        self.assertEqual([row["quizId"] for row in data["history"]], ["q2", "q1"])
        self.assertEqual(data["pagination"]["total"], 3)
        self.assertTrue(data["pagination"]["hasMore"])

        resp = self.client.get(
            f"/api/users/{ALICE}/history", params={"limit": 2, "offset": 2}
        )
        data = resp.json()
        self.assertEqual(len(data["history"]), 1)
        self.assertFalse(data["pagination"]["hasMore"])

        resp = self.client.get(f"/api/users/{ALICE}/history", params={"limit": 500})
        self.assertEqual(resp.json()["pagination"]["limit"], 100)

    def test_stats_and_reconcile(self):
        self._register()
        resp = self.client.get(f"/api/users/{ALICE}/stats")
        self.assertEqual(
            resp.json(),
            {
                "walletAddress": ALICE_NORMALIZED,
                "totalScore": 0,
                "quizCount": 0,
                "averageScore": 0.0,
                "bestScore": 0,
            },
        )

        self._submit("q1", 12)
        self._submit("q2", 8)
        stats = self.client.get(f"/api/users/{ALICE}/stats").json()
        self.assertEqual(stats["averageScore"], 10.0)
        self.assertEqual(stats["bestScore"], 12)

        resp = self.client.post(f"/api/users/{ALICE}/reconcile")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["totalScore"], 20)


class TestReadiness(unittest.TestCase):
    def test_core_routes_wait_for_startup(self):
        # Without entering the client the lifespan never runs.
        client = TestClient(create_app("sqlite://"))

        resp = client.get("/api/leaderboard")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["error"], "store_unavailable")
        self.assertEqual(client.get("/healthz").status_code, 503)

        with client:
            self.assertEqual(client.get("/api/leaderboard").status_code, 200)


if __name__ == "__main__":
    unittest.main()
