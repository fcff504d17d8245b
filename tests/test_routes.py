"""Tests for the tournament and match blueprints."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from knockout import create_app
from knockout.match.store import MatchStore
from knockout.tournament.models import TournamentStatus
from knockout.tournament.store import TournamentStore
from tests.conftest import patch_mockfirestore
from tests.helpers import (
    TOURNAMENT_ID,
    completed_match,
    make_tournament,
    scheduled_match,
    seed_tournament,
)


class RoutesTestCase(unittest.TestCase):
    """Test case for the JSON endpoints."""

    def setUp(self) -> None:
        """Set up a test client backed by mockfirestore."""
        patch_mockfirestore()
        self.mock_db = MockFirestore()

        # Patch firestore.client() to return our mock_db
        self.mock_firestore_module = MagicMock()
        self.mock_firestore_module.client.return_value = self.mock_db

        patchers = {
            "init_app": patch("firebase_admin.initialize_app"),
            "firestore_tournaments": patch(
                "knockout.tournament.services.firestore",
                new=self.mock_firestore_module,
            ),
            "firestore_matches": patch(
                "knockout.match.services.firestore",
                new=self.mock_firestore_module,
            ),
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.app = create_app({"TESTING": True})
        self.client = self.app.test_client()

        self.tournaments = TournamentStore(self.mock_db)
        self.matches = MatchStore(self.mock_db)
        seed_tournament(self.mock_db, make_tournament())

    def test_firebase_not_initialized_when_testing(self) -> None:
        self.mocks["init_app"].assert_not_called()

    def test_advance_creates_next_round(self) -> None:
        self.matches.save(completed_match("A", "B", 2, 0))
        self.matches.save(completed_match("C", "D", 2, 1))

        response = self.client.post(f"/tournaments/{TOURNAMENT_ID}/advance")

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertFalse(body["data"]["isComplete"])
        self.assertNotIn("winnerId", body["data"])
        (match,) = body["data"]["nextRoundMatches"]
        self.assertEqual(match["homePlayerOneId"], "A")
        self.assertEqual(match["awayPlayerOneId"], "C")
        self.assertEqual(match["status"], "SCHEDULED")
        self.assertEqual(len(self.matches.find_by_filter(TOURNAMENT_ID, round=2)), 1)

    def test_advance_completes_tournament(self) -> None:
        self.matches.save(completed_match("A", "B", 2, 0))
        self.matches.save(completed_match("C", "D", 2, 1))
        self.matches.save(completed_match("A", "C", 2, 0, round=2))

        response = self.client.post(f"/tournaments/{TOURNAMENT_ID}/advance")

        body = response.get_json()
        self.assertEqual(response.status_code, 200)
        self.assertTrue(body["data"]["isComplete"])
        self.assertEqual(body["data"]["winnerId"], "A")
        self.assertEqual(body["data"]["updatedStatus"], "COMPLETED")
        self.assertEqual(
            self.tournaments.find_by_id(TOURNAMENT_ID).status,
            TournamentStatus.COMPLETED,
        )

    def test_advance_incomplete_round_conflicts(self) -> None:
        self.matches.save(scheduled_match("A", "B"))

        response = self.client.post(f"/tournaments/{TOURNAMENT_ID}/advance")

        self.assertEqual(response.status_code, 409)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertIn("round 1", body["message"])

    def test_advance_bad_id(self) -> None:
        response = self.client.post("/tournaments/not-a-uuid/advance")
        self.assertEqual(response.status_code, 400)

    def test_advance_unknown_tournament(self) -> None:
        response = self.client.post(
            "/tournaments/7c6b5a49-3827-4165-9f0e-d1c2b3a49586/advance"
        )
        self.assertEqual(response.status_code, 404)

    def test_standings(self) -> None:
        self.matches.save(completed_match("A", "B", 2, 0))
        self.matches.save(completed_match("C", "D", 2, 1))

        response = self.client.get(
            f"/tournaments/{TOURNAMENT_ID}/standings?page=1&limit=2"
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["tournamentName"], "Spring Open")
        self.assertEqual([s["playerId"] for s in data["standings"]], ["A", "C"])
        self.assertEqual(data["pagination"]["totalPages"], 2)

    def test_standings_bad_limit(self) -> None:
        response = self.client.get(f"/tournaments/{TOURNAMENT_ID}/standings?limit=500")
        self.assertEqual(response.status_code, 400)
        response = self.client.get(f"/tournaments/{TOURNAMENT_ID}/standings?page=x")
        self.assertEqual(response.status_code, 400)

    def test_list_matches(self) -> None:
        self.matches.save(completed_match("A", "B", 2, 0))
        self.matches.save(scheduled_match("A", "C", round=2))

        response = self.client.get(f"/tournaments/{TOURNAMENT_ID}/matches?round=2")

        data = response.get_json()["data"]
        self.assertEqual(len(data["matches"]), 1)
        self.assertEqual(data["matches"][0]["round"], 2)

    def test_start_and_record_result(self) -> None:
        match = scheduled_match("A", "B")
        self.matches.save(match)

        response = self.client.post(f"/matches/{match.id}/start")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["status"], "IN_PROGRESS")

        response = self.client.post(
            f"/matches/{match.id}/result", json={"homeScore": 11, "awayScore": 8}
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["status"], "COMPLETED")
        self.assertEqual(data["homeScore"], 11)
        self.assertEqual(self.matches.find_by_id(match.id).winner_id, "A")

    def test_record_result_requires_json(self) -> None:
        match = scheduled_match("A", "B")
        self.matches.save(match)
        response = self.client.post(f"/matches/{match.id}/result", data="11-8")
        self.assertEqual(response.status_code, 400)

    def test_view_match(self) -> None:
        match = scheduled_match("A", "B")
        self.matches.save(match)

        response = self.client.get(f"/matches/{match.id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["id"], match.id)

    def test_bracket_empty(self) -> None:
        response = self.client.get(f"/tournaments/{TOURNAMENT_ID}/bracket")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["rounds"], [])
        self.assertEqual(data["totalMatches"], 0)
        self.assertEqual(data["maxRound"], 0)

    def test_bracket_groups_rounds(self) -> None:
        self.matches.save(completed_match("A", "B", 2, 0))
        self.matches.save(completed_match("C", "D", 2, 1))
        self.matches.save(scheduled_match("A", "C", round=2))

        response = self.client.get(f"/tournaments/{TOURNAMENT_ID}/bracket")

        data = response.get_json()["data"]
        self.assertEqual([r["round"] for r in data["rounds"]], [1, 2])
        self.assertEqual(len(data["rounds"][0]["matches"]), 2)
        self.assertEqual(data["rounds"][0]["matches"][0]["winnerIds"], ["A", None])
        self.assertEqual(data["totalMatches"], 3)
        self.assertEqual(data["maxRound"], 2)

    def test_start_and_cancel_tournament(self) -> None:
        open_id = "3e2d1c0b-9a8f-4e7d-8c6b-5a4f3e2d1c0b"
        seed_tournament(
            self.mock_db, make_tournament(TournamentStatus.OPEN, tournament_id=open_id)
        )

        response = self.client.post(f"/tournaments/{open_id}/start")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["status"], "ACTIVE")
        self.assertEqual(
            self.tournaments.find_by_id(open_id).status, TournamentStatus.ACTIVE
        )

        response = self.client.post(f"/tournaments/{open_id}/cancel")
        self.assertEqual(response.status_code, 409)
        self.assertIn("active", response.get_json()["message"])

    def test_cancel_open_tournament(self) -> None:
        open_id = "3e2d1c0b-9a8f-4e7d-8c6b-5a4f3e2d1c0b"
        seed_tournament(
            self.mock_db, make_tournament(TournamentStatus.OPEN, tournament_id=open_id)
        )

        response = self.client.post(f"/tournaments/{open_id}/cancel")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            self.tournaments.find_by_id(open_id).status, TournamentStatus.CANCELLED
        )

    def test_schedule_and_cancel_match(self) -> None:
        match = scheduled_match("A", "B")
        self.matches.save(match)

        response = self.client.post(
            f"/matches/{match.id}/schedule",
            json={"scheduledDate": "2024-07-04T18:00:00Z", "location": "Court 1"},
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["scheduledDate"], "2024-07-04T18:00:00+00:00")
        self.assertEqual(data["location"], "Court 1")

        response = self.client.post(f"/matches/{match.id}/cancel")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.matches.find_by_id(match.id).status.value, "CANCELED")

        response = self.client.post(f"/matches/{match.id}/start")
        self.assertEqual(response.status_code, 409)

    def test_schedule_match_bad_date(self) -> None:
        match = scheduled_match("A", "B")
        self.matches.save(match)

        response = self.client.post(
            f"/matches/{match.id}/schedule", json={"scheduledDate": "next week"}
        )

        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
