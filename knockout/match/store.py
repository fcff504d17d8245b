"""Firestore-backed match store."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Optional, cast

from firebase_admin import firestore

from knockout.core.constants import MATCHES_COLLECTION

from .models import Match, MatchDocument, MatchStatus

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def match_to_document(match: Match) -> MatchDocument:
    """Map a match onto its Firestore document fields."""
    return {
        "id": match.id,
        "tournamentId": match.tournament_id,
        "homePlayerOneId": match.home_player_one_id,
        "homePlayerTwoId": match.home_player_two_id,
        "awayPlayerOneId": match.away_player_one_id,
        "awayPlayerTwoId": match.away_player_two_id,
        "round": match.round,
        "status": MatchStatus(match.status).value,
        "scheduledDate": match.scheduled_date,
        "location": match.location,
        "homeScore": match.home_score,
        "awayScore": match.away_score,
        "createdAt": match.created_at,
        "updatedAt": match.updated_at,
    }


def match_from_snapshot(snapshot: DocumentSnapshot) -> Match:
    """Build a match from a Firestore document snapshot."""
    data = cast(dict[str, Any], snapshot.to_dict() or {})
    match = Match(
        id=snapshot.id,
        tournament_id=data["tournamentId"],
        home_player_one_id=data["homePlayerOneId"],
        home_player_two_id=data.get("homePlayerTwoId"),
        away_player_one_id=data["awayPlayerOneId"],
        away_player_two_id=data.get("awayPlayerTwoId"),
        round=int(data["round"]),
        status=MatchStatus(data.get("status", MatchStatus.PENDING.value)),
        scheduled_date=data.get("scheduledDate"),
        location=data.get("location"),
        home_score=data.get("homeScore"),
        away_score=data.get("awayScore"),
    )
    if data.get("createdAt"):
        match.created_at = data["createdAt"]
    if data.get("updatedAt"):
        match.updated_at = data["updatedAt"]
    return match


class MatchStore:
    """Reads and writes match documents."""

    def __init__(self, db: Client | None = None) -> None:
        if db is None:
            db = firestore.client()
        self.db = db

    @property
    def _collection(self) -> Any:
        return self.db.collection(MATCHES_COLLECTION)

    def find_by_filter(
        self,
        tournament_id: str,
        status: Optional[MatchStatus] = None,
        round: Optional[int] = None,  # noqa: A002
    ) -> list[Match]:
        """Fetch a tournament's matches, optionally narrowed by status and round.

        Matches come back ordered by round, then creation time, so pairings
        built from them follow the order the matches were created in.
        """
        query = self._collection.where(
            filter=firestore.FieldFilter("tournamentId", "==", tournament_id)
        )
        if status is not None:
            query = query.where(
                filter=firestore.FieldFilter("status", "==", MatchStatus(status).value)
            )
        if round is not None:
            query = query.where(filter=firestore.FieldFilter("round", "==", round))

        matches = [match_from_snapshot(doc) for doc in query.stream()]
        matches.sort(key=lambda m: (m.round, m.created_at))
        return matches

    def find_by_id(self, match_id: str) -> Optional[Match]:
        doc = cast("DocumentSnapshot", self._collection.document(match_id).get())
        if not doc.exists:
            return None
        return match_from_snapshot(doc)

    def save(self, match: Match) -> None:
        """Create or overwrite a match, assigning an id on first save."""
        if not match.id:
            match.id = str(uuid.uuid4())
        self._collection.document(match.id).set(match_to_document(match))
