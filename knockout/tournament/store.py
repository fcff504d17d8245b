"""Firestore-backed tournament store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, cast

from firebase_admin import firestore

from knockout.core.constants import TOURNAMENTS_COLLECTION

from .models import Tournament, TournamentDocument, TournamentFormat, TournamentStatus

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def tournament_to_document(tournament: Tournament) -> TournamentDocument:
    """Map a tournament onto its Firestore document fields."""
    return {
        "id": tournament.id,
        "name": tournament.name,
        "description": tournament.description,
        "format": TournamentFormat(tournament.format).value,
        "status": TournamentStatus(tournament.status).value,
        "location": tournament.location,
        "startDate": tournament.start_date,
        "endDate": tournament.end_date,
        "maxParticipants": tournament.max_participants,
        "createdById": tournament.created_by_id,
        "createdAt": tournament.created_at,
        "updatedAt": tournament.updated_at,
    }


def tournament_from_snapshot(snapshot: DocumentSnapshot) -> Tournament:
    """Build a tournament from a Firestore document snapshot."""
    data = cast(dict[str, Any], snapshot.to_dict() or {})
    tournament = Tournament(
        id=snapshot.id,
        name=data.get("name", ""),
        status=TournamentStatus(data.get("status", TournamentStatus.DRAFT.value)),
        created_by_id=data.get("createdById", ""),
        format=TournamentFormat(
            data.get("format", TournamentFormat.SINGLE_ELIMINATION.value)
        ),
        description=data.get("description", ""),
        location=data.get("location"),
        start_date=data.get("startDate"),
        end_date=data.get("endDate"),
        max_participants=data.get("maxParticipants"),
    )
    if data.get("createdAt"):
        tournament.created_at = data["createdAt"]
    if data.get("updatedAt"):
        tournament.updated_at = data["updatedAt"]
    return tournament


class TournamentStore:
    """Reads and writes tournament documents."""

    def __init__(self, db: Client | None = None) -> None:
        if db is None:
            db = firestore.client()
        self.db = db

    @property
    def _collection(self) -> Any:
        return self.db.collection(TOURNAMENTS_COLLECTION)

    def find_by_id(self, tournament_id: str) -> Optional[Tournament]:
        doc = cast("DocumentSnapshot", self._collection.document(tournament_id).get())
        if not doc.exists:
            return None
        return tournament_from_snapshot(doc)

    def update(self, tournament: Tournament) -> None:
        """Persist the mutable fields of an existing tournament."""
        data = dict(tournament_to_document(tournament))
        for key in ("id", "createdAt", "createdById"):
            data.pop(key, None)
        self._collection.document(tournament.id).update(data)
