"""Data models for the tournament blueprint."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from knockout.core.types import FirestoreDocument
from knockout.errors import InvalidStateError


class TournamentStatus(str, Enum):
    """Lifecycle states of a tournament."""

    DRAFT = "DRAFT"
    OPEN = "OPEN"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TournamentFormat(str, Enum):
    """Bracket formats. Only single elimination is advanced by the engine."""

    SINGLE_ELIMINATION = "SINGLE_ELIMINATION"
    DOUBLE_ELIMINATION = "DOUBLE_ELIMINATION"
    ROUND_ROBIN = "ROUND_ROBIN"
    SWISS = "SWISS"


class TournamentDocument(FirestoreDocument, total=False):
    """A tournament document in Firestore."""

    name: str
    description: str
    format: str
    status: str
    location: Optional[str]
    startDate: Any
    endDate: Any
    maxParticipants: Optional[int]
    createdById: str


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class Tournament:
    """The aggregate that owns a bracket."""

    id: str
    name: str
    status: TournamentStatus
    created_by_id: str
    format: TournamentFormat = TournamentFormat.SINGLE_ELIMINATION
    description: str = ""
    location: Optional[str] = None
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None
    max_participants: Optional[int] = None
    created_at: datetime.datetime = field(default_factory=_utcnow)
    updated_at: datetime.datetime = field(default_factory=_utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == TournamentStatus.ACTIVE

    def start_tournament(self) -> None:
        if self.status != TournamentStatus.OPEN:
            raise InvalidStateError(
                "Only tournaments in OPEN state can be started, current state: "
                f"{TournamentStatus(self.status).value}."
            )
        self.status = TournamentStatus.ACTIVE
        self.updated_at = _utcnow()

    def complete_tournament(self) -> None:
        if self.status != TournamentStatus.ACTIVE:
            raise InvalidStateError("Only active tournaments can be completed.")
        self.status = TournamentStatus.COMPLETED
        self.updated_at = _utcnow()

    def cancel_tournament(self) -> None:
        """Cancel a tournament that has not started yet."""
        if self.status == TournamentStatus.ACTIVE:
            raise InvalidStateError("Cannot cancel an active tournament.")
        if self.status == TournamentStatus.COMPLETED:
            raise InvalidStateError("Cannot cancel a completed tournament.")
        if self.status == TournamentStatus.CANCELLED:
            raise InvalidStateError("Tournament is already cancelled.")
        self.status = TournamentStatus.CANCELLED
        self.updated_at = _utcnow()
