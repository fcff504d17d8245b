"""Data models for the match blueprint."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from knockout.core.types import FirestoreDocument
from knockout.errors import InvalidStateError

# A side of a match (one player, or a doubles pair) advances through the
# bracket under its "player one" id. Synthesized next-round matches repeat
# that id in the player two slot; the real partner id is not carried forward.
TeamIdentity = str


class MatchStatus(str, Enum):
    """Lifecycle states of a match."""

    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class MatchDocument(FirestoreDocument, total=False):
    """A match document in Firestore."""

    tournamentId: str
    homePlayerOneId: str
    homePlayerTwoId: Optional[str]
    awayPlayerOneId: str
    awayPlayerTwoId: Optional[str]
    round: int
    status: str
    scheduledDate: Any
    location: Optional[str]
    homeScore: Optional[int]
    awayScore: Optional[int]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class Match:
    """A single contest within a tournament round."""

    tournament_id: str
    home_player_one_id: TeamIdentity
    away_player_one_id: TeamIdentity
    round: int
    status: MatchStatus = MatchStatus.PENDING
    home_player_two_id: Optional[str] = None
    away_player_two_id: Optional[str] = None
    scheduled_date: Optional[datetime.datetime] = None
    location: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    id: str = ""
    created_at: datetime.datetime = field(default_factory=_utcnow)
    updated_at: datetime.datetime = field(default_factory=_utcnow)

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def is_decided(self) -> bool:
        """Return True if the match is completed and both scores are recorded."""
        return (
            self.is_completed
            and self.home_score is not None
            and self.away_score is not None
        )

    @property
    def winner_id(self) -> Optional[TeamIdentity]:
        """Representative identity of the side with the strictly greater score.

        Equal scores resolve to the away side, as recorded results can never be
        equal (see ``MatchService.record_match_result``).
        """
        if not self.is_decided:
            return None
        if self.home_score > self.away_score:  # type: ignore[operator]
            return self.home_player_one_id
        return self.away_player_one_id

    @property
    def is_bye(self) -> bool:
        return self.home_player_one_id == self.away_player_one_id

    def get_winner_ids(self) -> Optional[list[Optional[str]]]:
        """Return both ids of the winning side, or None if undecided or tied."""
        if not self.is_decided:
            return None
        if self.home_score > self.away_score:  # type: ignore[operator]
            return [self.home_player_one_id, self.home_player_two_id]
        if self.away_score > self.home_score:  # type: ignore[operator]
            return [self.away_player_one_id, self.away_player_two_id]
        return None

    def can_modify(self) -> bool:
        return self.status not in (MatchStatus.COMPLETED, MatchStatus.CANCELED)

    def update_score(self, home_score: int, away_score: int) -> None:
        """Record the final score and mark the match completed."""
        if self.status == MatchStatus.CANCELED:
            raise InvalidStateError("Cannot update score for a canceled match.")
        self.home_score = home_score
        self.away_score = away_score
        self.status = MatchStatus.COMPLETED
        self.updated_at = _utcnow()

    def schedule(
        self, date: datetime.datetime, location: Optional[str] = None
    ) -> None:
        if not self.can_modify():
            raise InvalidStateError("Cannot schedule a completed or canceled match.")
        self.scheduled_date = date
        if location:
            self.location = location
        self.status = MatchStatus.SCHEDULED
        self.updated_at = _utcnow()

    def start_match(self) -> None:
        if self.status != MatchStatus.SCHEDULED:
            raise InvalidStateError("Only scheduled matches can be started.")
        self.status = MatchStatus.IN_PROGRESS
        self.updated_at = _utcnow()

    def cancel_match(self) -> None:
        if self.status == MatchStatus.COMPLETED:
            raise InvalidStateError("Cannot cancel a completed match.")
        self.status = MatchStatus.CANCELED
        self.updated_at = _utcnow()

    def to_dict(self) -> dict[str, Any]:
        """Serialize the match for JSON responses."""
        return {
            "id": self.id,
            "tournamentId": self.tournament_id,
            "homePlayerOneId": self.home_player_one_id,
            "homePlayerTwoId": self.home_player_two_id,
            "awayPlayerOneId": self.away_player_one_id,
            "awayPlayerTwoId": self.away_player_two_id,
            "round": self.round,
            "status": self.status.value,
            "scheduledDate": (
                self.scheduled_date.isoformat() if self.scheduled_date else None
            ),
            "location": self.location,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
            "winnerIds": self.get_winner_ids(),
        }
