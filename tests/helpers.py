"""In-memory stores and builders for engine tests."""

from __future__ import annotations

import datetime
import itertools
import uuid
from typing import Optional

from knockout.match.models import Match, MatchStatus
from knockout.tournament.models import Tournament, TournamentStatus
from knockout.tournament.store import tournament_to_document

TOURNAMENT_ID = "5f0c7a52-3d1e-4c8b-9a6f-2b7e1d4c9a10"
OWNER_ID = "0b9d8c7e-6f5a-4b3c-8d2e-1f0a9b8c7d6e"

_CREATED = itertools.count()
BASE_TIME = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


def _next_created_at() -> datetime.datetime:
    return BASE_TIME + datetime.timedelta(seconds=next(_CREATED))


class InMemoryMatchStore:
    """Match store holding matches in insertion order."""

    def __init__(self, matches: Optional[list[Match]] = None) -> None:
        self.matches: dict[str, Match] = {}
        self.saved: list[Match] = []
        for match in matches or []:
            self.save(match)
        self.saved = []

    def find_by_filter(
        self,
        tournament_id: str,
        status: Optional[MatchStatus] = None,
        round: Optional[int] = None,  # noqa: A002
    ) -> list[Match]:
        return [
            m
            for m in self.matches.values()
            if m.tournament_id == tournament_id
            and (status is None or m.status == status)
            and (round is None or m.round == round)
        ]

    def find_by_id(self, match_id: str) -> Optional[Match]:
        return self.matches.get(match_id)

    def save(self, match: Match) -> None:
        if not match.id:
            match.id = str(uuid.uuid4())
        self.matches[match.id] = match
        self.saved.append(match)


class InMemoryTournamentStore:
    """Tournament store recording every update."""

    def __init__(self, tournaments: Optional[list[Tournament]] = None) -> None:
        self.tournaments = {t.id: t for t in tournaments or []}
        self.updates: list[TournamentStatus] = []

    def find_by_id(self, tournament_id: str) -> Optional[Tournament]:
        return self.tournaments.get(tournament_id)

    def update(self, tournament: Tournament) -> None:
        self.tournaments[tournament.id] = tournament
        self.updates.append(tournament.status)


def make_tournament(
    status: TournamentStatus = TournamentStatus.ACTIVE,
    tournament_id: str = TOURNAMENT_ID,
) -> Tournament:
    return Tournament(
        id=tournament_id,
        name="Spring Open",
        status=status,
        created_by_id=OWNER_ID,
    )


def seed_tournament(db, tournament: Tournament) -> None:
    """Write a tournament document straight into a Firestore client."""
    db.collection("tournaments").document(tournament.id).set(
        tournament_to_document(tournament)
    )


def completed_match(
    home: str,
    away: str,
    home_score: int,
    away_score: int,
    round: int = 1,  # noqa: A002
    tournament_id: str = TOURNAMENT_ID,
) -> Match:
    return Match(
        tournament_id=tournament_id,
        home_player_one_id=home,
        away_player_one_id=away,
        round=round,
        status=MatchStatus.COMPLETED,
        home_score=home_score,
        away_score=away_score,
        created_at=_next_created_at(),
    )


def scheduled_match(
    home: str,
    away: str,
    round: int = 1,  # noqa: A002
    tournament_id: str = TOURNAMENT_ID,
) -> Match:
    return Match(
        tournament_id=tournament_id,
        home_player_one_id=home,
        away_player_one_id=away,
        round=round,
        status=MatchStatus.SCHEDULED,
        created_at=_next_created_at(),
    )
