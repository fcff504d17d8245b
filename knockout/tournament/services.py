"""Service layer for tournament business logic."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore

from knockout.core.types import Result
from knockout.errors import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from knockout.match.models import Match, MatchStatus, TeamIdentity
from knockout.match.store import MatchStore
from knockout.utils import validate_pagination, validate_uuid

from .bracket import (
    FIRST_ROUND,
    create_next_round_matches,
    determine_current_round,
    get_round_winners,
    group_matches_by_round,
    is_round_complete,
)
from .models import Tournament, TournamentStatus
from .standings import Pagination, PlayerStanding, calculate_standings, paginate
from .store import TournamentStore

if TYPE_CHECKING:
    from knockout.core.types import MatchRepository, TournamentRepository

logger = logging.getLogger(__name__)


@dataclass
class AdvanceTournamentOutcome:
    """Result of advancing a tournament by one round."""

    tournament_id: str
    updated_status: TournamentStatus
    next_round_matches: list[Match]
    is_complete: bool
    winner_id: Optional[TeamIdentity] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tournamentId": self.tournament_id,
            "updatedStatus": self.updated_status.value,
            "nextRoundMatches": [m.to_dict() for m in self.next_round_matches],
            "isComplete": self.is_complete,
        }
        if self.winner_id is not None:
            data["winnerId"] = self.winner_id
        return data


@dataclass
class StandingsReport:
    """A page of tournament standings."""

    tournament_id: str
    tournament_name: str
    tournament_status: TournamentStatus
    standings: list[PlayerStanding]
    pagination: Pagination

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournamentId": self.tournament_id,
            "tournamentName": self.tournament_name,
            "tournamentStatus": self.tournament_status.value,
            "standings": [s.to_dict() for s in self.standings],
            "pagination": self.pagination.to_dict(),
        }


@dataclass
class MatchPage:
    """A page of a tournament's matches."""

    tournament_id: str
    matches: list[Match]
    pagination: Pagination

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournamentId": self.tournament_id,
            "matches": [m.to_dict() for m in self.matches],
            "pagination": self.pagination.to_dict(),
        }


@dataclass
class BracketRound:
    round: int
    matches: list[Match]

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass
class BracketView:
    """Every match of a tournament, grouped by round in ascending order."""

    tournament_id: str
    rounds: list[BracketRound]
    total_matches: int
    max_round: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournamentId": self.tournament_id,
            "rounds": [r.to_dict() for r in self.rounds],
            "totalMatches": self.total_matches,
            "maxRound": self.max_round,
        }


@dataclass
class TournamentStatusChange:
    """A tournament after a lifecycle transition."""

    tournament: Tournament
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournamentId": self.tournament.id,
            "name": self.tournament.name,
            "status": TournamentStatus(self.tournament.status).value,
            "message": self.message,
        }


class TournamentService:
    """Handles bracket progression and standings for tournaments."""

    @staticmethod
    def _stores(
        tournaments: TournamentRepository | None,
        matches: MatchRepository | None,
    ) -> tuple[TournamentRepository, MatchRepository]:
        if tournaments is None or matches is None:
            db = firestore.client()
            tournaments = tournaments or TournamentStore(db)
            matches = matches or MatchStore(db)
        return tournaments, matches

    @staticmethod
    def _get_tournament(
        tournaments: TournamentRepository, tournament_id: str
    ) -> Tournament:
        tournament = tournaments.find_by_id(tournament_id)
        if tournament is None:
            raise NotFoundError(f"Tournament with ID {tournament_id} not found.")
        return tournament

    @staticmethod
    def advance_tournament(
        tournament_id: str,
        tournaments: TournamentRepository | None = None,
        matches: MatchRepository | None = None,
        now: Optional[datetime.datetime] = None,
    ) -> Result[AdvanceTournamentOutcome]:
        """Advance an active tournament past its current round.

        Either creates the next round's matches from the current round's
        winners, or, once a single winner remains after round 1, marks the
        tournament completed and reports the champion.
        """
        try:
            validate_uuid(tournament_id, "tournamentId")
            tournaments, matches = TournamentService._stores(tournaments, matches)
            outcome = TournamentService._advance(
                tournaments, matches, tournament_id, now
            )
        except Exception as e:
            return Result.from_exception("Advance tournament", e)
        return Result.ok(outcome)

    @staticmethod
    def _advance(
        tournaments: TournamentRepository,
        matches: MatchRepository,
        tournament_id: str,
        now: Optional[datetime.datetime],
    ) -> AdvanceTournamentOutcome:
        tournament = TournamentService._get_tournament(tournaments, tournament_id)
        if not tournament.is_active:
            raise InvalidStateError(
                "Tournament is not in ACTIVE state, current state: "
                f"{TournamentStatus(tournament.status).value}."
            )

        all_matches = matches.find_by_filter(tournament_id)
        if not all_matches:
            raise InvalidStateError(f"No matches found for tournament {tournament_id}.")

        matches_by_round = group_matches_by_round(all_matches)
        current_round = determine_current_round(matches_by_round)
        round_matches = matches_by_round.get(current_round, [])

        if not is_round_complete(round_matches):
            raise InvalidStateError(
                f"Not all matches in round {current_round} are completed yet."
            )

        winners = get_round_winners(round_matches)

        if len(winners) == 1 and current_round > FIRST_ROUND:
            tournament.complete_tournament()
            tournaments.update(tournament)
            logger.info(
                f"Tournament {tournament_id} completed after round {current_round}; "
                f"champion {winners[0]}."
            )
            return AdvanceTournamentOutcome(
                tournament_id=tournament_id,
                updated_status=TournamentStatus.COMPLETED,
                next_round_matches=[],
                is_complete=True,
                winner_id=winners[0],
            )

        next_round_matches = create_next_round_matches(
            matches, tournament_id, winners, current_round + 1, now=now
        )
        logger.info(
            f"Tournament {tournament_id} advanced to round {current_round + 1} "
            f"with {len(next_round_matches)} matches."
        )
        return AdvanceTournamentOutcome(
            tournament_id=tournament_id,
            updated_status=tournament.status,
            next_round_matches=next_round_matches,
            is_complete=False,
        )

    @staticmethod
    def get_standings(
        tournament_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        tournaments: TournamentRepository | None = None,
        matches: MatchRepository | None = None,
    ) -> Result[StandingsReport]:
        """Rank every participant of a tournament by its completed matches."""
        try:
            validate_uuid(tournament_id, "tournamentId")
            page, limit = validate_pagination(page, limit)
            tournaments, matches = TournamentService._stores(tournaments, matches)

            tournament = TournamentService._get_tournament(tournaments, tournament_id)
            completed = matches.find_by_filter(
                tournament_id, status=MatchStatus.COMPLETED
            )
            standings, pagination = paginate(
                calculate_standings(completed), page, limit
            )
        except Exception as e:
            return Result.from_exception("Get standings", e)

        return Result.ok(
            StandingsReport(
                tournament_id=tournament_id,
                tournament_name=tournament.name,
                tournament_status=tournament.status,
                standings=standings,
                pagination=pagination,
            )
        )

    @staticmethod
    def list_matches(  # noqa: PLR0913
        tournament_id: str,
        status: Optional[str] = None,
        round: Optional[int] = None,  # noqa: A002
        page: Optional[int] = None,
        limit: Optional[int] = None,
        tournaments: TournamentRepository | None = None,
        matches: MatchRepository | None = None,
    ) -> Result[MatchPage]:
        """List a tournament's matches, optionally filtered by status and round."""
        try:
            validate_uuid(tournament_id, "tournamentId")
            page, limit = validate_pagination(page, limit)
            match_status = _parse_status(status)
            if round is not None and (not isinstance(round, int) or round < 1):
                raise ValidationError("round must be a positive integer.")
            tournaments, matches = TournamentService._stores(tournaments, matches)

            TournamentService._get_tournament(tournaments, tournament_id)
            found = matches.find_by_filter(
                tournament_id, status=match_status, round=round
            )
            page_matches, pagination = paginate(found, page, limit)
        except Exception as e:
            return Result.from_exception("List matches", e)

        return Result.ok(
            MatchPage(
                tournament_id=tournament_id,
                matches=page_matches,
                pagination=pagination,
            )
        )

    @staticmethod
    def get_bracket(
        tournament_id: str,
        tournaments: TournamentRepository | None = None,
        matches: MatchRepository | None = None,
    ) -> Result[BracketView]:
        """Return the tournament's matches grouped by round.

        A tournament without matches yields an empty bracket with
        ``max_round`` 0.
        """
        try:
            validate_uuid(tournament_id, "tournamentId")
            tournaments, matches = TournamentService._stores(tournaments, matches)

            TournamentService._get_tournament(tournaments, tournament_id)
            all_matches = matches.find_by_filter(tournament_id)
        except Exception as e:
            return Result.from_exception("Get bracket", e)

        matches_by_round = group_matches_by_round(all_matches)
        rounds = [
            BracketRound(round=number, matches=matches_by_round[number])
            for number in sorted(matches_by_round)
        ]
        return Result.ok(
            BracketView(
                tournament_id=tournament_id,
                rounds=rounds,
                total_matches=len(all_matches),
                max_round=rounds[-1].round if rounds else 0,
            )
        )

    @staticmethod
    def start_tournament(
        tournament_id: str, tournaments: TournamentRepository | None = None
    ) -> Result[TournamentStatusChange]:
        """Open play on a tournament that is accepting registrations."""
        try:
            validate_uuid(tournament_id, "tournamentId")
            if tournaments is None:
                tournaments = TournamentStore(firestore.client())
            tournament = TournamentService._get_tournament(tournaments, tournament_id)
            tournament.start_tournament()
            tournaments.update(tournament)
        except Exception as e:
            return Result.from_exception("Start tournament", e)

        logger.info(f"Tournament {tournament_id} started.")
        return Result.ok(
            TournamentStatusChange(tournament, "Tournament started successfully.")
        )

    @staticmethod
    def cancel_tournament(
        tournament_id: str, tournaments: TournamentRepository | None = None
    ) -> Result[TournamentStatusChange]:
        try:
            validate_uuid(tournament_id, "tournamentId")
            if tournaments is None:
                tournaments = TournamentStore(firestore.client())
            tournament = TournamentService._get_tournament(tournaments, tournament_id)
            tournament.cancel_tournament()
            tournaments.update(tournament)
        except Exception as e:
            return Result.from_exception("Cancel tournament", e)

        logger.info(f"Tournament {tournament_id} cancelled.")
        return Result.ok(
            TournamentStatusChange(tournament, "Tournament cancelled successfully.")
        )


def _parse_status(status: Optional[str]) -> Optional[MatchStatus]:
    if status is None:
        return None
    try:
        return MatchStatus(status.upper())
    except (ValueError, AttributeError) as e:
        raise ValidationError(f"Unknown match status: {status}.") from e
