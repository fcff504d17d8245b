"""Service layer for match data access and score recording."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Optional

from firebase_admin import firestore

from knockout.core.types import Result
from knockout.errors import InvalidStateError, NotFoundError, ValidationError
from knockout.utils import validate_score, validate_uuid

from .models import Match, MatchStatus
from .store import MatchStore

if TYPE_CHECKING:
    from knockout.core.types import MatchRepository

logger = logging.getLogger(__name__)


class MatchService:
    """Service class for match-related operations."""

    @staticmethod
    def _get_match(matches: MatchRepository, match_id: str) -> Match:
        match = matches.find_by_id(match_id)
        if match is None:
            raise NotFoundError(f"Match with ID {match_id} not found.")
        return match

    @staticmethod
    def get_match(
        match_id: str, matches: MatchRepository | None = None
    ) -> Result[Match]:
        """Fetch a single match."""
        try:
            validate_uuid(match_id, "matchId")
            if matches is None:
                matches = MatchStore(firestore.client())
            match = MatchService._get_match(matches, match_id)
        except Exception as e:
            return Result.from_exception("Get match", e)
        return Result.ok(match)

    @staticmethod
    def schedule_match(
        match_id: str,
        scheduled_date: datetime.datetime,
        location: Optional[str] = None,
        matches: MatchRepository | None = None,
    ) -> Result[Match]:
        """Set the date, and optionally the venue, of a match that is still open."""
        try:
            validate_uuid(match_id, "matchId")
            if not isinstance(scheduled_date, datetime.datetime):
                raise ValidationError("scheduledDate must be a date and time.")
            if matches is None:
                matches = MatchStore(firestore.client())
            match = MatchService._get_match(matches, match_id)
            match.schedule(scheduled_date, location)
            matches.save(match)
        except Exception as e:
            return Result.from_exception("Schedule match", e)

        logger.info(f"Match {match_id} scheduled for {scheduled_date.isoformat()}.")
        return Result.ok(match)

    @staticmethod
    def start_match(
        match_id: str, matches: MatchRepository | None = None
    ) -> Result[Match]:
        """Move a scheduled match into play."""
        try:
            validate_uuid(match_id, "matchId")
            if matches is None:
                matches = MatchStore(firestore.client())
            match = MatchService._get_match(matches, match_id)
            match.start_match()
            matches.save(match)
        except Exception as e:
            return Result.from_exception("Start match", e)
        return Result.ok(match)

    @staticmethod
    def cancel_match(
        match_id: str, matches: MatchRepository | None = None
    ) -> Result[Match]:
        try:
            validate_uuid(match_id, "matchId")
            if matches is None:
                matches = MatchStore(firestore.client())
            match = MatchService._get_match(matches, match_id)
            match.cancel_match()
            matches.save(match)
        except Exception as e:
            return Result.from_exception("Cancel match", e)

        logger.info(f"Match {match_id} canceled.")
        return Result.ok(match)

    @staticmethod
    def record_match_result(
        match_id: str,
        home_score: int,
        away_score: int,
        matches: MatchRepository | None = None,
    ) -> Result[Match]:
        """Record the final score of an in-progress match.

        Equal scores are rejected here, so every completed match has a
        strict winner by the time the bracket or standings read it.
        """
        try:
            validate_uuid(match_id, "matchId")
            validate_score(home_score, "homeScore")
            validate_score(away_score, "awayScore")
            if home_score == away_score:
                raise ValidationError(
                    "Scores cannot be equal, a winner must be determined."
                )
            if matches is None:
                matches = MatchStore(firestore.client())

            match = MatchService._get_match(matches, match_id)
            if match.status != MatchStatus.IN_PROGRESS:
                raise InvalidStateError(
                    "Only matches in IN_PROGRESS state can have results recorded."
                )
            match.update_score(home_score, away_score)
            matches.save(match)
        except Exception as e:
            return Result.from_exception("Record match result", e)

        logger.info(
            f"Recorded {home_score}-{away_score} for match {match_id} "
            f"(round {match.round}, tournament {match.tournament_id})."
        )
        return Result.ok(match)
