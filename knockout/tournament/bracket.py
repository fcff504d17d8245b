"""Single elimination bracket progression.

The current round is recomputed from the full match set on every call rather
than stored on the tournament.
"""

from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Optional

from knockout.core.constants import NEXT_ROUND_DELAY
from knockout.match.models import Match, MatchStatus, TeamIdentity

if TYPE_CHECKING:
    from knockout.core.types import MatchRepository

logger = logging.getLogger(__name__)

FIRST_ROUND = 1


def group_matches_by_round(matches: list[Match]) -> dict[int, list[Match]]:
    """Partition matches by round number, keeping their order within a round."""
    matches_by_round: dict[int, list[Match]] = defaultdict(list)
    for match in matches:
        matches_by_round[match.round].append(match)
    return dict(matches_by_round)


def is_round_complete(matches: list[Match]) -> bool:
    return all(match.status == MatchStatus.COMPLETED for match in matches)


def determine_current_round(matches_by_round: dict[int, list[Match]]) -> int:
    """Return the lowest round that still has unfinished matches.

    When every round is complete the highest round is returned, so the caller
    can check its winners for a champion. An empty mapping yields round 1.
    """
    if not matches_by_round:
        return FIRST_ROUND

    rounds = sorted(matches_by_round)
    for round_number in rounds:
        if not is_round_complete(matches_by_round[round_number]):
            return round_number
    return rounds[-1]


def get_round_winners(matches: list[Match]) -> list[TeamIdentity]:
    """Collect the winner of each decided match, in match order."""
    winners = []
    for match in matches:
        if not match.is_decided:
            continue
        winners.append(match.winner_id)
    return winners


def _build_next_round_match(
    tournament_id: str,
    home: TeamIdentity,
    away: TeamIdentity,
    next_round: int,
    scheduled_date: datetime.datetime,
) -> Match:
    return Match(
        tournament_id=tournament_id,
        home_player_one_id=home,
        home_player_two_id=home,
        away_player_one_id=away,
        away_player_two_id=away,
        round=next_round,
        status=MatchStatus.SCHEDULED,
        scheduled_date=scheduled_date,
        location="",
    )


def create_next_round_matches(
    match_store: MatchRepository,
    tournament_id: str,
    winners: list[TeamIdentity],
    next_round: int,
    now: Optional[datetime.datetime] = None,
) -> list[Match]:
    """Pair winners into next-round matches and persist each one.

    With an odd number of winners the last one gets a bye, stored as a match
    against itself and returned first. Remaining winners are paired in order:
    (w0, w1), (w2, w3), ...

    If the next round already has matches (a concurrent or repeated advance),
    those are returned and nothing new is written. Saves are sequential and
    not rolled back if a later one fails.
    """
    existing = match_store.find_by_filter(tournament_id, round=next_round)
    if existing:
        logger.warning(
            f"Round {next_round} of tournament {tournament_id} already has "
            f"{len(existing)} matches; skipping creation."
        )
        return existing

    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    scheduled_date = now + NEXT_ROUND_DELAY

    new_matches = []
    paired = list(winners)

    if len(paired) % 2 != 0 and len(paired) > 1:
        bye_winner = paired.pop()
        bye_match = _build_next_round_match(
            tournament_id, bye_winner, bye_winner, next_round, scheduled_date
        )
        match_store.save(bye_match)
        new_matches.append(bye_match)
        logger.info(
            f"Player {bye_winner} receives a bye into round {next_round} "
            f"of tournament {tournament_id}."
        )

    for i in range(0, len(paired) - 1, 2):
        match = _build_next_round_match(
            tournament_id, paired[i], paired[i + 1], next_round, scheduled_date
        )
        match_store.save(match)
        new_matches.append(match)

    return new_matches
