"""Standings calculation for tournaments."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from knockout.core.constants import POINTS_PER_WIN
from knockout.match.models import Match, TeamIdentity


@dataclass
class PlayerStanding:
    """Aggregated results for one participant identity."""

    player_id: TeamIdentity
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    points: int = 0
    position: int = 0

    @property
    def win_ratio(self) -> float:
        # A row with no results ranks like an all-losses row.
        return self.wins / ((self.wins + self.losses) or 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            # No player directory is consulted, so the id is the display name.
            "playerName": self.player_id,
            "position": self.position,
            "points": self.points,
            "matchesPlayed": self.matches_played,
            "wins": self.wins,
            "losses": self.losses,
        }


@dataclass
class Pagination:
    """Pagination metadata for a sliced result list."""

    total_items: int
    items_per_page: int
    current_page: int
    total_pages: int

    def to_dict(self) -> dict[str, int]:
        return {
            "totalItems": self.total_items,
            "itemsPerPage": self.items_per_page,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
        }


def _record(row: PlayerStanding, won: bool) -> None:
    row.matches_played += 1
    if won:
        row.wins += 1
        row.points += POINTS_PER_WIN
    else:
        row.losses += 1


def aggregate_match_results(matches: list[Match]) -> dict[str, PlayerStanding]:
    """Build one standings row per identity appearing in a decided match."""
    standings: dict[str, PlayerStanding] = {}

    for match in matches:
        if not match.is_decided:
            continue
        home_id = match.home_player_one_id
        away_id = match.away_player_one_id

        for pid in (home_id, away_id):
            if pid not in standings:
                standings[pid] = PlayerStanding(player_id=pid)

        _record(standings[home_id], match.home_score > match.away_score)  # type: ignore[operator]
        _record(standings[away_id], match.away_score > match.home_score)  # type: ignore[operator]

    return standings


def rank_standings(raw_standings: dict[str, PlayerStanding]) -> list[PlayerStanding]:
    """Sort by points then win ratio (both descending) and assign positions.

    Rows that tie on both keys keep the order they were first seen in.
    """
    standings_list = sorted(
        raw_standings.values(),
        key=lambda s: (s.points, s.win_ratio),
        reverse=True,
    )
    for index, standing in enumerate(standings_list):
        standing.position = index + 1
    return standings_list


def paginate(items: list[Any], page: int, limit: int) -> tuple[list[Any], Pagination]:
    """Slice ``items`` to the requested 1-based page."""
    total_items = len(items)
    start = (page - 1) * limit
    pagination = Pagination(
        total_items=total_items,
        items_per_page=limit,
        current_page=page,
        total_pages=math.ceil(total_items / limit),
    )
    return items[start : start + limit], pagination


def calculate_standings(matches: list[Match]) -> list[PlayerStanding]:
    """Aggregate and rank all decided matches."""
    return rank_standings(aggregate_match_results(matches))

