"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, request

from knockout.utils import api_response, int_arg

from . import bp
from .services import TournamentService


@bp.route("/<string:tournament_id>/advance", methods=["POST"])
def advance_tournament(tournament_id: str) -> Any:
    """Advance the bracket past its current round."""
    result = TournamentService.advance_tournament(tournament_id)
    if result.is_success and result.value.is_complete:
        current_app.logger.info(
            f"Tournament {tournament_id} won by {result.value.winner_id}."
        )
        return api_response(result, "Tournament completed.")
    return api_response(result, "Next round created.")


@bp.route("/<string:tournament_id>/standings", methods=["GET"])
def view_standings(tournament_id: str) -> Any:
    """Return a page of tournament standings."""
    result = TournamentService.get_standings(
        tournament_id,
        page=int_arg(request.args, "page"),
        limit=int_arg(request.args, "limit"),
    )
    return api_response(result)


@bp.route("/<string:tournament_id>/matches", methods=["GET"])
def list_matches(tournament_id: str) -> Any:
    """Return a page of the tournament's matches."""
    result = TournamentService.list_matches(
        tournament_id,
        status=request.args.get("status"),
        round=int_arg(request.args, "round"),
        page=int_arg(request.args, "page"),
        limit=int_arg(request.args, "limit"),
    )
    return api_response(result)


@bp.route("/<string:tournament_id>/bracket", methods=["GET"])
def view_bracket(tournament_id: str) -> Any:
    """Return the tournament's matches grouped by round."""
    return api_response(TournamentService.get_bracket(tournament_id))


@bp.route("/<string:tournament_id>/start", methods=["POST"])
def start_tournament(tournament_id: str) -> Any:
    result = TournamentService.start_tournament(tournament_id)
    return api_response(result, "Tournament started.")


@bp.route("/<string:tournament_id>/cancel", methods=["POST"])
def cancel_tournament(tournament_id: str) -> Any:
    result = TournamentService.cancel_tournament(tournament_id)
    return api_response(result, "Tournament cancelled.")
