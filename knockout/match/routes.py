"""Routes for the match blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, request

from knockout.errors import ValidationError
from knockout.utils import api_response, parse_datetime

from . import bp
from .services import MatchService


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


@bp.route("/<string:match_id>", methods=["GET"])
def view_match(match_id: str) -> Any:
    """Return a single match."""
    return api_response(MatchService.get_match(match_id))


@bp.route("/<string:match_id>/schedule", methods=["POST"])
def schedule_match(match_id: str) -> Any:
    """Set the date and venue of a match."""
    data = _json_body()
    scheduled_date = parse_datetime(data.get("scheduledDate"), "scheduledDate")
    location = data.get("location")
    if location is not None and not isinstance(location, str):
        raise ValidationError("location must be a string.")

    result = MatchService.schedule_match(match_id, scheduled_date, location)
    return api_response(result, "Match scheduled.")


@bp.route("/<string:match_id>/start", methods=["POST"])
def start_match(match_id: str) -> Any:
    """Put a scheduled match in progress."""
    return api_response(MatchService.start_match(match_id), "Match started.")


@bp.route("/<string:match_id>/cancel", methods=["POST"])
def cancel_match(match_id: str) -> Any:
    return api_response(MatchService.cancel_match(match_id), "Match canceled.")


@bp.route("/<string:match_id>/result", methods=["POST"])
def record_result(match_id: str) -> Any:
    """Record the final score of a match."""
    data = _json_body()
    result = MatchService.record_match_result(
        match_id, data.get("homeScore"), data.get("awayScore")
    )
    if result.is_success:
        current_app.logger.info(f"Result recorded for match {match_id}.")
    return api_response(result, "Result recorded.")
