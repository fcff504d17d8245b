"""Utility functions for the application."""

import datetime
import uuid

from flask import jsonify

from .core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .core.types import APIResponse
from .errors import ValidationError


def validate_uuid(value, field_name="id"):
    """Return ``value`` if it is a well-formed UUID string.

    Raises:
        ValidationError: If the value is not a UUID string.
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a valid UUID.")
    try:
        uuid.UUID(value)
    except ValueError as e:
        raise ValidationError(f"{field_name} must be a valid UUID.") from e
    return value


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def validate_pagination(page=None, limit=None):
    """Apply pagination defaults and check bounds.

    Returns:
        A ``(page, limit)`` tuple.

    Raises:
        ValidationError: If page is below 1 or limit is outside 1..MAX_PAGE_SIZE.
    """
    if page is None:
        page = DEFAULT_PAGE
    if limit is None:
        limit = DEFAULT_PAGE_SIZE
    if not _is_int(page) or page < 1:
        raise ValidationError("page must be a positive integer.")
    if not _is_int(limit) or not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(
            f"limit must be an integer between 1 and {MAX_PAGE_SIZE}."
        )
    return page, limit


def validate_score(value, field_name):
    """Return ``value`` if it is a non-negative integer score."""
    if not _is_int(value) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer.")
    return value


def parse_datetime(value, field_name):
    """Parse an ISO 8601 timestamp. Naive values are taken as UTC.

    Raises:
        ValidationError: If the value is missing or not ISO 8601.
    """
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field_name} must be an ISO 8601 date and time.")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(
            f"{field_name} must be an ISO 8601 date and time."
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def int_arg(args, name):
    """Read an optional integer query argument.

    Raises:
        ValidationError: If the argument is present but not an integer.
    """
    raw = args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be an integer.") from e


def api_response(result, message=""):
    """Render a successful service result as an APIResponse, or raise its error."""
    if not result.is_success:
        raise result.error
    payload: APIResponse = {
        "success": True,
        "message": message,
        "data": result.value.to_dict(),
    }
    return jsonify(payload)
