"""Core module for the knockout application."""

from .types import (
    APIResponse,
    FirestoreDocument,
    MatchRepository,
    Result,
    TournamentRepository,
)

__all__ = [
    "APIResponse",
    "FirestoreDocument",
    "MatchRepository",
    "Result",
    "TournamentRepository",
]
