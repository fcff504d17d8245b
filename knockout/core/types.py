"""Core data types for the knockout application."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (  # noqa: UP035
    TYPE_CHECKING,
    Any,
    Dict,
    Generic,
    Optional,
    Protocol,
    TypedDict,
    TypeVar,
)

from knockout.errors import AppError, PersistenceError

if TYPE_CHECKING:
    from knockout.match.models import Match, MatchStatus
    from knockout.tournament.models import Tournament

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    updatedAt: Any


class APIResponse(TypedDict):
    """Generic API response structure."""

    success: bool
    message: str
    data: Optional[Dict[str, Any]]  # noqa: UP006


@dataclass
class Result(Generic[T]):
    """Outcome of a service operation: either a value or an error."""

    value: Optional[T] = None
    error: Optional[AppError] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, error: AppError) -> Result[T]:
        return cls(error=error)

    @classmethod
    def from_exception(cls, operation: str, error: Exception) -> Result[T]:
        """Log and fail with ``error``.

        Application errors are logged as warnings and returned as they are.
        Anything else is logged with its traceback and wrapped in a
        PersistenceError chained to the original.
        """
        if isinstance(error, AppError):
            logger.warning(f"{operation} failed: {error.message}")
            return cls.fail(error)
        logger.error(
            f"{operation} failed with a store error: {error}", exc_info=error
        )
        wrapped = PersistenceError(f"{operation} failed: {error}")
        wrapped.__cause__ = error
        return cls.fail(wrapped)


class MatchRepository(Protocol):
    """Match store used by the bracket and standings engine."""

    def find_by_filter(
        self,
        tournament_id: str,
        status: Optional[MatchStatus] = None,
        round: Optional[int] = None,  # noqa: A002
    ) -> list[Match]: ...

    def find_by_id(self, match_id: str) -> Optional[Match]: ...

    def save(self, match: Match) -> None: ...


class TournamentRepository(Protocol):
    """Tournament store used by the bracket and standings engine."""

    def find_by_id(self, tournament_id: str) -> Optional[Tournament]: ...

    def update(self, tournament: Tournament) -> None: ...
