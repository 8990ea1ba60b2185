"""Domain errors raised by the forum services.

Each error carries the HTTP status the API layer answers with; the handlers
registered in ``stackit_flow.main`` render them as ``{"detail": message}``.
"""
from __future__ import annotations

from fastapi import status


class ForumError(Exception):
    """Base class for expected, user-visible failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(ForumError):
    """Input passed schema validation but breaks a business rule."""


class InvalidInputError(ForumError):
    """Malformed input rejected before any write."""

    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT


class UnauthorizedError(ForumError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ForumError):
    """Authenticated caller may not perform the operation."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ForumError):
    """Referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ForumError):
    """A uniqueness constraint rejected the write."""

    status_code = status.HTTP_409_CONFLICT


class VoteConflictError(ConflictError):
    """A concurrent request inserted the same (user, target) vote first.

    The transaction has been rolled back; re-issuing the cast applies it
    against the row that won the race.
    """
