"""Timestamps for column defaults and session expiry."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    return datetime.now(UTC)


def hours_from_now(hours: int) -> datetime:
    """Return the UTC instant ``hours`` after now; used for session expiry."""
    return utcnow() + timedelta(hours=hours)
