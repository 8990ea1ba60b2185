"""Account registration, credential checks and server-side sessions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from jose import JWTError
from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from stackit_flow.core import security
from stackit_flow.core.settings import settings
from stackit_flow.db.time import hours_from_now, utcnow
from stackit_flow.models import User, UserSession
from stackit_flow.services.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
)
from stackit_flow.services.transactions import atomic

logger = logging.getLogger(__name__)

__all__ = [
    "IssuedSession",
    "register_user",
    "authenticate",
    "open_session",
    "resolve_session",
    "close_session",
    "update_profile",
    "change_password",
    "cleanup_expired_sessions",
]


@dataclass(frozen=True)
class IssuedSession:
    user: User
    token: str


def _ensure_unique_identity(
    db: Session,
    *,
    username: str | None,
    email: str | None,
    exclude_user_id: int | None = None,
) -> None:
    clauses = []
    if username:
        clauses.append(User.username == username)
    if email:
        clauses.append(User.email == email)
    if not clauses:
        return
    stmt = select(User.id).where(or_(*clauses))
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    if db.execute(stmt).first() is not None:
        raise ConflictError("Username or email already exists")


def _persist_session(db: Session, user_id: int) -> str:
    token = security.create_access_token(user_id)
    db.add(
        UserSession(
            user_id=user_id,
            token_hash=security.hash_token(token),
            expires_at=hours_from_now(settings.session_ttl_hours),
        )
    )
    return token


def register_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    full_name: str | None = None,
    bio: str | None = None,
) -> IssuedSession:
    """Create an account and log it in."""
    with atomic(db):
        _ensure_unique_identity(db, username=username, email=email)
        user = User(
            username=username,
            email=email,
            password_hash=security.hash_password(password),
            full_name=full_name,
            bio=bio or "",
        )
        db.add(user)
        db.flush()
        token = _persist_session(db, user.id)
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, username)
    return IssuedSession(user=user, token=token)


def authenticate(db: Session, *, username: str, password: str) -> User:
    """Return the user whose credentials match, or raise ``UnauthorizedError``."""
    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if user is None or not security.verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid username or password")
    return user


def open_session(db: Session, user: User) -> IssuedSession:
    with atomic(db):
        token = _persist_session(db, user.id)
    db.refresh(user)
    return IssuedSession(user=user, token=token)


def resolve_session(db: Session, token: str) -> User:
    """Return the user behind a bearer token.

    The token must verify as a JWT and match a live session row for the same
    user.
    """
    try:
        payload: dict[str, Any] = security.decode_access_token(token)
        user_id = int(str(payload.get("sub")))
    except (JWTError, ValueError) as err:
        raise UnauthorizedError("Invalid token") from err

    session_row = db.execute(
        select(UserSession).where(
            UserSession.token_hash == security.hash_token(token),
            UserSession.expires_at > utcnow(),
        )
    ).scalar_one_or_none()
    if session_row is None or session_row.user_id != user_id:
        raise UnauthorizedError("Session expired or invalid")

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def close_session(db: Session, token: str) -> None:
    with atomic(db):
        db.execute(delete(UserSession).where(UserSession.token_hash == security.hash_token(token)))


def update_profile(db: Session, user_id: int, changes: dict[str, Any]) -> User:
    """Apply a partial profile update; reputation is never writable here."""
    with atomic(db):
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        _ensure_unique_identity(
            db,
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_user_id=user_id,
        )
        for key in ("username", "email", "full_name", "bio", "avatar_url"):
            if key in changes and changes[key] is not None:
                setattr(user, key, changes[key])
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, *, current_password: str, new_password: str) -> None:
    with atomic(db):
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not security.verify_password(current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect")
        user.password_hash = security.hash_password(new_password)
    logger.info("Password changed for user %s", user_id)


def cleanup_expired_sessions(db: Session) -> int:
    """Delete expired sessions and return how many were removed."""
    with atomic(db):
        result = db.execute(
            delete(UserSession)
            .where(UserSession.expires_at <= utcnow())
            .execution_options(synchronize_session=False)
        )
        deleted = result.rowcount or 0
    logger.info("Removed %d expired sessions", deleted)
    return deleted
