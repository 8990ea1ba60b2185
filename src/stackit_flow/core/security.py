"""Password hashing and token helpers."""
from __future__ import annotations

import hashlib
import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import jwt

from stackit_flow.core.settings import settings


def hash_password(password: str) -> str:
    """Return a bcrypt hash of ``password`` using the configured cost factor."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Malformed hashes are treated as a mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def hash_token(token: str) -> str:
    """Return a SHA-256 hash of a bearer token for session storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_access_token(user_id: int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a signed JWT access token for ``user_id``."""
    # jti keeps tokens issued within the same second distinct.
    to_encode: dict[str, object] = {"sub": str(user_id), "jti": secrets.token_urlsafe(16)}
    if extra_claims:
        to_encode.update(extra_claims)
    issued_at = datetime.now(UTC)
    to_encode["iat"] = issued_at
    to_encode["exp"] = issued_at + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, object]:
    """Decode and verify a JWT, raising ``jose.JWTError`` when invalid or expired."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
