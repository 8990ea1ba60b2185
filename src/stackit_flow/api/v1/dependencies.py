"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from stackit_flow.core.settings import settings
from stackit_flow.db.session import get_db
from stackit_flow.models import User
from stackit_flow.services import auth as auth_service
from stackit_flow.services.errors import UnauthorizedError

# Missing credentials are reported as 401 by get_current_user, not by the scheme.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_bearer_token(credentials: CredentialsDep) -> str:
    """Return the raw bearer token or reject the request."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Access token required")
    return credentials.credentials


TokenDep = Annotated[str, Depends(get_bearer_token)]


def get_current_user(token: TokenDep, db: SessionDep) -> User:
    """Get the current authenticated user from the bearer token.

    The JWT must verify and a live session row must exist for the same user.

    Raises:
        HTTPException: 401 if the token or session is invalid or expired.
    """
    try:
        return auth_service.resolve_session(db, token)
    except UnauthorizedError as err:
        raise _unauthorized(err.message) from err


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_admin(current_user: CurrentUserDep) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


AdminUserDep = Annotated[User, Depends(require_admin)]


def get_page(page: Annotated[int, Query(ge=1)] = 1) -> int:
    return page


def get_limit(limit: Annotated[int | None, Query(ge=1)] = None) -> int:
    """Clamp the requested page size to the configured maximum."""
    if limit is None:
        return settings.page_size_default
    return min(limit, settings.page_size_max)


PageDep = Annotated[int, Depends(get_page)]
LimitDep = Annotated[int, Depends(get_limit)]
