# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

from datetime import timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import update

from stackit_flow.api.v1.dependencies import get_bearer_token, get_current_user, get_limit, require_admin
from stackit_flow.core.security import create_access_token
from stackit_flow.core.settings import settings
from stackit_flow.db.time import utcnow
from stackit_flow.models import UserSession


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    """Test the get_current_user dependency."""

    def test_valid_session(self, db_session, voter, headers_for):
        token = headers_for(voter)["Authorization"].split()[1]
        assert get_current_user(token, db_session).id == voter.id

    def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            get_bearer_token(None)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert get_bearer_token(_bearer("abc")) == "abc"

    def test_signed_token_without_session(self, db_session, voter):
        token = create_access_token(voter.id)
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token, db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_garbage_token(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user("not-a-jwt", db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_session(self, db_session, voter, headers_for):
        token = headers_for(voter)["Authorization"].split()[1]
        db_session.execute(
            update(UserSession)
            .where(UserSession.user_id == voter.id)
            .values(expires_at=utcnow() - timedelta(minutes=1))
        )
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token, db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_session_for_different_user(self, db_session, voter, answerer, headers_for):
        token = headers_for(voter)["Authorization"].split()[1]
        db_session.execute(
            update(UserSession).where(UserSession.user_id == voter.id).values(user_id=answerer.id)
        )
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token, db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_require_admin(make_user):
    with pytest.raises(HTTPException) as exc_info:
        require_admin(make_user())
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    admin = make_user(is_admin=True)
    assert require_admin(admin) is admin


def test_limit_is_clamped():
    assert get_limit(None) == settings.page_size_default
    assert get_limit(5) == 5
    assert get_limit(settings.page_size_max + 50) == settings.page_size_max
