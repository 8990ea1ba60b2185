"""Authentication endpoints for the StackIt Flow API."""

from fastapi import APIRouter, status

from stackit_flow.schemas.common import MessageResponse
from stackit_flow.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionCleanupResponse,
    UserPrivate,
)
from stackit_flow.services import auth as auth_service

from ..dependencies import AdminUserDep, CurrentUserDep, SessionDep, TokenDep

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_response(issued: auth_service.IssuedSession) -> AuthResponse:
    return AuthResponse(user=UserPrivate.model_validate(issued.user), token=issued.token)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Create an account and return a session token for it."""
    issued = auth_service.register_user(
        db,
        username=payload.username,
        email=str(payload.email),
        password=payload.password,
        full_name=payload.full_name,
        bio=payload.bio,
    )
    return _auth_response(issued)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange username and password for a session token."""
    user = auth_service.authenticate(db, username=payload.username, password=payload.password)
    return _auth_response(auth_service.open_session(db, user))


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: CurrentUserDep, token: TokenDep, db: SessionDep) -> MessageResponse:
    """End the session the request was authenticated with."""
    auth_service.close_session(db, token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserPrivate)
def read_me(current_user: CurrentUserDep) -> UserPrivate:
    return UserPrivate.model_validate(current_user)


@router.put("/profile", response_model=UserPrivate)
def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UserPrivate:
    """Apply a partial update to the caller's profile."""
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("email") is not None:
        changes["email"] = str(changes["email"])
    user = auth_service.update_profile(db, current_user.id, changes)
    return UserPrivate.model_validate(user)


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    auth_service.change_password(
        db,
        current_user.id,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return MessageResponse(message="Password changed successfully")


@router.delete("/sessions/cleanup", response_model=SessionCleanupResponse)
def cleanup_sessions(admin: AdminUserDep, db: SessionDep) -> SessionCleanupResponse:
    """Remove expired sessions (admin only)."""
    return SessionCleanupResponse(deleted_count=auth_service.cleanup_expired_sessions(db))
