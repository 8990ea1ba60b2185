"""User and authentication Pydantic schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


def _check_password_strength(value: str) -> str:
    if not (
        re.search(r"[a-z]", value)
        and re.search(r"[A-Z]", value)
        and re.search(r"\d", value)
    ):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, and one number"
        )
    return value


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Require mixed case and a digit."""
        return _check_password_strength(v)


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    username: str | None = Field(None, min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    email: EmailStr | None = None
    full_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=255)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _check_password_strength(v)


class AuthorSummary(BaseModel):
    """Compact author block embedded in questions and answers."""

    id: int
    username: str
    avatar_url: str | None = None
    reputation: int

    model_config = ConfigDict(from_attributes=True)


class UserPublic(BaseModel):
    """Publicly visible profile fields."""

    id: int
    username: str
    full_name: str | None = None
    bio: str
    avatar_url: str | None = None
    reputation: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserPrivate(UserPublic):
    """Profile as seen by its owner."""

    email: str
    is_admin: bool
    updated_at: datetime


class AuthResponse(BaseModel):
    """Returned by register and login."""

    user: UserPrivate
    token: str
    token_type: str = "bearer"


class UserProfileResponse(UserPublic):
    question_count: int
    answer_count: int


class UserStatsResponse(BaseModel):
    question_count: int
    answer_count: int
    accepted_answers: int
    question_votes_received: int
    answer_votes_received: int
    total_votes_received: int
    reputation: int


class ReputationEvent(BaseModel):
    """One vote on the user's content."""

    type: str = Field(..., description="question_vote or answer_vote")
    value: int
    points: int = Field(..., description="Reputation change carried by the vote")
    question_id: int
    question_title: str
    created_at: datetime


class SessionCleanupResponse(BaseModel):
    deleted_count: int
