"""Answer-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination
from .user import AuthorSummary


class AnswerCreate(BaseModel):
    """Schema for posting an answer."""

    question_id: int = Field(..., ge=1)
    content: str = Field(..., min_length=20, description="Answer body")


class AnswerUpdate(BaseModel):
    content: str = Field(..., min_length=20)


class AnswerResponse(BaseModel):
    """Answer as returned by the API."""

    id: int
    question_id: int
    author_id: int
    content: str
    votes: int
    is_accepted: bool
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class UserAnswerResponse(AnswerResponse):
    """Answer listed on its author's profile, with the question it answers."""

    question_title: str


class UserAnswerListResponse(BaseModel):
    items: list[UserAnswerResponse]
    pagination: Pagination
