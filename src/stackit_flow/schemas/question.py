"""Question-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .answer import AnswerResponse
from .common import Pagination
from .user import AuthorSummary


def _clean_tags(tags: list[str]) -> list[str]:
    cleaned: list[str] = []
    for tag in tags:
        name = tag.strip().lower()
        if not name:
            raise ValueError("Tags must not be blank")
        if len(name) > 20:
            raise ValueError("Tags must be at most 20 characters")
        if name not in cleaned:
            cleaned.append(name)
    return cleaned


class QuestionCreate(BaseModel):
    """Schema for asking a question."""

    title: str = Field(..., min_length=10, max_length=500)
    content: str = Field(..., min_length=20)
    tags: list[str] = Field(..., min_length=1, max_length=5, description="1-5 tag names")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class QuestionUpdate(BaseModel):
    """Schema for editing a question; ``tags`` replaces the set when given."""

    title: str = Field(..., min_length=10, max_length=500)
    content: str = Field(..., min_length=20)
    tags: list[str] | None = Field(None, min_length=1, max_length=5)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _clean_tags(v)


class QuestionSummary(BaseModel):
    """Question as shown in listings."""

    id: int
    title: str
    content: str
    author_id: int
    votes: int
    views: int
    is_answered: bool
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary | None = None
    tags: list[str] = Field(default_factory=list)
    answer_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _flatten_tags(cls, data: object) -> object:
        if not isinstance(data, dict):
            extracted: dict[str, object | None] = {}
            for field_name in cls.model_fields:
                if hasattr(data, field_name):
                    extracted[field_name] = getattr(data, field_name)
            data = extracted

        tags = data.get("tags")
        if tags is not None:
            data["tags"] = [getattr(tag, "name", tag) for tag in tags]
        return data

    model_config = ConfigDict(from_attributes=True)


class QuestionDetail(QuestionSummary):
    """A single question with its answers in display order."""

    answers: list[AnswerResponse] = Field(default_factory=list)


class QuestionListResponse(BaseModel):
    items: list[QuestionSummary]
    pagination: Pagination
