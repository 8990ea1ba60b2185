"""Tag-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

TAG_NAME_PATTERN = r"^[a-z0-9-]+$"


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=2, max_length=20, pattern=TAG_NAME_PATTERN)
    description: str | None = Field(None, max_length=200)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


class TagUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=20, pattern=TAG_NAME_PATTERN)
    description: str | None = Field(None, max_length=200)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


class TagResponse(BaseModel):
    id: int
    name: str
    description: str
    color: str
    count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
