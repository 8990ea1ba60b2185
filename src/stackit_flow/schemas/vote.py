"""Vote-related Pydantic schemas.

Vote payloads use camelCase on the wire.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from stackit_flow.models import TargetType


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    target_id: int = Field(..., ge=1, alias="targetId")
    target_type: TargetType = Field(..., alias="targetType")
    value: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")

    model_config = ConfigDict(populate_by_name=True)


class VoteResponse(BaseModel):
    """Result of a cast: what happened and the target's new counter."""

    action: Literal["created", "updated", "removed"]
    value: int | None = Field(..., description="The vote now on record, or null after toggle-off")
    votes: int


class VoteCountResponse(BaseModel):
    target_id: int = Field(..., alias="targetId")
    target_type: TargetType = Field(..., alias="targetType")
    votes: int

    model_config = ConfigDict(populate_by_name=True)


class UserVoteResponse(BaseModel):
    target_id: int = Field(..., alias="targetId")
    target_type: TargetType = Field(..., alias="targetType")
    user_vote: int | None = Field(..., alias="userVote")

    model_config = ConfigDict(populate_by_name=True)


class VoteHistoryItem(BaseModel):
    """One of the caller's own votes with a label for its target."""

    id: int
    target_id: int
    target_type: TargetType
    value: int
    target_content: str | None = None
    created_at: datetime
