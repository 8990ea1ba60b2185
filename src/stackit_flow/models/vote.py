# src/stackit_flow/models/vote.py
"""Models capturing votes cast on questions and answers."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from stackit_flow.db.session import Base
from stackit_flow.db.time import utcnow

VOTE_UNIQUE_CONSTRAINT = "uq_votes_user_target"


class TargetType(str, enum.Enum):
    """Kinds of content that can receive votes."""

    question = "question"
    answer = "answer"


class Vote(Base):
    """Ledger row: one user's vote on one target.

    The ledger is the source of truth for ``Question.votes``,
    ``Answer.votes`` and the answer part of ``User.reputation``.
    """

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id", name=VOTE_UNIQUE_CONSTRAINT),
        CheckConstraint("value IN (1, -1)", name="ck_votes_value"),
        CheckConstraint("target_type IN ('question', 'answer')", name="ck_votes_target_type"),
        Index("ix_votes_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Polymorphic reference; no FK, cleanup happens in the content services.
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
