# src/stackit_flow/models/tag.py
"""SQLAlchemy model for question tags."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit_flow.db.session import Base
from stackit_flow.db.time import utcnow

from .question import question_tags

if TYPE_CHECKING:
    from .question import Question


class Tag(Base):
    """Topic label attached to questions."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#007bff")
    # Number of questions carrying this tag; recomputed whenever links change.
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    questions: Mapped[list[Question]] = relationship(
        "Question",
        secondary=question_tags,
        back_populates="tags",
    )
