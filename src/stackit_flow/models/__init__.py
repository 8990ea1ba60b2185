# src/stackit_flow/models/__init__.py
"""SQLAlchemy models for the StackIt Flow forum."""

from .answer import Answer
from .question import Question, question_tags
from .tag import Tag
from .user import User, UserSession
from .vote import TargetType, Vote

__all__ = [
    "Answer",
    "Question", "question_tags",
    "Tag",
    "User", "UserSession",
    "TargetType", "Vote",
]
