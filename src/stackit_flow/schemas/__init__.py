"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .answer import AnswerCreate, AnswerResponse, AnswerUpdate
from .common import MessageResponse, Pagination
from .question import QuestionCreate, QuestionDetail, QuestionSummary, QuestionUpdate
from .tag import TagCreate, TagResponse, TagUpdate
from .user import AuthResponse, RegisterRequest, UserPrivate, UserPublic
from .vote import VoteCreate, VoteResponse

__all__ = [
    "AnswerCreate", "AnswerResponse", "AnswerUpdate",
    "MessageResponse", "Pagination",
    "QuestionCreate", "QuestionDetail", "QuestionSummary", "QuestionUpdate",
    "TagCreate", "TagResponse", "TagUpdate",
    "AuthResponse", "RegisterRequest", "UserPrivate", "UserPublic",
    "VoteCreate", "VoteResponse",
]
