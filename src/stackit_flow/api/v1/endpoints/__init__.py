"""API endpoint modules for version 1."""

from .answers import router as answers_router
from .auth import router as auth_router
from .questions import router as questions_router
from .tags import router as tags_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "questions_router",
    "answers_router",
    "votes_router",
    "tags_router",
    "users_router",
]
