"""Version 1 API endpoints."""

from .endpoints import (
    answers_router,
    auth_router,
    questions_router,
    tags_router,
    users_router,
    votes_router,
)

__all__ = [
    "auth_router",
    "questions_router",
    "answers_router",
    "votes_router",
    "tags_router",
    "users_router",
]
