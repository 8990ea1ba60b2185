"""User profile endpoints for the StackIt Flow API."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from stackit_flow.schemas.answer import (
    AnswerResponse,
    UserAnswerListResponse,
    UserAnswerResponse,
)
from stackit_flow.schemas.common import Pagination
from stackit_flow.schemas.question import QuestionListResponse
from stackit_flow.schemas.user import (
    ReputationEvent,
    UserProfileResponse,
    UserPublic,
    UserStatsResponse,
)
from stackit_flow.schemas.vote import VoteHistoryItem
from stackit_flow.services import questions as question_service
from stackit_flow.services import users as user_service
from stackit_flow.services import votes as vote_service

from ..dependencies import CurrentUserDep, LimitDep, PageDep, SessionDep
from .questions import page_response

router = APIRouter(prefix="/users", tags=["users"])

ListLimit = Annotated[int, Query(ge=1, le=100)]


@router.get("/search", response_model=list[UserPublic])
def search_users(
    db: SessionDep,
    q: Annotated[str, Query(min_length=1, max_length=100)],
    limit: ListLimit = 10,
) -> list[UserPublic]:
    """Match usernames and bios, highest reputation first."""
    return [UserPublic.model_validate(u) for u in user_service.search_users(db, q, limit=limit)]


@router.get("/top", response_model=list[UserPublic])
def top_users(db: SessionDep, limit: ListLimit = 10) -> list[UserPublic]:
    return [UserPublic.model_validate(u) for u in user_service.top_users(db, limit=limit)]


@router.get("/{user_id}", response_model=UserProfileResponse)
def get_user_profile(user_id: int, db: SessionDep) -> UserProfileResponse:
    user = user_service.get_user(db, user_id)
    return UserProfileResponse(
        **UserPublic.model_validate(user).model_dump(),
        **user_service.content_counts(db, user_id),
    )


@router.get("/{user_id}/questions", response_model=QuestionListResponse)
def get_user_questions(
    user_id: int,
    db: SessionDep,
    page: PageDep,
    limit: LimitDep,
) -> QuestionListResponse:
    user_service.get_user(db, user_id)
    return page_response(
        question_service.list_questions(db, author_id=user_id, page=page, limit=limit)
    )


@router.get("/{user_id}/answers", response_model=UserAnswerListResponse)
def get_user_answers(
    user_id: int,
    db: SessionDep,
    page: PageDep,
    limit: LimitDep,
) -> UserAnswerListResponse:
    result = user_service.list_user_answers(db, user_id, page=page, limit=limit)
    items = [
        UserAnswerResponse(
            **AnswerResponse.model_validate(answer).model_dump(),
            question_title=answer.question.title,
        )
        for answer in result.items
    ]
    return UserAnswerListResponse(
        items=items,
        pagination=Pagination(page=result.page, limit=result.limit, total=result.total),
    )


@router.get("/{user_id}/votes", response_model=list[VoteHistoryItem])
def get_user_votes(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> list[VoteHistoryItem]:
    """The caller's own votes; other users' votes are private."""
    if current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own votes",
        )
    votes = vote_service.list_votes_by_user(db, user_id)
    return [VoteHistoryItem.model_validate(v) for v in votes]


@router.get("/{user_id}/reputation", response_model=list[ReputationEvent])
def get_reputation_history(user_id: int, db: SessionDep) -> list[ReputationEvent]:
    """Latest vote events on the user's content."""
    return [ReputationEvent.model_validate(e) for e in user_service.reputation_history(db, user_id)]


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
def get_user_stats(user_id: int, db: SessionDep) -> UserStatsResponse:
    return UserStatsResponse(**user_service.user_stats(db, user_id))
