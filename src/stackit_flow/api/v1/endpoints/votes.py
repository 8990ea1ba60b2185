"""Vote endpoints for the StackIt Flow API."""

import logging

from fastapi import APIRouter, status

from stackit_flow.core.settings import settings
from stackit_flow.models import TargetType
from stackit_flow.schemas.vote import (
    UserVoteResponse,
    VoteCountResponse,
    VoteCreate,
    VoteResponse,
)
from stackit_flow.services import votes as vote_service
from stackit_flow.services.errors import VoteConflictError

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=VoteResponse, status_code=status.HTTP_200_OK)
def cast_vote(
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Upvote, downvote, switch or toggle off a vote on a question or answer.

    A cast that loses an insert race to a concurrent request from the same
    user is re-issued up to ``VOTE_CONFLICT_RETRIES`` times; it then resolves
    against the winning row.
    """
    retries = 0
    while True:
        try:
            outcome = vote_service.cast_vote(
                db,
                user_id=current_user.id,
                target_type=vote_data.target_type,
                target_id=vote_data.target_id,
                value=vote_data.value,
            )
            break
        except VoteConflictError:
            if retries >= settings.vote_conflict_retries:
                raise
            retries += 1
            logger.info(
                "Retrying vote by user %s on %s %s (retry %d)",
                current_user.id,
                vote_data.target_type.value,
                vote_data.target_id,
                retries,
            )
    return VoteResponse(action=outcome.action.value, value=outcome.value, votes=outcome.votes)


@router.get("/{target_type}/{target_id}", response_model=VoteCountResponse)
def get_vote_count(target_type: TargetType, target_id: int, db: SessionDep) -> VoteCountResponse:
    """Return the stored vote counter of a question or answer."""
    votes = vote_service.get_vote_count(db, target_type, target_id)
    return VoteCountResponse(target_id=target_id, target_type=target_type, votes=votes)


@router.get("/{target_type}/{target_id}/user", response_model=UserVoteResponse)
def get_user_vote(
    target_type: TargetType,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UserVoteResponse:
    """Return the caller's vote on a target, or null if none."""
    user_vote = vote_service.get_user_vote(db, current_user.id, target_type, target_id)
    return UserVoteResponse(target_id=target_id, target_type=target_type, user_vote=user_vote)
