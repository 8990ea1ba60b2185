"""Tag endpoints for the StackIt Flow API."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from stackit_flow.schemas.common import MessageResponse
from stackit_flow.schemas.question import QuestionListResponse
from stackit_flow.schemas.tag import TagCreate, TagResponse, TagUpdate
from stackit_flow.services import questions as question_service
from stackit_flow.services import tags as tag_service

from ..dependencies import CurrentUserDep, LimitDep, PageDep, SessionDep
from .questions import page_response

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[TagResponse])
def list_tags(db: SessionDep) -> list[TagResponse]:
    """All tags, most used first."""
    return [TagResponse.model_validate(t) for t in tag_service.list_tags(db)]


@router.get("/popular", response_model=list[TagResponse])
def popular_tags(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[TagResponse]:
    return [TagResponse.model_validate(t) for t in tag_service.popular_tags(db, limit)]


@router.get("/{name}", response_model=TagResponse)
def get_tag(name: str, db: SessionDep) -> TagResponse:
    return TagResponse.model_validate(tag_service.get_tag_by_name(db, name))


@router.get("/{name}/questions", response_model=QuestionListResponse)
def tag_questions(name: str, db: SessionDep, page: PageDep, limit: LimitDep) -> QuestionListResponse:
    """Questions carrying the tag, newest first."""
    tag = tag_service.get_tag_by_name(db, name)
    return page_response(
        question_service.list_questions(db, tag=tag.name, page=page, limit=limit)
    )


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(payload: TagCreate, current_user: CurrentUserDep, db: SessionDep) -> TagResponse:
    tag = tag_service.create_tag(db, name=payload.name, description=payload.description)
    return TagResponse.model_validate(tag)


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: int,
    payload: TagUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> TagResponse:
    tag = tag_service.update_tag(
        db, tag_id=tag_id, name=payload.name, description=payload.description
    )
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", response_model=MessageResponse)
def delete_tag(tag_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Delete a tag no question uses."""
    tag_service.delete_tag(db, tag_id=tag_id)
    return MessageResponse(message="Tag deleted successfully")
