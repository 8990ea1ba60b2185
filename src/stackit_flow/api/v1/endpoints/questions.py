"""Question endpoints for the StackIt Flow API."""

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from stackit_flow.models import Question
from stackit_flow.schemas.answer import AnswerResponse
from stackit_flow.schemas.common import MessageResponse, Pagination
from stackit_flow.schemas.question import (
    QuestionCreate,
    QuestionDetail,
    QuestionListResponse,
    QuestionSummary,
    QuestionUpdate,
)
from stackit_flow.services import answers as answer_service
from stackit_flow.services import questions as question_service
from stackit_flow.services.questions import QuestionPage, QuestionSort

from ..dependencies import CurrentUserDep, LimitDep, PageDep, SessionDep

router = APIRouter(prefix="/questions", tags=["questions"])


def summarize(row: question_service.QuestionRow) -> QuestionSummary:
    summary = QuestionSummary.model_validate(row.question)
    return summary.model_copy(update={"answer_count": row.answer_count})


def page_response(page: QuestionPage) -> QuestionListResponse:
    return QuestionListResponse(
        items=[summarize(row) for row in page.items],
        pagination=Pagination(page=page.page, limit=page.limit, total=page.total),
    )


def _detail(db: Session, question: Question) -> QuestionDetail:
    answers = answer_service.list_answers(db, question.id)
    summary = QuestionSummary.model_validate(question)
    return QuestionDetail(
        **summary.model_dump(exclude={"answer_count"}),
        answer_count=len(answers),
        answers=[AnswerResponse.model_validate(a) for a in answers],
    )


@router.get("/", response_model=QuestionListResponse)
def list_questions(
    db: SessionDep,
    page: PageDep,
    limit: LimitDep,
    tag: str | None = None,
    search: str | None = Query(None, max_length=200),
    sort: QuestionSort = QuestionSort.newest,
) -> QuestionListResponse:
    """List questions, optionally filtered by tag or text."""
    result = question_service.list_questions(
        db, tag=tag, search=search, sort=sort, page=page, limit=limit
    )
    return page_response(result)


@router.get("/{question_id}", response_model=QuestionDetail)
def get_question(question_id: int, db: SessionDep) -> QuestionDetail:
    """Return a question with its answers. Every call counts as a view."""
    question_service.record_question_view(db, question_id)
    return _detail(db, question_service.get_question(db, question_id))


@router.post("/", response_model=QuestionDetail, status_code=status.HTTP_201_CREATED)
def create_question(
    payload: QuestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionDetail:
    question = question_service.create_question(
        db,
        author_id=current_user.id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
    )
    return _detail(db, question)


@router.put("/{question_id}", response_model=QuestionDetail)
def update_question(
    question_id: int,
    payload: QuestionUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionDetail:
    question = question_service.update_question(
        db,
        question_id=question_id,
        requester_id=current_user.id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
    )
    return _detail(db, question)


@router.delete("/{question_id}", response_model=MessageResponse)
def delete_question(question_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    question_service.delete_question(db, question_id=question_id, requester_id=current_user.id)
    return MessageResponse(message="Question deleted successfully")
