"""Answer endpoints for the StackIt Flow API."""

from fastapi import APIRouter, status

from stackit_flow.schemas.answer import AnswerCreate, AnswerResponse, AnswerUpdate
from stackit_flow.schemas.common import MessageResponse
from stackit_flow.services import answers as answer_service
from stackit_flow.services.questions import get_question

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/answers", tags=["answers"])


@router.get("/question/{question_id}", response_model=list[AnswerResponse])
def list_answers(question_id: int, db: SessionDep) -> list[AnswerResponse]:
    """Answers accepted first, then by votes, then oldest first."""
    get_question(db, question_id)
    return [AnswerResponse.model_validate(a) for a in answer_service.list_answers(db, question_id)]


@router.post("/", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
def create_answer(payload: AnswerCreate, current_user: CurrentUserDep, db: SessionDep) -> AnswerResponse:
    answer = answer_service.create_answer(
        db,
        question_id=payload.question_id,
        author_id=current_user.id,
        content=payload.content,
    )
    return AnswerResponse.model_validate(answer)


@router.put("/{answer_id}", response_model=AnswerResponse)
def update_answer(
    answer_id: int,
    payload: AnswerUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnswerResponse:
    answer = answer_service.update_answer(
        db, answer_id=answer_id, requester_id=current_user.id, content=payload.content
    )
    return AnswerResponse.model_validate(answer)


@router.delete("/{answer_id}", response_model=MessageResponse)
def delete_answer(answer_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    answer_service.delete_answer(db, answer_id=answer_id, requester_id=current_user.id)
    return MessageResponse(message="Answer deleted successfully")


@router.post("/{answer_id}/accept", response_model=MessageResponse)
def accept_answer(answer_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Mark an answer as accepted; only the question's author may do this."""
    answer_service.accept_answer(db, answer_id=answer_id, requester_id=current_user.id)
    return MessageResponse(message="Answer accepted successfully")
