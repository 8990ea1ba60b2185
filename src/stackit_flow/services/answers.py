"""Answer lifecycle and acceptance bookkeeping."""
from __future__ import annotations

import logging

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session, joinedload

from stackit_flow.models import Answer, Question
from stackit_flow.services.errors import ForbiddenError, NotFoundError
from stackit_flow.services.targets import AnswerTarget
from stackit_flow.services.transactions import atomic
from stackit_flow.services.votes import purge_target_votes

logger = logging.getLogger(__name__)


def answers_in_display_order(question_id: int):
    """Select answers accepted first, then by votes, then oldest first."""
    return (
        select(Answer)
        .options(joinedload(Answer.author))
        .where(Answer.question_id == question_id)
        .order_by(Answer.is_accepted.desc(), Answer.votes.desc(), Answer.created_at.asc(), Answer.id.asc())
    )


def list_answers(db: Session, question_id: int) -> list[Answer]:
    return list(db.execute(answers_in_display_order(question_id)).scalars().all())


def get_answer(db: Session, answer_id: int) -> Answer:
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise NotFoundError("Answer not found")
    return answer


def create_answer(db: Session, *, question_id: int, author_id: int, content: str) -> Answer:
    """Post a new answer to an existing question."""
    with atomic(db):
        if db.get(Question, question_id) is None:
            raise NotFoundError("Question not found")
        answer = Answer(question_id=question_id, author_id=author_id, content=content)
        db.add(answer)
    db.refresh(answer)
    logger.info("Answer %s created on question %s by user %s", answer.id, question_id, author_id)
    return answer


def update_answer(db: Session, *, answer_id: int, requester_id: int, content: str) -> Answer:
    with atomic(db):
        answer = get_answer(db, answer_id)
        if answer.author_id != requester_id:
            raise ForbiddenError("You can only edit your own answers")
        answer.content = content
    db.refresh(answer)
    return answer


def delete_answer(db: Session, *, answer_id: int, requester_id: int) -> None:
    """Delete an answer together with its votes.

    The answer's ledger total is taken back out of its author's reputation,
    and if the answer was the accepted one its question is no longer marked
    answered.
    """
    with atomic(db):
        answer = get_answer(db, answer_id)
        if answer.author_id != requester_id:
            raise ForbiddenError("You can only delete your own answers")

        reversed_total = purge_target_votes(AnswerTarget(db, answer))
        if answer.is_accepted:
            db.execute(
                update(Question)
                .where(Question.id == answer.question_id)
                .values(is_answered=False)
                .execution_options(synchronize_session="fetch")
            )
        db.delete(answer)

    logger.info(
        "Answer %s deleted by user %s (reversed %d vote points)",
        answer_id,
        requester_id,
        reversed_total,
    )


def accept_answer(db: Session, *, answer_id: int, requester_id: int) -> Answer:
    """Mark ``answer_id`` as the accepted answer of its question.

    Clears acceptance on every other answer of the same question and marks
    the question answered, all in one transaction. The question row is locked
    first so concurrent acceptances on one question apply one after another.

    Raises:
        NotFoundError: The answer does not exist.
        ForbiddenError: The requester did not author the question.
    """
    with atomic(db):
        answer = get_answer(db, answer_id)
        question = db.execute(
            select(Question).where(Question.id == answer.question_id).with_for_update()
        ).scalar_one()
        if question.author_id != requester_id:
            raise ForbiddenError("You can only accept answers to your own questions")

        # One statement flips the whole set, so no reader sees two accepted answers.
        db.execute(
            update(Answer)
            .where(Answer.question_id == question.id)
            .values(is_accepted=case((Answer.id == answer_id, True), else_=False))
            .execution_options(synchronize_session="fetch")
        )
        question.is_answered = True

    db.refresh(answer)
    db.refresh(question)
    logger.info("Answer %s accepted on question %s", answer_id, question.id)
    return answer
