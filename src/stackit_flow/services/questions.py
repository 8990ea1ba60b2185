"""Question queries and lifecycle."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session, joinedload, selectinload

from stackit_flow.models import Answer, Question, Tag
from stackit_flow.services.errors import ForbiddenError, NotFoundError
from stackit_flow.services.tags import get_or_create_tags, refresh_tag_counts
from stackit_flow.services.targets import AnswerTarget, QuestionTarget
from stackit_flow.services.transactions import atomic
from stackit_flow.services.votes import purge_target_votes

logger = logging.getLogger(__name__)


class QuestionSort(str, enum.Enum):
    """Orderings offered by the question listing."""

    newest = "newest"
    votes = "votes"
    views = "views"
    unanswered = "unanswered"


_ORDERINGS = {
    QuestionSort.newest: (Question.created_at.desc(), Question.id.desc()),
    QuestionSort.votes: (Question.votes.desc(), Question.created_at.desc(), Question.id.desc()),
    QuestionSort.views: (Question.views.desc(), Question.created_at.desc(), Question.id.desc()),
    QuestionSort.unanswered: (Question.created_at.desc(), Question.id.desc()),
}


@dataclass(frozen=True)
class QuestionRow:
    """A question together with its live answer count."""

    question: Question
    answer_count: int


@dataclass(frozen=True)
class QuestionPage:
    items: list[QuestionRow]
    total: int
    page: int
    limit: int


def _answer_counts():
    return (
        select(Answer.question_id, func.count(Answer.id).label("answer_count"))
        .group_by(Answer.question_id)
        .subquery()
    )


def count_answers(db: Session, question_id: int) -> int:
    return db.execute(
        select(func.count(Answer.id)).where(Answer.question_id == question_id)
    ).scalar_one()


def list_questions(
    db: Session,
    *,
    tag: str | None = None,
    search: str | None = None,
    sort: QuestionSort = QuestionSort.newest,
    author_id: int | None = None,
    page: int = 1,
    limit: int = 10,
) -> QuestionPage:
    """Return one page of questions matching the filters."""
    filters = []
    if search:
        pattern = f"%{search}%"
        filters.append(or_(Question.title.ilike(pattern), Question.content.ilike(pattern)))
    if tag:
        filters.append(Question.tags.any(Tag.name == tag.lower()))
    if author_id is not None:
        filters.append(Question.author_id == author_id)
    if sort == QuestionSort.unanswered:
        filters.append(Question.is_answered.is_(False))

    counts = _answer_counts()
    stmt = (
        select(Question, func.coalesce(counts.c.answer_count, 0))
        .outerjoin(counts, counts.c.question_id == Question.id)
        .options(joinedload(Question.author), selectinload(Question.tags))
        .where(*filters)
        .order_by(*_ORDERINGS[sort])
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = [QuestionRow(question=q, answer_count=int(n)) for q, n in db.execute(stmt).all()]
    total = db.execute(select(func.count(Question.id)).where(*filters)).scalar_one()
    return QuestionPage(items=rows, total=int(total), page=page, limit=limit)


def get_question(db: Session, question_id: int) -> Question:
    question = db.execute(
        select(Question)
        .options(joinedload(Question.author), selectinload(Question.tags))
        .where(Question.id == question_id)
    ).scalar_one_or_none()
    if question is None:
        raise NotFoundError("Question not found")
    return question


def record_question_view(db: Session, question_id: int) -> None:
    """Increment the view counter; every call counts."""
    with atomic(db):
        if db.execute(select(Question.id).where(Question.id == question_id)).first() is None:
            raise NotFoundError("Question not found")
        db.execute(
            update(Question)
            .where(Question.id == question_id)
            .values(views=Question.views + 1)
            .execution_options(synchronize_session="fetch")
        )


def create_question(
    db: Session,
    *,
    author_id: int,
    title: str,
    content: str,
    tags: list[str],
) -> Question:
    """Create a question, creating any tags that do not exist yet."""
    with atomic(db):
        question = Question(title=title, content=content, author_id=author_id)
        question.tags = get_or_create_tags(db, tags)
        db.add(question)
        db.flush()
        refresh_tag_counts(db, [t.id for t in question.tags])
    logger.info("Question %s created by user %s", question.id, author_id)
    return get_question(db, question.id)


def update_question(
    db: Session,
    *,
    question_id: int,
    requester_id: int,
    title: str,
    content: str,
    tags: list[str] | None,
) -> Question:
    """Edit a question; when ``tags`` is given the tag set is replaced."""
    with atomic(db):
        question = get_question(db, question_id)
        if question.author_id != requester_id:
            raise ForbiddenError("You can only edit your own questions")
        question.title = title
        question.content = content
        if tags is not None:
            touched = {t.id for t in question.tags}
            question.tags = get_or_create_tags(db, tags)
            touched.update(t.id for t in question.tags)
            refresh_tag_counts(db, touched)
    return get_question(db, question_id)


def delete_question(db: Session, *, question_id: int, requester_id: int) -> None:
    """Delete a question, its answers and every vote on them.

    Answer votes are taken back out of their authors' reputations before the
    rows go away.
    """
    with atomic(db):
        question = get_question(db, question_id)
        if question.author_id != requester_id:
            raise ForbiddenError("You can only delete your own questions")

        tag_ids = [t.id for t in question.tags]
        answers = db.execute(select(Answer).where(Answer.question_id == question_id)).scalars().all()
        for answer in answers:
            purge_target_votes(AnswerTarget(db, answer))
        purge_target_votes(QuestionTarget(db, question))
        db.execute(delete(Answer).where(Answer.question_id == question_id))
        db.delete(question)
        refresh_tag_counts(db, tag_ids)

    logger.info("Question %s deleted by user %s", question_id, requester_id)
