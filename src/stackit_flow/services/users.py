"""Read-side queries behind the user profile pages."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, joinedload

from stackit_flow.models import Answer, Question, TargetType, User, Vote
from stackit_flow.services.errors import NotFoundError

REPUTATION_HISTORY_LIMIT = 50


@dataclass(frozen=True)
class AnswerPage:
    items: list[Answer]
    total: int
    page: int
    limit: int


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def content_counts(db: Session, user_id: int) -> dict[str, int]:
    """Return how many questions and answers ``user_id`` has posted."""
    questions = db.execute(
        select(func.count(Question.id)).where(Question.author_id == user_id)
    ).scalar_one()
    answers = db.execute(
        select(func.count(Answer.id)).where(Answer.author_id == user_id)
    ).scalar_one()
    return {"question_count": int(questions), "answer_count": int(answers)}


def list_user_answers(db: Session, user_id: int, *, page: int, limit: int) -> AnswerPage:
    get_user(db, user_id)
    answers = db.execute(
        select(Answer)
        .options(joinedload(Answer.question), joinedload(Answer.author))
        .where(Answer.author_id == user_id)
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()
    total = db.execute(
        select(func.count(Answer.id)).where(Answer.author_id == user_id)
    ).scalar_one()
    return AnswerPage(items=list(answers), total=int(total), page=page, limit=limit)


def reputation_history(db: Session, user_id: int) -> list[dict[str, Any]]:
    """Return the latest vote events on content authored by ``user_id``.

    Answer votes carry their value as ``points``; question votes are listed
    with zero points because they never move reputation.
    """
    get_user(db, user_id)
    question_events = db.execute(
        select(Vote.value, Vote.created_at, Question.id, Question.title)
        .join(
            Question,
            and_(Vote.target_type == TargetType.question.value, Vote.target_id == Question.id),
        )
        .where(Question.author_id == user_id)
        .order_by(Vote.created_at.desc())
        .limit(REPUTATION_HISTORY_LIMIT)
    ).all()
    answer_events = db.execute(
        select(Vote.value, Vote.created_at, Question.id, Question.title)
        .join(
            Answer,
            and_(Vote.target_type == TargetType.answer.value, Vote.target_id == Answer.id),
        )
        .join(Question, Answer.question_id == Question.id)
        .where(Answer.author_id == user_id)
        .order_by(Vote.created_at.desc())
        .limit(REPUTATION_HISTORY_LIMIT)
    ).all()

    events: list[dict[str, Any]] = []
    for value, created_at, question_id, title in question_events:
        events.append(
            {
                "type": "question_vote",
                "value": value,
                "points": 0,
                "question_id": question_id,
                "question_title": title,
                "created_at": created_at,
            }
        )
    for value, created_at, question_id, title in answer_events:
        events.append(
            {
                "type": "answer_vote",
                "value": value,
                "points": value,
                "question_id": question_id,
                "question_title": title,
                "created_at": created_at,
            }
        )

    def _sort_key(event: dict[str, Any]) -> datetime:
        return event["created_at"]

    events.sort(key=_sort_key, reverse=True)
    return events[:REPUTATION_HISTORY_LIMIT]


def search_users(db: Session, query: str, *, limit: int) -> list[User]:
    pattern = f"%{query}%"
    return list(
        db.execute(
            select(User)
            .where(or_(User.username.ilike(pattern), User.bio.ilike(pattern)))
            .order_by(User.reputation.desc(), User.username.asc())
            .limit(limit)
        ).scalars().all()
    )


def top_users(db: Session, *, limit: int) -> list[User]:
    return list(
        db.execute(
            select(User).order_by(User.reputation.desc(), User.created_at.asc(), User.id.asc()).limit(limit)
        ).scalars().all()
    )


def user_stats(db: Session, user_id: int) -> dict[str, int]:
    """Aggregate activity numbers for one user."""
    user = get_user(db, user_id)
    question_votes = db.execute(
        select(func.coalesce(func.sum(Question.votes), 0)).where(Question.author_id == user_id)
    ).scalar_one()
    answer_votes = db.execute(
        select(func.coalesce(func.sum(Answer.votes), 0)).where(Answer.author_id == user_id)
    ).scalar_one()
    accepted = db.execute(
        select(func.count(Answer.id)).where(
            Answer.author_id == user_id, Answer.is_accepted.is_(True)
        )
    ).scalar_one()
    counts = content_counts(db, user_id)
    return {
        "question_count": counts["question_count"],
        "answer_count": counts["answer_count"],
        "accepted_answers": int(accepted),
        "question_votes_received": int(question_votes),
        "answer_votes_received": int(answer_votes),
        "total_votes_received": int(question_votes) + int(answer_votes),
        "reputation": user.reputation,
    }
