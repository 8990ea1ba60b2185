# tests/services/test_content.py
"""Tests for acceptance, view counting and content deletion bookkeeping."""

import pytest
from sqlalchemy import func, select

from stackit_flow.models import Answer, Question, Tag, TargetType, User, Vote
from stackit_flow.services import answers as answer_service
from stackit_flow.services import questions as question_service
from stackit_flow.services.errors import ForbiddenError, NotFoundError
from stackit_flow.services.votes import cast_vote


def _accepted_ids(db_session, question_id: int) -> list[int]:
    return list(
        db_session.execute(
            select(Answer.id).where(Answer.question_id == question_id, Answer.is_accepted.is_(True))
        ).scalars()
    )


def test_accept_answer_marks_question_answered(db_session, question, answer, author) -> None:
    accepted = answer_service.accept_answer(db_session, answer_id=answer.id, requester_id=author.id)

    assert accepted.is_accepted is True
    db_session.refresh(question)
    assert question.is_answered is True
    assert _accepted_ids(db_session, question.id) == [answer.id]


def test_accepting_another_answer_moves_acceptance(
    db_session, question, answer, author, make_user, make_answer
) -> None:
    other = make_answer(question, make_user(), content="Another way is to use reversed().")
    answer_service.accept_answer(db_session, answer_id=answer.id, requester_id=author.id)
    answer_service.accept_answer(db_session, answer_id=other.id, requester_id=author.id)

    assert _accepted_ids(db_session, question.id) == [other.id]


def test_only_question_author_can_accept(db_session, answer, answerer) -> None:
    with pytest.raises(ForbiddenError):
        answer_service.accept_answer(db_session, answer_id=answer.id, requester_id=answerer.id)
    db_session.refresh(answer)
    assert answer.is_accepted is False


def test_rejected_write_keeps_existing_rows(db_session, question, answer, voter) -> None:
    with pytest.raises(ForbiddenError):
        answer_service.delete_answer(db_session, answer_id=answer.id, requester_id=voter.id)

    assert db_session.get(Answer, answer.id) is not None
    assert db_session.get(Question, question.id) is not None
    assert db_session.get(User, voter.id) is not None


def test_accept_missing_answer(db_session, author) -> None:
    with pytest.raises(NotFoundError):
        answer_service.accept_answer(db_session, answer_id=424242, requester_id=author.id)


def test_record_view_increments_every_time(db_session, question) -> None:
    question_service.record_question_view(db_session, question.id)
    question_service.record_question_view(db_session, question.id)

    views = db_session.execute(select(Question.views).where(Question.id == question.id)).scalar_one()
    assert views == 2


def test_record_view_missing_question(db_session) -> None:
    with pytest.raises(NotFoundError):
        question_service.record_question_view(db_session, 31337)


def test_delete_accepted_answer_unwinds_votes_and_acceptance(
    db_session, question, answer, author, answerer, voter
) -> None:
    cast_vote(db_session, user_id=voter.id, target_type="answer", target_id=answer.id, value=1)
    answer_service.accept_answer(db_session, answer_id=answer.id, requester_id=author.id)

    answer_service.delete_answer(db_session, answer_id=answer.id, requester_id=answerer.id)

    db_session.refresh(question)
    db_session.refresh(answerer)
    assert question.is_answered is False
    assert answerer.reputation == 0
    remaining = db_session.execute(
        select(func.count(Vote.id)).where(Vote.target_type == TargetType.answer.value)
    ).scalar_one()
    assert remaining == 0


def test_delete_answer_requires_owner(db_session, answer, voter) -> None:
    with pytest.raises(ForbiddenError):
        answer_service.delete_answer(db_session, answer_id=answer.id, requester_id=voter.id)


def test_delete_question_removes_answers_votes_and_reputation(
    db_session, question, answer, author, answerer, voter
) -> None:
    cast_vote(db_session, user_id=voter.id, target_type="answer", target_id=answer.id, value=1)
    cast_vote(db_session, user_id=voter.id, target_type="question", target_id=question.id, value=1)
    question_id = question.id

    question_service.delete_question(db_session, question_id=question_id, requester_id=author.id)

    assert db_session.get(Question, question_id) is None
    assert db_session.execute(select(func.count(Answer.id))).scalar_one() == 0
    assert db_session.execute(select(func.count(Vote.id))).scalar_one() == 0
    reputation = db_session.execute(
        select(User.reputation).where(User.id == answerer.id)
    ).scalar_one()
    assert reputation == 0
    counts = dict(db_session.execute(select(Tag.name, Tag.count)).all())
    assert counts == {"lists": 0, "python": 0}


def test_create_and_retag_question_recounts_tags(db_session, author) -> None:
    question = question_service.create_question(
        db_session,
        author_id=author.id,
        title="What is a generator expression?",
        content="I keep seeing parentheses around comprehensions.",
        tags=["Python", "generators"],
    )
    assert [t.name for t in question.tags] == ["generators", "python"]

    question_service.update_question(
        db_session,
        question_id=question.id,
        requester_id=author.id,
        title="What is a generator expression exactly?",
        content="I keep seeing parentheses around comprehensions.",
        tags=["python", "iterators"],
    )

    counts = dict(db_session.execute(select(Tag.name, Tag.count)).all())
    assert counts == {"generators": 0, "iterators": 1, "python": 1}


def test_update_question_requires_owner(db_session, question, voter) -> None:
    with pytest.raises(ForbiddenError):
        question_service.update_question(
            db_session,
            question_id=question.id,
            requester_id=voter.id,
            title="A hijacked title for this question",
            content="Someone else is trying to edit this question.",
            tags=None,
        )
