# tests/services/test_vote_concurrency.py
"""Concurrent voters against a file-backed SQLite database.

Each worker uses its own session, the way parallel API requests do.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from stackit_flow.db.session import Base, build_engine
from stackit_flow.models import Answer, Question, TargetType, User
from stackit_flow.services.votes import VoteAction, cast_vote, ledger_total

VOTERS = 50


@pytest.fixture()
def file_sessions(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'votes.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    try:
        yield factory
    finally:
        engine.dispose()


@pytest.fixture()
def seeded(file_sessions):
    """An asker, an answerer, one question with one answer, and the voters."""
    with file_sessions() as db:
        asker = User(username="asker", email="asker@example.com", password_hash="x")
        answerer = User(username="answerer", email="answerer@example.com", password_hash="x")
        voters = [
            User(username=f"voter{i}", email=f"voter{i}@example.com", password_hash="x")
            for i in range(VOTERS)
        ]
        db.add_all([asker, answerer, *voters])
        db.flush()
        question = Question(
            title="Concurrent voting question",
            content="Many people vote on this at once.",
            author_id=asker.id,
        )
        db.add(question)
        db.flush()
        answer = Answer(
            question_id=question.id,
            author_id=answerer.id,
            content="An answer that receives many votes.",
        )
        db.add(answer)
        db.commit()
        return {
            "question_id": question.id,
            "answer_id": answer.id,
            "answerer_id": answerer.id,
            "voter_ids": [v.id for v in voters],
        }


def _cast(factory, user_id: int, target_type: str, target_id: int, value: int):
    with factory() as db:
        return cast_vote(
            db, user_id=user_id, target_type=target_type, target_id=target_id, value=value
        )


def test_fifty_concurrent_upvotes_are_all_counted(file_sessions, seeded) -> None:
    answer_id = seeded["answer_id"]
    with ThreadPoolExecutor(max_workers=VOTERS) as pool:
        futures = [
            pool.submit(_cast, file_sessions, user_id, "answer", answer_id, 1)
            for user_id in seeded["voter_ids"]
        ]
        outcomes = [f.result() for f in futures]

    assert all(o.action is VoteAction.created for o in outcomes)
    assert sorted(o.votes for o in outcomes) == list(range(1, VOTERS + 1))

    with file_sessions() as db:
        votes = db.execute(select(Answer.votes).where(Answer.id == answer_id)).scalar_one()
        reputation = db.execute(
            select(User.reputation).where(User.id == seeded["answerer_id"])
        ).scalar_one()
        assert votes == VOTERS
        assert reputation == VOTERS
        assert ledger_total(db, TargetType.answer, answer_id) == VOTERS


def test_concurrent_switches_keep_counter_equal_to_ledger(file_sessions, seeded) -> None:
    question_id = seeded["question_id"]

    def _up_then_down(user_id: int) -> None:
        _cast(file_sessions, user_id, "question", question_id, 1)
        _cast(file_sessions, user_id, "question", question_id, -1)

    with ThreadPoolExecutor(max_workers=VOTERS) as pool:
        for future in [pool.submit(_up_then_down, uid) for uid in seeded["voter_ids"]]:
            future.result()

    with file_sessions() as db:
        votes = db.execute(select(Question.votes).where(Question.id == question_id)).scalar_one()
        assert votes == -VOTERS
        assert ledger_total(db, TargetType.question, question_id) == -VOTERS
