# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from stackit_flow.core import security
from stackit_flow.db.session import Base, build_engine
from stackit_flow.db.session import get_db as app_get_session
from stackit_flow.main import app as fastapi_app
from stackit_flow.models import Answer, Question, User
from stackit_flow.services import auth as auth_service
from stackit_flow.services.tags import get_or_create_tags, refresh_tag_counts

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "Password123"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session whose commits only release savepoints of an outer transaction."""
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory for persisted users with the shared test password."""

    def _make_user(username: str | None = None, **fields: object) -> User:
        n = next(_USER_COUNTER)
        username = username or f"user{n}"
        user = User(
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            password_hash=security.hash_password(TEST_PASSWORD),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def headers_for(db_session: Session) -> Callable[[User], dict[str, str]]:
    """Open a real session for ``user`` and return its Authorization header."""

    def _headers_for(user: User) -> dict[str, str]:
        issued = auth_service.open_session(db_session, user)
        return {"Authorization": f"Bearer {issued.token}"}

    return _headers_for


@pytest.fixture()
def author(make_user: Callable[..., User]) -> User:
    """User who asks the test question."""
    return make_user("asker")


@pytest.fixture()
def answerer(make_user: Callable[..., User]) -> User:
    """User who answers the test question."""
    return make_user("answerer")


@pytest.fixture()
def voter(make_user: Callable[..., User]) -> User:
    return make_user("voter")


@pytest.fixture()
def author_headers(author: User, headers_for) -> dict[str, str]:
    return headers_for(author)


@pytest.fixture()
def answerer_headers(answerer: User, headers_for) -> dict[str, str]:
    return headers_for(answerer)


@pytest.fixture()
def voter_headers(voter: User, headers_for) -> dict[str, str]:
    return headers_for(voter)


@pytest.fixture()
def make_question(db_session: Session) -> Callable[..., Question]:
    def _make_question(
        author: User,
        title: str = "How do I reverse a list in Python?",
        content: str = "I have a list of integers and need it backwards.",
        tags: tuple[str, ...] = ("python", "lists"),
    ) -> Question:
        question = Question(title=title, content=content, author_id=author.id)
        question.tags = get_or_create_tags(db_session, tags)
        db_session.add(question)
        db_session.commit()
        refresh_tag_counts(db_session, [t.id for t in question.tags])
        db_session.refresh(question)
        return question

    return _make_question


@pytest.fixture()
def make_answer(db_session: Session) -> Callable[..., Answer]:
    def _make_answer(
        question: Question,
        author: User,
        content: str = "Use slicing with a negative step: items[::-1].",
    ) -> Answer:
        answer = Answer(question_id=question.id, author_id=author.id, content=content)
        db_session.add(answer)
        db_session.commit()
        db_session.refresh(answer)
        return answer

    return _make_answer


@pytest.fixture()
def question(author: User, make_question) -> Question:
    return make_question(author)


@pytest.fixture()
def answer(question: Question, answerer: User, make_answer) -> Answer:
    return make_answer(question, answerer)
