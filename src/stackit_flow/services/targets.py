"""Vote targets: the closed set of content kinds that carry a vote counter.

Each variant knows who authored it and how a change in its ledger total
propagates to denormalized counters. Counter writes are single
column-expression UPDATE statements so concurrent voters never overwrite
each other's increments.
"""
from __future__ import annotations

from typing import ClassVar

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from stackit_flow.models import Answer, Question, TargetType, User
from stackit_flow.services.errors import InvalidInputError, NotFoundError


class VoteTarget:
    """A loaded question or answer that can receive votes."""

    target_type: ClassVar[TargetType]
    model: ClassVar[type[Question] | type[Answer]]

    def __init__(self, db: Session, record: Question | Answer) -> None:
        self.db = db
        self.record = record

    @property
    def target_id(self) -> int:
        return self.record.id

    @property
    def author_id(self) -> int:
        return self.record.author_id

    def apply_vote_delta(self, delta: int) -> None:
        """Shift the target's vote counter by ``delta``."""
        if delta == 0:
            return
        self.db.execute(
            update(self.model)
            .where(self.model.id == self.target_id)
            .values(votes=self.model.votes + delta)
            .execution_options(synchronize_session="fetch")
        )

    def current_votes(self) -> int:
        """Read the counter as stored, bypassing the identity map."""
        return self.db.execute(
            select(self.model.votes).where(self.model.id == self.target_id)
        ).scalar_one()


class QuestionTarget(VoteTarget):
    """Question votes move only the question's counter."""

    target_type = TargetType.question
    model = Question


class AnswerTarget(VoteTarget):
    """Answer votes also move the answer author's reputation."""

    target_type = TargetType.answer
    model = Answer

    def apply_vote_delta(self, delta: int) -> None:
        if delta == 0:
            return
        super().apply_vote_delta(delta)
        self.db.execute(
            update(User)
            .where(User.id == self.author_id)
            .values(reputation=User.reputation + delta)
            .execution_options(synchronize_session="fetch")
        )


TARGETS: dict[TargetType, type[VoteTarget]] = {
    TargetType.question: QuestionTarget,
    TargetType.answer: AnswerTarget,
}


def parse_target_type(raw: TargetType | str) -> TargetType:
    """Coerce ``raw`` to a ``TargetType`` or raise ``InvalidInputError``."""
    try:
        return TargetType(raw)
    except ValueError as err:
        raise InvalidInputError(
            'Target type must be either "question" or "answer"'
        ) from err


def load_target(db: Session, target_type: TargetType | str, target_id: int) -> VoteTarget:
    """Load the vote target identified by ``(target_type, target_id)``.

    Raises:
        InvalidInputError: If ``target_type`` is not a known variant.
        NotFoundError: If no such question or answer exists.
    """
    kind = parse_target_type(target_type)
    target_cls = TARGETS[kind]
    record = db.get(target_cls.model, target_id)
    if record is None:
        raise NotFoundError(f"{kind.value.capitalize()} not found")
    return target_cls(db, record)
