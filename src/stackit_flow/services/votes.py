"""Vote ledger and counter synchronization.

The ``votes`` table is the ledger. ``Question.votes``, ``Answer.votes`` and
the answer share of ``User.reputation`` are caches of it, and every function
here that mutates the ledger adjusts those caches inside the same
transaction.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stackit_flow.models import Answer, Question, TargetType, Vote
from stackit_flow.models.vote import VOTE_UNIQUE_CONSTRAINT
from stackit_flow.services.errors import (
    ForbiddenError,
    InvalidInputError,
    VoteConflictError,
)
from stackit_flow.services.targets import VoteTarget, load_target, parse_target_type
from stackit_flow.services.transactions import atomic

logger = logging.getLogger(__name__)

VOTE_VALUES = (1, -1)


class VoteAction(str, enum.Enum):
    """What a cast did to the ledger."""

    created = "created"
    updated = "updated"
    removed = "removed"


@dataclass(frozen=True)
class VoteOutcome:
    """Result of ``cast_vote``."""

    action: VoteAction
    value: int | None
    votes: int


def _is_duplicate_vote(err: IntegrityError) -> bool:
    message = str(err.orig)
    # PostgreSQL names the constraint; SQLite lists the constrained columns.
    return VOTE_UNIQUE_CONSTRAINT in message or "votes.user_id" in message


def _find_vote(
    db: Session,
    user_id: int,
    target_type: TargetType,
    target_id: int,
    *,
    lock: bool = False,
) -> Vote | None:
    stmt = select(Vote).where(
        Vote.user_id == user_id,
        Vote.target_type == target_type.value,
        Vote.target_id == target_id,
    )
    if lock:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def cast_vote(
    db: Session,
    *,
    user_id: int,
    target_type: TargetType | str,
    target_id: int,
    value: int,
) -> VoteOutcome:
    """Record ``value`` from ``user_id`` on a question or answer.

    No prior vote inserts one; repeating the same value removes it
    (toggle-off); the opposite value updates it in place. The ledger write
    and the counter adjustments commit together or not at all.

    Raises:
        InvalidInputError: Unknown target type or a value other than 1/-1.
        NotFoundError: The target does not exist.
        ForbiddenError: The voter authored the target.
        VoteConflictError: A concurrent request inserted this user's vote on
            the same target first. Nothing was applied; re-issuing the call
            resolves against the winning row.
    """
    kind = parse_target_type(target_type)
    if value not in VOTE_VALUES:
        raise InvalidInputError("Vote value must be either 1 (upvote) or -1 (downvote)")

    with atomic(db):
        target = load_target(db, kind, target_id)
        if target.author_id == user_id:
            raise ForbiddenError("You cannot vote on your own content")

        existing = _find_vote(db, user_id, kind, target_id, lock=True)
        if existing is None:
            db.add(Vote(user_id=user_id, target_type=kind.value, target_id=target_id, value=value))
            delta = value
            action = VoteAction.created
            result_value: int | None = value
        elif existing.value == value:
            db.delete(existing)
            delta = -value
            action = VoteAction.removed
            result_value = None
        else:
            delta = value - existing.value
            existing.value = value
            action = VoteAction.updated
            result_value = value

        try:
            db.flush()
        except IntegrityError as err:
            if _is_duplicate_vote(err):
                logger.warning(
                    "Concurrent vote insert lost for user %s on %s %s",
                    user_id,
                    kind.value,
                    target_id,
                )
                raise VoteConflictError("Vote was changed by a concurrent request") from err
            raise

        target.apply_vote_delta(delta)
        votes = target.current_votes()

    logger.info(
        "Vote %s by user %s on %s %s (delta %+d, total %d)",
        action.value,
        user_id,
        kind.value,
        target_id,
        delta,
        votes,
    )
    return VoteOutcome(action=action, value=result_value, votes=votes)


def get_vote_count(db: Session, target_type: TargetType | str, target_id: int) -> int:
    """Return the stored vote counter of a target."""
    return load_target(db, target_type, target_id).current_votes()


def get_user_vote(
    db: Session,
    user_id: int,
    target_type: TargetType | str,
    target_id: int,
) -> int | None:
    """Return the caller's vote value on a target, or ``None``."""
    vote = _find_vote(db, user_id, parse_target_type(target_type), target_id)
    return vote.value if vote else None


def ledger_total(db: Session, target_type: TargetType, target_id: int) -> int:
    """Sum the ledger for one target."""
    total = db.execute(
        select(func.coalesce(func.sum(Vote.value), 0)).where(
            Vote.target_type == target_type.value,
            Vote.target_id == target_id,
        )
    ).scalar_one()
    return int(total)


def purge_target_votes(target: VoteTarget) -> int:
    """Delete every vote on ``target`` and unwind its counters.

    Must run inside the caller's transaction, before the target row itself is
    removed. Returns the ledger total that was reversed.
    """
    db = target.db
    total = ledger_total(db, target.target_type, target.target_id)
    db.execute(
        delete(Vote).where(
            Vote.target_type == target.target_type.value,
            Vote.target_id == target.target_id,
        )
    )
    target.apply_vote_delta(-total)
    return total


def list_votes_by_user(db: Session, user_id: int) -> list[dict[str, Any]]:
    """Return a user's votes, newest first, with a label for each target."""
    votes = db.execute(
        select(Vote).where(Vote.user_id == user_id).order_by(Vote.created_at.desc(), Vote.id.desc())
    ).scalars().all()

    question_ids = [v.target_id for v in votes if v.target_type == TargetType.question.value]
    answer_ids = [v.target_id for v in votes if v.target_type == TargetType.answer.value]
    question_titles = dict(
        db.execute(select(Question.id, Question.title).where(Question.id.in_(question_ids))).all()
    ) if question_ids else {}
    answer_contents = dict(
        db.execute(select(Answer.id, Answer.content).where(Answer.id.in_(answer_ids))).all()
    ) if answer_ids else {}

    results: list[dict[str, Any]] = []
    for vote in votes:
        if vote.target_type == TargetType.question.value:
            label = question_titles.get(vote.target_id)
        else:
            label = answer_contents.get(vote.target_id)
        results.append(
            {
                "id": vote.id,
                "target_id": vote.target_id,
                "target_type": vote.target_type,
                "value": vote.value,
                "target_content": label,
                "created_at": vote.created_at,
            }
        )
    return results
