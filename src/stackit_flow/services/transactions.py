"""Transaction helpers shared by the write services."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run the enclosed statements as one unit of work.

    Commits when the block exits normally. Any exception rolls back every
    statement issued in the block and is re-raised unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError:
        logger.error("Rolling back transaction after store error", exc_info=True)
        db.rollback()
        raise
    except BaseException:
        db.rollback()
        raise
