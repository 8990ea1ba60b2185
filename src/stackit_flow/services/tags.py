"""Tag lookup, maintenance and usage counting."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stackit_flow.models import Tag, question_tags
from stackit_flow.services.errors import BadRequestError, ConflictError, NotFoundError
from stackit_flow.services.transactions import atomic


def normalize_tag_names(names: Iterable[str]) -> list[str]:
    """Lower-case, strip and de-duplicate tag names, keeping first-seen order."""
    seen: dict[str, None] = {}
    for name in names:
        cleaned = name.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def get_or_create_tags(db: Session, names: Iterable[str]) -> list[Tag]:
    """Return tags for ``names``, creating missing ones in the current transaction."""
    tags: list[Tag] = []
    for name in normalize_tag_names(names):
        tag = db.execute(select(Tag).where(Tag.name == name)).scalar_one_or_none()
        if tag is None:
            tag = Tag(name=name, description=f"Tag for {name}")
            db.add(tag)
            db.flush()
        tags.append(tag)
    return tags


def refresh_tag_counts(db: Session, tag_ids: Iterable[int]) -> None:
    """Recompute ``Tag.count`` from the link table for the given tags."""
    ids = sorted(set(tag_ids))
    if not ids:
        return
    db.flush()
    usage = (
        select(func.count())
        .select_from(question_tags)
        .where(question_tags.c.tag_id == Tag.id)
        .scalar_subquery()
    )
    db.execute(
        update(Tag)
        .where(Tag.id.in_(ids))
        .values(count=usage)
        .execution_options(synchronize_session="fetch")
    )


def list_tags(db: Session) -> list[Tag]:
    return list(db.execute(select(Tag).order_by(Tag.count.desc(), Tag.name.asc())).scalars().all())


def popular_tags(db: Session, limit: int) -> list[Tag]:
    return list(
        db.execute(select(Tag).order_by(Tag.count.desc(), Tag.name.asc()).limit(limit)).scalars().all()
    )


def get_tag_by_name(db: Session, name: str) -> Tag:
    tag = db.execute(select(Tag).where(Tag.name == name.lower())).scalar_one_or_none()
    if tag is None:
        raise NotFoundError("Tag not found")
    return tag


def create_tag(db: Session, *, name: str, description: str | None) -> Tag:
    with atomic(db):
        if db.execute(select(Tag.id).where(Tag.name == name)).first() is not None:
            raise ConflictError("Tag already exists")
        tag = Tag(name=name, description=description or "", count=0)
        db.add(tag)
        try:
            db.flush()
        except IntegrityError as err:
            raise ConflictError("Tag already exists") from err
    db.refresh(tag)
    return tag


def update_tag(db: Session, *, tag_id: int, name: str | None, description: str | None) -> Tag:
    with atomic(db):
        tag = db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        if name and name != tag.name:
            clash = db.execute(select(Tag.id).where(Tag.name == name, Tag.id != tag_id)).first()
            if clash is not None:
                raise ConflictError("Tag name already exists")
            tag.name = name
        if description is not None:
            tag.description = description
    db.refresh(tag)
    return tag


def delete_tag(db: Session, *, tag_id: int) -> None:
    """Delete a tag that no question uses."""
    with atomic(db):
        tag = db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        in_use = db.execute(
            select(func.count()).select_from(question_tags).where(question_tags.c.tag_id == tag_id)
        ).scalar_one()
        if in_use:
            raise BadRequestError("Cannot delete tag that is used by questions")
        db.delete(tag)
