# liftlog/repositories/base.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Iterable, Optional, TypeVar

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import Session

from liftlog.models.mixins import utcnow

T = TypeVar("T")  # SQLAlchemy model type

@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def last_page(self) -> int:
        # an empty listing still has one page
        return max(1, -(-self.total // self.limit))

class BaseRepository(Generic[T]):
    """
    Lightweight base for repositories using SQLAlchemy 2.0 style.

    Repositories flush but never commit: the calling service owns the
    transaction. Every read goes through `live()` so soft-deleted rows stay
    invisible.
    """
    model: Any

    def __init__(self, db: Session):
        self.db = db

    def live(self) -> Select:
        return select(self.model).where(self.model.deleted_at.is_(None))

    def get(self, entity_id) -> Optional[T]:
        stmt = self.live().where(self.model.id == entity_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def page_from_stmt(self, stmt: Select, *, page: int = 1, limit: int = 15) -> Page[T]:
        # One query for the count, one for the rows
        total = self.db.execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        ).scalar_one()
        offset = (page - 1) * limit
        items = list(self.db.execute(stmt.limit(limit).offset(offset)).scalars().all())
        return Page(items=items, total=total, page=page, limit=limit)

    def add(self, entity: T) -> T:
        self.db.add(entity)
        self.db.flush()
        return entity

    def add_all(self, entities: Iterable[T]) -> list[T]:
        entities = list(entities)
        self.db.add_all(entities)
        self.db.flush()
        return entities

    def soft_delete_where(self, *criteria, now: datetime | None = None) -> int:
        """Stamp deleted_at on every live row matching `criteria`; returns the row count."""
        now = now or utcnow()
        stmt = (
            update(self.model)
            .where(self.model.deleted_at.is_(None), *criteria)
            .values(deleted_at=now, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
        return self.db.execute(stmt).rowcount

    def soft_delete_ids(self, ids: Iterable, *, now: datetime | None = None) -> int:
        ids = list(ids)
        if not ids:
            return 0
        return self.soft_delete_where(self.model.id.in_(ids), now=now)
