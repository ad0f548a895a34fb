from __future__ import annotations
from typing import Iterable, Optional
from sqlalchemy import func, select
from liftlog.models import Exercise
from liftlog.repositories.base import BaseRepository, Page

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    # READS
    def list(self, *, page: int = 1, limit: int = 15, name: Optional[str] = None) -> Page[Exercise]:
        stmt = self.live()
        if name and name.strip():
            stmt = stmt.where(func.lower(Exercise.name).contains(name.strip().lower()))
        stmt = stmt.order_by(Exercise.name.asc(), Exercise.id.asc())
        return self.page_from_stmt(stmt, page=page, limit=limit)

    def live_ids(self, ids: Iterable) -> set:
        """Subset of `ids` naming live exercises, in a single IN query."""
        ids = set(ids)
        if not ids:
            return set()
        stmt = select(Exercise.id).where(Exercise.id.in_(ids), Exercise.deleted_at.is_(None))
        return set(self.db.execute(stmt).scalars().all())

    # WRITES
    def create(self, *, name: str) -> Exercise:
        return self.add(Exercise(name=name))
