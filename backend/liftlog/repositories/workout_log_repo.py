from __future__ import annotations
import uuid
from typing import Optional
from liftlog.models import ExerciseSet, WorkoutLog, WorkoutLogStatus
from liftlog.repositories.base import BaseRepository, Page

SORTABLE_COLUMNS = {
    "created_at": WorkoutLog.created_at,
    "started_at": WorkoutLog.started_at,
    "finished_at": WorkoutLog.finished_at,
    "status": WorkoutLog.status,
}

class WorkoutLogRepository(BaseRepository[WorkoutLog]):
    model = WorkoutLog

    def get_owned(self, user_id: uuid.UUID, log_id: uuid.UUID) -> Optional[WorkoutLog]:
        stmt = self.live().where(WorkoutLog.id == log_id, WorkoutLog.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(
        self,
        user_id: uuid.UUID,
        *,
        page: int = 1,
        limit: int = 15,
        workout_id: Optional[uuid.UUID] = None,
        status: Optional[WorkoutLogStatus] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> Page[WorkoutLog]:
        stmt = self.live().where(WorkoutLog.user_id == user_id)
        if workout_id is not None:
            stmt = stmt.where(WorkoutLog.workout_id == workout_id)
        if status is not None:
            stmt = stmt.where(WorkoutLog.status == status)

        column = SORTABLE_COLUMNS.get(sort_by, WorkoutLog.created_at)
        direction = column.asc() if order == "asc" else column.desc()
        stmt = stmt.order_by(direction, WorkoutLog.id.asc())
        return self.page_from_stmt(stmt, page=page, limit=limit)

    def create(self, user_id: uuid.UUID, **fields) -> WorkoutLog:
        return self.add(WorkoutLog(user_id=user_id, **fields))


class ExerciseSetRepository(BaseRepository[ExerciseSet]):
    model = ExerciseSet

    def list_by_log(self, log_id: uuid.UUID) -> list[ExerciseSet]:
        """
        Live sets of one session in insertion order (set_number only breaks
        ties). Callers wanting per-instance numbering sort or group
        themselves, as WorkoutLogRead.build does.
        """
        stmt = (
            self.live()
            .where(ExerciseSet.workout_log_id == log_id)
            .order_by(ExerciseSet.created_at.asc(), ExerciseSet.set_number.asc())
        )
        return list(self.db.execute(stmt).scalars().all())
