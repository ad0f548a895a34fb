from __future__ import annotations
import uuid
from typing import Optional
from sqlalchemy import func
from liftlog.models import Workout, WorkoutExercise
from liftlog.repositories.base import BaseRepository, Page

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    # READS
    def get_owned(self, user_id: uuid.UUID, workout_id: uuid.UUID) -> Optional[Workout]:
        stmt = self.live().where(Workout.id == workout_id, Workout.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(
        self, user_id: uuid.UUID, *, page: int = 1, limit: int = 15, name: Optional[str] = None
    ) -> Page[Workout]:
        stmt = self.live().where(Workout.user_id == user_id)
        if name and name.strip():
            stmt = stmt.where(func.lower(Workout.name).contains(name.strip().lower()))
        stmt = stmt.order_by(Workout.created_at.desc(), Workout.id.desc())
        return self.page_from_stmt(stmt, page=page, limit=limit)

    # WRITES
    def create(self, user_id: uuid.UUID, *, name: str) -> Workout:
        return self.add(Workout(user_id=user_id, name=name))


class WorkoutExerciseRepository(BaseRepository[WorkoutExercise]):
    model = WorkoutExercise

    def list_by_workout(self, workout_id: uuid.UUID) -> list[WorkoutExercise]:
        # explicit order first, unordered entries after them in insertion order
        stmt = (
            self.live()
            .where(WorkoutExercise.workout_id == workout_id)
            .order_by(
                WorkoutExercise.workout_order.is_(None),
                WorkoutExercise.workout_order.asc(),
                WorkoutExercise.created_at.asc(),
            )
        )
        return list(self.db.execute(stmt).scalars().all())
