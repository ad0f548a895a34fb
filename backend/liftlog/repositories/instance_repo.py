from __future__ import annotations
import uuid
from typing import Iterable, Optional
from sqlalchemy import select
from liftlog.models import ExerciseInstance, ExerciseSet, WorkoutExercise
from liftlog.repositories.base import BaseRepository

class ExerciseInstanceRepository(BaseRepository[ExerciseInstance]):
    model = ExerciseInstance

    def create(self, exercise_id: uuid.UUID, *, workout_log_id: Optional[uuid.UUID] = None) -> ExerciseInstance:
        return self.add(ExerciseInstance(exercise_id=exercise_id, workout_log_id=workout_log_id))

    def get_many(self, ids: Iterable) -> dict:
        ids = set(ids)
        if not ids:
            return {}
        rows = self.db.execute(self.live().where(ExerciseInstance.id.in_(ids))).scalars().all()
        return {row.id: row for row in rows}

    def referenced_ids(
        self,
        ids: Iterable,
        *,
        exclude_workout_id: Optional[uuid.UUID] = None,
        exclude_log_id: Optional[uuid.UUID] = None,
    ) -> set:
        """
        Which of `ids` are still used by a live WorkoutExercise or ExerciseSet,
        ignoring rows that belong to the excluded template/session.
        """
        ids = set(ids)
        if not ids:
            return set()

        we_stmt = select(WorkoutExercise.exercise_instance_id).where(
            WorkoutExercise.exercise_instance_id.in_(ids),
            WorkoutExercise.deleted_at.is_(None),
        )
        if exclude_workout_id is not None:
            we_stmt = we_stmt.where(WorkoutExercise.workout_id != exclude_workout_id)

        es_stmt = select(ExerciseSet.exercise_instance_id).where(
            ExerciseSet.exercise_instance_id.in_(ids),
            ExerciseSet.deleted_at.is_(None),
        )
        if exclude_log_id is not None:
            es_stmt = es_stmt.where(ExerciseSet.workout_log_id != exclude_log_id)

        used = set(self.db.execute(we_stmt).scalars().all())
        used |= set(self.db.execute(es_stmt).scalars().all())
        return used
