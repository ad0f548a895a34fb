"""
Cascading soft delete of templates and sessions.

Both cascades run inside the caller's transaction in the same order: work
out which instances become orphaned, stamp the parent, stamp its children,
then stamp the orphaned instances. The parent goes first so a reader never
sees live-looking parents with missing children.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from liftlog.models import ExerciseSet, Workout, WorkoutExercise, WorkoutLog
from liftlog.models.mixins import utcnow
from liftlog.repositories.instance_repo import ExerciseInstanceRepository
from liftlog.repositories.workout_log_repo import ExerciseSetRepository, WorkoutLogRepository
from liftlog.repositories.workout_repo import WorkoutExerciseRepository, WorkoutRepository

log = logging.getLogger(__name__)


def cascade_delete_workout(db: Session, workout: Workout, *, now: Optional[datetime] = None) -> None:
    now = now or utcnow()
    instances = ExerciseInstanceRepository(db)
    entries = WorkoutExerciseRepository(db)

    candidates = {e.exercise_instance_id for e in entries.list_by_workout(workout.id) if e.exercise_instance_id}
    orphaned = candidates - instances.referenced_ids(candidates, exclude_workout_id=workout.id)

    WorkoutRepository(db).soft_delete_ids([workout.id], now=now)
    removed = entries.soft_delete_where(WorkoutExercise.workout_id == workout.id, now=now)
    released = instances.soft_delete_ids(orphaned, now=now)

    log.info(
        "deleted workout %s: %d exercises, %d instances (%d kept, shared)",
        workout.id, removed, released, len(candidates) - len(orphaned),
    )


def cascade_delete_workout_log(db: Session, workout_log: WorkoutLog, *, now: Optional[datetime] = None) -> None:
    now = now or utcnow()
    instances = ExerciseInstanceRepository(db)
    sets = ExerciseSetRepository(db)

    candidates = {s.exercise_instance_id for s in sets.list_by_log(workout_log.id)}
    orphaned = candidates - instances.referenced_ids(candidates, exclude_log_id=workout_log.id)

    WorkoutLogRepository(db).soft_delete_ids([workout_log.id], now=now)
    removed = sets.soft_delete_where(ExerciseSet.workout_log_id == workout_log.id, now=now)
    released = instances.soft_delete_ids(orphaned, now=now)

    log.info(
        "deleted workout log %s: %d sets, %d instances (%d kept, shared)",
        workout_log.id, removed, released, len(candidates) - len(orphaned),
    )


def release_orphaned_instances(db: Session, candidate_ids: Iterable, *, now: Optional[datetime] = None) -> int:
    """
    Soft-delete the candidates no live WorkoutExercise or ExerciseSet still
    references. Pending ORM changes must be flushed before calling.
    """
    candidates = {i for i in candidate_ids if i is not None}
    if not candidates:
        return 0
    instances = ExerciseInstanceRepository(db)
    orphaned = candidates - instances.referenced_ids(candidates)
    return instances.soft_delete_ids(orphaned, now=now)
