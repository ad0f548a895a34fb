"""
Workout templates: CRUD over a template and its ordered exercise entries.

Entry lists on create and update go through the reconciliation helpers so
both paths share the same reference checks and instance rules.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from liftlog.models import Workout, WorkoutExercise
from liftlog.models.mixins import utcnow
from liftlog.repositories.base import Page
from liftlog.repositories.instance_repo import ExerciseInstanceRepository
from liftlog.repositories.workout_repo import WorkoutExerciseRepository, WorkoutRepository
from liftlog.schemas.workout import WorkoutExerciseIn
from liftlog.services.cascade import cascade_delete_workout, release_orphaned_instances
from liftlog.services.ownership import owned_workout
from liftlog.services.reconcile import (
    InstanceResolver,
    check_exercise_refs,
    check_instance_refs,
    plan_reconciliation,
)
from liftlog.services.unit_of_work import atomic

log = logging.getLogger(__name__)


def _apply_planned_fields(row: WorkoutExercise, item: WorkoutExerciseIn) -> None:
    # full replacement: an omitted field clears the planned value
    row.exercise_id = item.exercise_id
    row.workout_order = item.order
    row.sets = item.sets
    row.weight = item.weight
    row.reps = item.reps


def create_workout(
    db: Session, user_id: uuid.UUID, *, name: str, entries: Sequence[WorkoutExerciseIn]
) -> Workout:
    with atomic(db, "create workout"):
        # an id on a brand-new template cannot name anything of ours
        plan = plan_reconciliation([], entries, noun="workout exercise")
        check_exercise_refs(db, entries)
        check_instance_refs(entries, allowed=set())

        workout = WorkoutRepository(db).create(user_id, name=name)
        resolver = InstanceResolver(ExerciseInstanceRepository(db))
        rows = []
        for item in plan.to_create:
            row = WorkoutExercise(workout_id=workout.id, exercise_instance_id=resolver.for_item(item))
            _apply_planned_fields(row, item)
            rows.append(row)
        WorkoutExerciseRepository(db).add_all(rows)

    log.info("created workout %s for user %s with %d exercises", workout.id, user_id, len(rows))
    return workout


def list_workouts(
    db: Session, user_id: uuid.UUID, *, page: int = 1, limit: int = 15, name: Optional[str] = None
) -> Page[Workout]:
    return WorkoutRepository(db).list_by_user(user_id, page=page, limit=limit, name=name)


def get_workout(db: Session, user_id: uuid.UUID, workout_id: uuid.UUID) -> Workout:
    return owned_workout(db, user_id, workout_id)


def workout_entries(db: Session, workout: Workout) -> list[WorkoutExercise]:
    return WorkoutExerciseRepository(db).list_by_workout(workout.id)


def update_workout(
    db: Session,
    user_id: uuid.UUID,
    workout_id: uuid.UUID,
    *,
    name: str,
    entries: Sequence[WorkoutExerciseIn],
) -> Workout:
    with atomic(db, "update workout"):
        workout = owned_workout(db, user_id, workout_id)
        entry_repo = WorkoutExerciseRepository(db)

        # validation pass; nothing below may raise a caller error
        check_exercise_refs(db, entries)
        current = entry_repo.list_by_workout(workout.id)
        plan = plan_reconciliation(current, entries, noun="workout exercise")
        check_instance_refs(entries, allowed={r.exercise_instance_id for r in current if r.exercise_instance_id})

        now = utcnow()
        workout.name = name
        released = {r.exercise_instance_id for r in plan.to_remove if r.exercise_instance_id}
        entry_repo.soft_delete_ids([r.id for r in plan.to_remove], now=now)

        resolver = InstanceResolver(ExerciseInstanceRepository(db))
        for row, item in plan.to_update:
            instance_id = resolver.for_item(item, row)
            if row.exercise_instance_id and row.exercise_instance_id != instance_id:
                released.add(row.exercise_instance_id)
            row.exercise_instance_id = instance_id
            _apply_planned_fields(row, item)

        created = []
        for item in plan.to_create:
            row = WorkoutExercise(workout_id=workout.id, exercise_instance_id=resolver.for_item(item))
            _apply_planned_fields(row, item)
            created.append(row)
        entry_repo.add_all(created)

        db.flush()
        release_orphaned_instances(db, released, now=now)

    log.info(
        "updated workout %s: %d kept, %d added, %d removed, %d new instances",
        workout_id, len(plan.to_update), len(plan.to_create), len(plan.to_remove), resolver.created,
    )
    return workout


def delete_workout(db: Session, user_id: uuid.UUID, workout_id: uuid.UUID) -> None:
    with atomic(db, "delete workout"):
        workout = owned_workout(db, user_id, workout_id)
        cascade_delete_workout(db, workout)
