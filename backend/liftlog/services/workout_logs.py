"""
Workout logs (sessions): materialization from a template, listing, desired
state updates of the logged sets, and deletion.
"""
from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from liftlog.models import ExerciseSet, SetStatus, Workout, WorkoutLog, WorkoutLogStatus
from liftlog.models.mixins import utcnow
from liftlog.repositories.base import Page
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.instance_repo import ExerciseInstanceRepository
from liftlog.repositories.workout_log_repo import ExerciseSetRepository, WorkoutLogRepository
from liftlog.repositories.workout_repo import WorkoutExerciseRepository, WorkoutRepository
from liftlog.schemas.workout_log import ExerciseSetIn, WorkoutLogUpdate
from liftlog.services.cascade import cascade_delete_workout_log, release_orphaned_instances
from liftlog.services.ownership import owned_workout, owned_workout_log
from liftlog.services.reconcile import (
    InstanceResolver,
    check_exercise_refs,
    check_instance_refs,
    check_set_numbers,
    normalize_set_number,
    plan_reconciliation,
)
from liftlog.services.unit_of_work import atomic

log = logging.getLogger(__name__)

SCALAR_FIELDS = (
    "finished_at",
    "status",
    "total_active_duration_seconds",
    "total_pause_duration_seconds",
)
NOT_NULL_FIELDS = {"status", "total_active_duration_seconds", "total_pause_duration_seconds"}


def start_session(db: Session, user_id: uuid.UUID, workout_id: uuid.UUID) -> WorkoutLog:
    """
    Materialize a session from a template: one pending set per planned set
    (one if unplanned), each pointing at the template entry's own instance
    and numbered per instance from 1.

    Entries whose exercise or instance no longer resolves are skipped with a
    warning; the rest of the session is still created.
    """
    with atomic(db, "start session"):
        workout = owned_workout(db, user_id, workout_id)
        entries = WorkoutExerciseRepository(db).list_by_workout(workout.id)
        live_exercises = ExerciseRepository(db).live_ids(e.exercise_id for e in entries)
        instances = ExerciseInstanceRepository(db).get_many(
            e.exercise_instance_id for e in entries if e.exercise_instance_id
        )

        now = utcnow()
        workout_log = WorkoutLogRepository(db).create(
            user_id,
            workout_id=workout.id,
            started_at=now,
            status=WorkoutLogStatus.in_progress,
        )

        counters: dict[uuid.UUID, int] = defaultdict(int)
        sets = []
        for entry in entries:
            instance = instances.get(entry.exercise_instance_id) if entry.exercise_instance_id else None
            if entry.exercise_id not in live_exercises or instance is None:
                log.warning(
                    "start_session: skipping workout exercise %s of workout %s (exercise or instance missing)",
                    entry.id, workout.id,
                )
                continue
            planned = entry.sets if entry.sets is not None else 1
            for _ in range(planned):
                counters[instance.id] += 1
                sets.append(
                    ExerciseSet(
                        workout_log_id=workout_log.id,
                        exercise_id=entry.exercise_id,
                        exercise_instance_id=instance.id,
                        set_number=counters[instance.id],
                        weight=entry.weight,
                        reps=entry.reps,
                        status=SetStatus.pending,
                    )
                )
        ExerciseSetRepository(db).add_all(sets)

    log.info("started workout log %s from workout %s with %d sets", workout_log.id, workout_id, len(sets))
    return workout_log


def list_workout_logs(
    db: Session,
    user_id: uuid.UUID,
    *,
    page: int = 1,
    limit: int = 15,
    workout_id: Optional[uuid.UUID] = None,
    status: Optional[WorkoutLogStatus] = None,
    sort_by: str = "created_at",
    order: str = "desc",
) -> Page[WorkoutLog]:
    return WorkoutLogRepository(db).list_by_user(
        user_id, page=page, limit=limit, workout_id=workout_id, status=status, sort_by=sort_by, order=order
    )


def get_workout_log(db: Session, user_id: uuid.UUID, log_id: uuid.UUID) -> WorkoutLog:
    return owned_workout_log(db, user_id, log_id)


def load_log_sets(db: Session, log_id: uuid.UUID) -> list[ExerciseSet]:
    return ExerciseSetRepository(db).list_by_log(log_id)


def log_template(db: Session, workout_log: WorkoutLog) -> Optional[Workout]:
    """The originating template, if it is still live."""
    if workout_log.workout_id is None:
        return None
    return WorkoutRepository(db).get(workout_log.workout_id)


def update_workout_log(
    db: Session, user_id: uuid.UUID, log_id: uuid.UUID, payload: WorkoutLogUpdate
) -> WorkoutLog:
    with atomic(db, "update workout log"):
        workout_log = owned_workout_log(db, user_id, log_id)

        if payload.exercise_sets is not None:
            _reconcile_sets(db, workout_log, payload.exercise_sets)

        for name in SCALAR_FIELDS:
            if name not in payload.model_fields_set:
                continue
            value = getattr(payload, name)
            if value is None and name in NOT_NULL_FIELDS:
                continue
            setattr(workout_log, name, value)
        db.flush()

    return workout_log


def _reconcile_sets(db: Session, workout_log: WorkoutLog, items: Sequence[ExerciseSetIn]) -> None:
    set_repo = ExerciseSetRepository(db)

    check_exercise_refs(db, items)
    current = set_repo.list_by_log(workout_log.id)
    plan = plan_reconciliation(current, items, noun="exercise set")
    check_instance_refs(items, allowed={s.exercise_instance_id for s in current})
    check_set_numbers(plan)

    now = utcnow()
    released = {s.exercise_instance_id for s in plan.to_remove}
    set_repo.soft_delete_ids([s.id for s in plan.to_remove], now=now)

    resolver = InstanceResolver(ExerciseInstanceRepository(db), workout_log_id=workout_log.id)
    for row, item in plan.to_update:
        instance_id = resolver.for_item(item, row)
        if instance_id != row.exercise_instance_id:
            released.add(row.exercise_instance_id)
        row.exercise_id = item.exercise_id
        row.exercise_instance_id = instance_id

        sent = item.model_fields_set
        if "set_number" in sent:
            row.set_number = normalize_set_number(item.set_number)
        if "weight" in sent:
            row.weight = item.weight
        if "reps" in sent:
            row.reps = item.reps
        if "finished_at" in sent:
            row.finished_at = item.finished_at
        if item.status is not None:
            row.status = item.status

    set_repo.add_all(
        ExerciseSet(
            workout_log_id=workout_log.id,
            exercise_id=item.exercise_id,
            exercise_instance_id=resolver.for_item(item),
            set_number=normalize_set_number(item.set_number),
            weight=item.weight,
            reps=item.reps,
            finished_at=item.finished_at,
            status=item.status or SetStatus.pending,
        )
        for item in plan.to_create
    )

    db.flush()
    release_orphaned_instances(db, released, now=now)
    log.info(
        "reconciled sets of workout log %s: %d kept, %d added, %d removed, %d new instances",
        workout_log.id, len(plan.to_update), len(plan.to_create), len(plan.to_remove), resolver.created,
    )


def delete_workout_log(db: Session, user_id: uuid.UUID, log_id: uuid.UUID) -> None:
    with atomic(db, "delete workout log"):
        workout_log = owned_workout_log(db, user_id, log_id)
        cascade_delete_workout_log(db, workout_log)
