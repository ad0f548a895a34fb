"""
Ownership guard: every read or write starts by resolving its root entity
for the calling user. Missing, soft-deleted and foreign rows all fail the
same way.
"""
from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from liftlog.errors import NotFoundError
from liftlog.models import Workout, WorkoutLog
from liftlog.repositories.workout_log_repo import WorkoutLogRepository
from liftlog.repositories.workout_repo import WorkoutRepository


def owned_workout(db: Session, user_id: uuid.UUID, workout_id: uuid.UUID) -> Workout:
    workout = WorkoutRepository(db).get_owned(user_id, workout_id)
    if workout is None:
        raise NotFoundError("Workout not found")
    return workout


def owned_workout_log(db: Session, user_id: uuid.UUID, log_id: uuid.UUID) -> WorkoutLog:
    workout_log = WorkoutLogRepository(db).get_owned(user_id, log_id)
    if workout_log is None:
        raise NotFoundError("Workout log not found")
    return workout_log
