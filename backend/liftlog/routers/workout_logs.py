import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.models import WorkoutLogStatus
from liftlog.deps.paging import page_params
from liftlog.schemas.common import PageOut
from liftlog.schemas.workout_log import WorkoutLogCreate, WorkoutLogRead, WorkoutLogSummary, WorkoutLogUpdate
from liftlog.services import workout_logs as service

router = APIRouter(prefix="/workout-logs", tags=["workout-logs"])

def _read(db: Session, workout_log) -> WorkoutLogRead:
    return WorkoutLogRead.build(
        workout_log,
        service.log_template(db, workout_log),
        service.load_log_sets(db, workout_log.id),
    )

@router.get("", response_model=PageOut[WorkoutLogSummary])
def list_workout_logs(
    paging: tuple[int, int] = Depends(page_params),
    workout_id: uuid.UUID | None = None,
    status_filter: WorkoutLogStatus | None = Query(None, alias="status"),
    sort_by: Literal["created_at", "started_at", "finished_at", "status"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    page, limit = paging
    result = service.list_workout_logs(
        db, user_id, page=page, limit=limit,
        workout_id=workout_id, status=status_filter, sort_by=sort_by, order=order,
    )
    return PageOut.of(result, [WorkoutLogSummary.model_validate(w) for w in result.items])

@router.post("", response_model=WorkoutLogRead, status_code=status.HTTP_201_CREATED)
def start_workout_log(
    payload: WorkoutLogCreate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    workout_log = service.start_session(db, user_id, payload.workout_id)
    return _read(db, workout_log)

@router.get("/{log_id}", response_model=WorkoutLogRead)
def get_workout_log(
    log_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return _read(db, service.get_workout_log(db, user_id, log_id))

@router.put("/{log_id}", response_model=WorkoutLogRead)
def update_workout_log(
    log_id: uuid.UUID,
    payload: WorkoutLogUpdate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return _read(db, service.update_workout_log(db, user_id, log_id, payload))

@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout_log(
    log_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    service.delete_workout_log(db, user_id, log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
