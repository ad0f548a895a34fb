import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.deps.paging import page_params
from liftlog.schemas.common import PageOut
from liftlog.schemas.workout import WorkoutCreate, WorkoutRead, WorkoutSummary, WorkoutUpdate
from liftlog.services import workouts as service

router = APIRouter(prefix="/workouts", tags=["workouts"])

def _read(db: Session, workout) -> WorkoutRead:
    return WorkoutRead.build(workout, service.workout_entries(db, workout))

@router.get("", response_model=PageOut[WorkoutSummary])
def list_workouts(
    paging: tuple[int, int] = Depends(page_params),
    name: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    page, limit = paging
    result = service.list_workouts(db, user_id, page=page, limit=limit, name=name)
    return PageOut.of(result, [WorkoutSummary.model_validate(w) for w in result.items])

@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def create_workout(
    payload: WorkoutCreate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    workout = service.create_workout(db, user_id, name=payload.name, entries=payload.exercises)
    return _read(db, workout)

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(
    workout_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return _read(db, service.get_workout(db, user_id, workout_id))

@router.put("/{workout_id}", response_model=WorkoutRead)
def update_workout(
    workout_id: uuid.UUID,
    payload: WorkoutUpdate,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    workout = service.update_workout(db, user_id, workout_id, name=payload.name, entries=payload.exercises)
    return _read(db, workout)

@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout(
    workout_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    service.delete_workout(db, user_id, workout_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
