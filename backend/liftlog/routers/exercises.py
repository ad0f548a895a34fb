import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.deps.paging import page_params
from liftlog.schemas.common import PageOut
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead
from liftlog.services.unit_of_work import atomic

router = APIRouter(prefix="/exercises", tags=["exercises"])

@router.get("", response_model=PageOut[ExerciseRead])
def list_exercises(
    paging: tuple[int, int] = Depends(page_params),
    name: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
    _: uuid.UUID = Depends(get_current_user_id),
):
    page, limit = paging
    result = ExerciseRepository(db).list(page=page, limit=limit, name=name)
    return PageOut.of(result, [ExerciseRead.model_validate(e) for e in result.items])

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(
    payload: ExerciseCreate,
    db: Session = Depends(get_db),
    _: uuid.UUID = Depends(get_current_user_id),
):
    with atomic(db, "create exercise"):
        exercise = ExerciseRepository(db).create(name=payload.name)
    return exercise
