import uuid
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from liftlog.models import SetStatus, WorkoutLogStatus
from liftlog.schemas.common import ClientIdStr, NonNegFloat, NonNegInt
from liftlog.schemas.exercise import ExerciseRead
from liftlog.schemas.workout import WorkoutSummary

class WorkoutLogCreate(BaseModel):
    workout_id: uuid.UUID

class ExerciseSetIn(BaseModel):
    id: uuid.UUID | None = None
    exercise_id: uuid.UUID
    exercise_instance_id: uuid.UUID | None = None
    exercise_instance_client_id: ClientIdStr | None = None
    # honored when positive, otherwise the set becomes number 1
    set_number: int | None = None
    weight: NonNegFloat | None = None
    reps: NonNegInt | None = None
    status: SetStatus | None = None
    finished_at: datetime | None = None

    @field_validator("exercise_instance_client_id")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        return v or None

class WorkoutLogUpdate(BaseModel):
    """
    Scalars are applied only when sent. `exercise_sets`, when sent, is the
    complete desired list of sets for the session.
    """
    finished_at: datetime | None = None
    status: WorkoutLogStatus | None = None
    total_active_duration_seconds: NonNegInt | None = None
    total_pause_duration_seconds: NonNegInt | None = None
    exercise_sets: list[ExerciseSetIn] | None = None

class ExerciseSetRead(BaseModel):
    id: uuid.UUID
    workout_log_id: uuid.UUID
    exercise_id: uuid.UUID
    exercise_instance_id: uuid.UUID
    set_number: int
    weight: float | None = None
    reps: int | None = None
    finished_at: datetime | None = None
    status: SetStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

class LoggedInstanceRead(BaseModel):
    id: uuid.UUID
    exercise_id: uuid.UUID
    exercise: ExerciseRead | None = None
    exercise_sets: list[ExerciseSetRead] = Field(default_factory=list)

class WorkoutLogSummary(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    workout_id: uuid.UUID | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    status: WorkoutLogStatus
    total_active_duration_seconds: int
    total_pause_duration_seconds: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

class WorkoutLogRead(WorkoutLogSummary):
    workout: WorkoutSummary | None = None
    exercise_instances: list[LoggedInstanceRead] = Field(default_factory=list)

    @classmethod
    def build(cls, workout_log, workout, sets) -> "WorkoutLogRead":
        """Group the session's sets by exercise instance, in order of first appearance."""
        groups: dict[uuid.UUID, LoggedInstanceRead] = {}
        for s in sets:
            group = groups.get(s.exercise_instance_id)
            if group is None:
                group = LoggedInstanceRead(
                    id=s.exercise_instance_id,
                    exercise_id=s.exercise_id,
                    exercise=ExerciseRead.model_validate(s.exercise) if s.exercise else None,
                )
                groups[s.exercise_instance_id] = group
            group.exercise_sets.append(ExerciseSetRead.model_validate(s))
        for group in groups.values():
            group.exercise_sets.sort(key=lambda r: r.set_number)

        base = WorkoutLogSummary.model_validate(workout_log).model_dump()
        return cls(
            **base,
            workout=WorkoutSummary.model_validate(workout) if workout else None,
            exercise_instances=list(groups.values()),
        )
