import uuid
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator
from liftlog.schemas.common import ClientIdStr, NameStr, NonNegFloat, NonNegInt, PosInt
from liftlog.schemas.exercise import ExerciseRead

class WorkoutExerciseIn(BaseModel):
    # present => update that entry in place, absent => new entry
    id: uuid.UUID | None = None
    exercise_id: uuid.UUID
    exercise_instance_id: uuid.UUID | None = None
    exercise_instance_client_id: ClientIdStr | None = None
    order: PosInt | None = None
    sets: NonNegInt | None = None
    weight: NonNegFloat | None = None
    reps: NonNegInt | None = None

    @field_validator("exercise_instance_client_id")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        return v or None

class WorkoutCreate(BaseModel):
    name: NameStr
    exercises: list[WorkoutExerciseIn] = Field(min_length=1)

class WorkoutUpdate(BaseModel):
    name: NameStr
    exercises: list[WorkoutExerciseIn]

class WorkoutExerciseRead(BaseModel):
    id: uuid.UUID
    workout_id: uuid.UUID
    exercise_id: uuid.UUID
    exercise_instance_id: uuid.UUID | None = None
    order: int | None = Field(default=None, validation_alias=AliasChoices("workout_order", "order"))
    sets: int | None = None
    weight: float | None = None
    reps: int | None = None
    created_at: datetime
    updated_at: datetime
    exercise: ExerciseRead | None = None

    model_config = {"from_attributes": True}

class WorkoutSummary(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

class WorkoutRead(WorkoutSummary):
    workout_exercises: list[WorkoutExerciseRead] = Field(default_factory=list)

    @classmethod
    def build(cls, workout, entries) -> "WorkoutRead":
        base = WorkoutSummary.model_validate(workout).model_dump()
        return cls(**base, workout_exercises=[WorkoutExerciseRead.model_validate(e) for e in entries])
