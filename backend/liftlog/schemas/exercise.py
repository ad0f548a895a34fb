import uuid
from datetime import datetime
from pydantic import BaseModel
from liftlog.schemas.common import NameStr

class ExerciseCreate(BaseModel):
    name: NameStr

class ExerciseRead(BaseModel):
    id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
