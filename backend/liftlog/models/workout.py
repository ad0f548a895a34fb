import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Uuid
from liftlog.db import Base
from liftlog.models.mixins import TimestampMixin

class Workout(TimestampMixin, Base):
    __tablename__ = "workouts"
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
