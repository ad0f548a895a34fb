import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, Enum as SAEnum
from liftlog.db import Base
from liftlog.models.mixins import TimestampMixin

class SetStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    skipped = "skipped"

class ExerciseSet(TimestampMixin, Base):
    __tablename__ = "exercise_sets"
    workout_log_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("workout_logs.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    exercise_instance_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("exercise_instances.id", ondelete="CASCADE"), index=True
    )
    # 1-based within the instance; never resequenced after a delete
    set_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    weight: Mapped[float | None] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[SetStatus] = mapped_column(
        SAEnum(SetStatus, name="set_status"),
        nullable=False,
        default=SetStatus.pending,
        index=True,
    )

    exercise = relationship("Exercise")
