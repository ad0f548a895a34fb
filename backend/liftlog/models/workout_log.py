import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime, ForeignKey, Integer, Uuid, Enum as SAEnum
from liftlog.db import Base
from liftlog.models.mixins import TimestampMixin

class WorkoutLogStatus(str, Enum):
    in_progress = "in_progress"
    paused = "paused"
    completed = "completed"

class WorkoutLog(TimestampMixin, Base):
    __tablename__ = "workout_logs"
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    # a session outlives its template
    workout_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[WorkoutLogStatus] = mapped_column(
        SAEnum(WorkoutLogStatus, name="workout_log_status"),
        nullable=False,
        default=WorkoutLogStatus.in_progress,
        index=True,
    )
    total_active_duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_pause_duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
