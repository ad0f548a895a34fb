import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, Uuid
from liftlog.db import Base
from liftlog.models.mixins import TimestampMixin

class ExerciseInstance(TimestampMixin, Base):
    """
    Identity token for one occurrence of an Exercise inside a template or a
    session. Immutable once created; only ever soft-deleted.
    """
    __tablename__ = "exercise_instances"
    exercise_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    workout_log_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workout_logs.id", ondelete="SET NULL"), nullable=True, index=True
    )

    exercise = relationship("Exercise")
