import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, Integer, Numeric, Uuid
from liftlog.db import Base
from liftlog.models.mixins import TimestampMixin

class WorkoutExercise(TimestampMixin, Base):
    """Planned exercise entry of a template. Every planning field may be left open."""
    __tablename__ = "workout_exercises"
    workout_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    exercise_instance_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercise_instances.id", ondelete="SET NULL"), nullable=True, index=True
    )
    workout_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[float | None] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)

    exercise = relationship("Exercise")
    exercise_instance = relationship("ExerciseInstance")
