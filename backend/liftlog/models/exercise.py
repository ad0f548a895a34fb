from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String
from liftlog.db import Base
from liftlog.models.mixins import TimestampMixin

class Exercise(TimestampMixin, Base):
    __tablename__ = "exercises"
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
