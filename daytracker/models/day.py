"""SQLAlchemy model for tracked blocks of work time."""

from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Index, Integer, Text, UniqueConstraint

from ..db.integrity import DAYS_USER_DATE_START_UNIQUE
from ..db.session import Base


class DayEntry(Base):
    """One block of time on a calendar date. ``time_end`` is NULL while open."""

    __tablename__ = "days"
    __table_args__ = (
        UniqueConstraint("user_id", "date", "time_start", name=DAYS_USER_DATE_START_UNIQUE),
        Index("ix_days_user_id_date", "user_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Text, nullable=False, index=True)
    time_start = Column(Text, nullable=False)
    time_end = Column(Text, nullable=True)
    # Derived from time_start/time_end on every write.
    hours = Column(Float, nullable=False, default=0.0)
    location = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    @property
    def open(self) -> bool:
        return self.time_end is None


__all__ = ["DayEntry"]
