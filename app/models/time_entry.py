from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Integer, String, Text

from app.database import Base
from app.services.dates import utcnow


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __table_args__ = (
        CheckConstraint("minutes >= 1 AND minutes <= 480", name="ck_time_entries_minutes_range"),
        CheckConstraint(
            "patient_count IS NULL OR patient_count >= 0",
            name="ck_time_entries_patient_count_nonnegative",
        ),
        Index("ix_time_entries_user_id_occurred_on", "user_id", "occurred_on"),
    )

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    task = Column(String, nullable=False, index=True)
    other_task = Column(String, nullable=True)
    minutes = Column(Integer, nullable=False)
    patient_count = Column(Integer, nullable=True)
    is_typical_day = Column(Boolean, nullable=False, default=True)

    # ISO date or date-time text, exactly as submitted.
    occurred_on = Column(String, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
    deleted_at = Column(DateTime, nullable=True, index=True)
