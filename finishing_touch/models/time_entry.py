import uuid

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from finishing_touch.database import Base


class TimeEntry(Base):
    """Clock-in/clock-out record. An entry with no clock_out is open."""

    __tablename__ = "time_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)

    clock_in = Column(DateTime(timezone=True), nullable=False)
    clock_out = Column(DateTime(timezone=True), nullable=True)

    # Stored when the entry is closed, never recomputed on read
    duration_minutes = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employee = relationship("Employee", lazy="selectin")

    __table_args__ = (
        Index("idx_time_entries_employee_clock_in", "employee_id", "clock_in"),
        # At most one open entry per employee
        Index(
            "uq_time_entries_open_per_employee",
            "employee_id",
            unique=True,
            postgresql_where=text("clock_out IS NULL"),
            sqlite_where=text("clock_out IS NULL"),
        ),
    )
