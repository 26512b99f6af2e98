import enum
import uuid

from sqlalchemy import CheckConstraint, Column, String, Text, DateTime, Date, Numeric, Enum, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timetrack.database import Base
from timetrack.models.user import User


class TimesheetStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


class TimesheetEntry(Base):
    __tablename__ = "timesheet_entries"
    __table_args__ = (
        CheckConstraint("hours_worked >= 1 AND hours_worked <= 12", name="ck_ts_hours_range"),
        UniqueConstraint("user_id", "project", "date", name="uq_ts_user_project_date"),
        Index("ix_ts_status", "status"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    project = Column(String(255), nullable=False)
    hours_worked = Column(Numeric(5, 2), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(
        Enum(TimesheetStatus, name="timesheet_status_enum", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=TimesheetStatus.pending,
    )
    approved_by = Column(Uuid(as_uuid=True), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship(User, foreign_keys=[user_id], lazy="joined")

    def __repr__(self):
        return f"<TimesheetEntry(id={self.id}, user_id={self.user_id}, project={self.project}, date={self.date}, status={self.status})>"
