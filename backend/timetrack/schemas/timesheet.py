from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from typing import Annotated, Optional
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from timetrack.models.timesheet import TimesheetStatus

ProjectName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

MIN_HOURS = Decimal("1")
MAX_HOURS = Decimal("12")
HOURS_PLACES = Decimal("0.01")


class TimesheetEntryIn(BaseModel):
    """Body of POST /timesheets and PUT /timesheets/{id}; every field is replaced on update."""

    project: ProjectName
    hours_worked: Decimal
    date: date
    notes: Optional[str] = None

    @field_validator("hours_worked")
    @classmethod
    def round_hours(cls, value):
        # Stored as numeric(5, 2); the range applies to the stored value.
        try:
            rounded = value.quantize(HOURS_PLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            rounded = None
        if rounded is None or not MIN_HOURS <= rounded <= MAX_HOURS:
            raise ValueError("The hours worked must be between 1 and 12.")
        return rounded

    @field_validator("date")
    @classmethod
    def not_in_future(cls, value):
        if value > date.today():
            raise ValueError("The date must be a date before or equal to today.")
        return value


class TimesheetFilters(BaseModel):
    status: Optional[str] = None
    project: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class RejectRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=2000)


class OwnerOut(BaseModel):
    user_id: UUID
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TimesheetEntryResponse(BaseModel):
    id: UUID
    user_id: UUID
    project: str
    hours_worked: float
    date: date
    notes: Optional[str] = None
    status: TimesheetStatus
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[OwnerOut] = None

    model_config = ConfigDict(from_attributes=True)


class TimesheetEnvelope(BaseModel):
    message: str
    data: TimesheetEntryResponse


class MessageResponse(BaseModel):
    message: str


class TimesheetStats(BaseModel):
    total: int
    approved: int
    pending: int
    rejected: int
    total_hours: float
    average_hours: Optional[float] = None
