"""
Timesheet service — create, list, edit, delete, approve and reject entries.

Every operation takes the request's Session and Caller, consults the
authorization gate, and commits its own transaction. Failures are raised
as timetrack.errors exceptions; the HTTP layer maps them to status codes.

Duplicates: one entry per (owner, project, date). The read-check gives a
readable 409 in the common case; the uq_ts_user_project_date constraint
catches concurrent submissions that both pass the read-check.
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timetrack.errors import ConflictError, NotFoundError, ValidationError
from timetrack.models.timesheet import TimesheetEntry, TimesheetStatus
from timetrack.schemas.timesheet import TimesheetEntryIn, TimesheetFilters
from timetrack.services.audit import log_action
from timetrack.services.authorization import (
    Caller,
    can_view,
    require_entry_access,
    require_reviewer,
    scope_query,
)

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "timesheet_entry"
DUPLICATE_MESSAGE = "This project is already logged for this date."
NOT_FOUND_MESSAGE = "Timesheet not found."
UNIQUE_CONSTRAINT = "uq_ts_user_project_date"


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────

def _validate(project, hours_worked, date, notes) -> TimesheetEntryIn:
    try:
        return TimesheetEntryIn.model_validate(
            {"project": project, "hours_worked": hours_worked, "date": date, "notes": notes}
        )
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def _load(db: Session, entry_id: uuid.UUID) -> TimesheetEntry:
    entry = db.query(TimesheetEntry).filter(TimesheetEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return entry


def _find_duplicate(
    db: Session,
    owner_id: uuid.UUID,
    project: str,
    entry_date: datetime.date,
    exclude_id: Optional[uuid.UUID] = None,
) -> Optional[TimesheetEntry]:
    q = db.query(TimesheetEntry).filter(
        TimesheetEntry.user_id == owner_id,
        TimesheetEntry.project == project,
        TimesheetEntry.date == entry_date,
    )
    if exclude_id is not None:
        q = q.filter(TimesheetEntry.id != exclude_id)
    return q.first()


def _is_duplicate_violation(exc: IntegrityError) -> bool:
    msg = str(exc.orig)
    # postgres names the constraint; sqlite lists the columns
    return UNIQUE_CONSTRAINT in msg or "UNIQUE constraint failed: timesheet_entries" in msg


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_duplicate_violation(exc):
            logger.warning("Duplicate timesheet rejected by unique constraint")
            raise ConflictError(DUPLICATE_MESSAGE) from exc
        raise


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _snapshot(fields: TimesheetEntryIn) -> dict:
    return {
        "project": fields.project,
        "hours_worked": str(fields.hours_worked),
        "date": fields.date.isoformat(),
    }


# ──────────────────────────────────────────────
# Operations
# ──────────────────────────────────────────────

def create_entry(
    db: Session,
    caller: Caller,
    *,
    project: str,
    hours_worked: Decimal | float | str,
    date: datetime.date | str,
    notes: Optional[str] = None,
) -> TimesheetEntry:
    """Submit a new Pending entry owned by caller."""
    fields = _validate(project, hours_worked, date, notes)

    if _find_duplicate(db, caller.user_id, fields.project, fields.date):
        logger.warning("user=%s duplicate entry for %s on %s", caller.user_id, fields.project, fields.date)
        raise ConflictError(DUPLICATE_MESSAGE)

    entry = TimesheetEntry(
        id=uuid.uuid4(),
        user_id=caller.user_id,
        project=fields.project,
        hours_worked=fields.hours_worked,
        date=fields.date,
        notes=fields.notes,
        status=TimesheetStatus.pending,
    )
    db.add(entry)
    log_action(db, caller.user_id, "timesheet.create", RESOURCE_TYPE, entry.id, _snapshot(fields))
    _commit(db)
    db.refresh(entry)
    logger.info("user=%s created timesheet %s (%s, %s h)", caller.user_id, entry.id, entry.project, entry.hours_worked)
    return entry


def list_entries(
    db: Session,
    caller: Caller,
    filters: Optional[TimesheetFilters] = None,
) -> list[TimesheetEntry]:
    """Entries visible to caller, narrowed by filters. No pagination."""
    filters = filters or TimesheetFilters()
    q = scope_query(db.query(TimesheetEntry), caller)

    if filters.status is not None:
        try:
            status = TimesheetStatus(filters.status)
        except ValueError:
            # exact match on the stored value; nothing else can match
            return []
        q = q.filter(TimesheetEntry.status == status)
    if filters.project:
        q = q.filter(TimesheetEntry.project.ilike(f"%{_escape_like(filters.project)}%", escape="\\"))
    # a single bound is ignored
    if filters.date_from is not None and filters.date_to is not None:
        q = q.filter(TimesheetEntry.date.between(filters.date_from, filters.date_to))

    return q.order_by(TimesheetEntry.date.desc(), TimesheetEntry.created_at.desc()).all()


def get_entry(db: Session, caller: Caller, entry_id: uuid.UUID) -> TimesheetEntry:
    entry = _load(db, entry_id)
    # hidden entries are reported as missing, not forbidden
    if not can_view(caller, entry):
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return entry


def update_entry(
    db: Session,
    caller: Caller,
    entry_id: uuid.UUID,
    *,
    project: str,
    hours_worked: Decimal | float | str,
    date: datetime.date | str,
    notes: Optional[str] = None,
) -> TimesheetEntry:
    """Replace the mutable fields of an entry and reopen it as Pending.

    The duplicate check runs against the entry's owner, so an admin editing
    someone else's entry is compared with that person's other entries.
    """
    entry = _load(db, entry_id)
    require_entry_access(caller, entry)
    fields = _validate(project, hours_worked, date, notes)

    if _find_duplicate(db, entry.user_id, fields.project, fields.date, exclude_id=entry.id):
        logger.warning("user=%s edit of %s collides with another entry", caller.user_id, entry.id)
        raise ConflictError(DUPLICATE_MESSAGE)

    previous_status = entry.status
    entry.project = fields.project
    entry.hours_worked = fields.hours_worked
    entry.date = fields.date
    entry.notes = fields.notes
    entry.status = TimesheetStatus.pending
    entry.approved_by = None
    entry.approved_at = None
    entry.rejection_reason = None

    details = _snapshot(fields)
    details["previous_status"] = previous_status.value
    log_action(db, caller.user_id, "timesheet.update", RESOURCE_TYPE, entry.id, details)
    _commit(db)
    db.refresh(entry)
    logger.info("user=%s updated timesheet %s (was %s)", caller.user_id, entry.id, previous_status.value)
    return entry


def delete_entry(db: Session, caller: Caller, entry_id: uuid.UUID) -> None:
    entry = _load(db, entry_id)
    require_entry_access(caller, entry)

    log_action(
        db, caller.user_id, "timesheet.delete", RESOURCE_TYPE, entry.id,
        {"owner": str(entry.user_id), "project": entry.project, "date": entry.date.isoformat()},
    )
    db.delete(entry)
    _commit(db)
    logger.info("user=%s deleted timesheet %s", caller.user_id, entry_id)


def _review(
    db: Session,
    caller: Caller,
    entry_id: uuid.UUID,
    status: TimesheetStatus,
    reason: Optional[str] = None,
) -> TimesheetEntry:
    action = "approve" if status is TimesheetStatus.approved else "reject"
    require_reviewer(caller, action)
    entry = _load(db, entry_id)

    entry.status = status
    entry.approved_by = caller.user_id
    entry.approved_at = datetime.datetime.now(datetime.timezone.utc)
    entry.rejection_reason = reason if status is TimesheetStatus.rejected else None

    log_action(
        db, caller.user_id, f"timesheet.{action}", RESOURCE_TYPE, entry.id,
        {"owner": str(entry.user_id), "reason": entry.rejection_reason},
    )
    _commit(db)
    db.refresh(entry)
    logger.info("admin=%s marked timesheet %s %s", caller.user_id, entry.id, status.value)
    return entry


def approve_entry(db: Session, caller: Caller, entry_id: uuid.UUID) -> TimesheetEntry:
    return _review(db, caller, entry_id, TimesheetStatus.approved)


def reject_entry(
    db: Session,
    caller: Caller,
    entry_id: uuid.UUID,
    reason: Optional[str] = None,
) -> TimesheetEntry:
    return _review(db, caller, entry_id, TimesheetStatus.rejected, reason)
