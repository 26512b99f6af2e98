"""
Timesheets router.

Static routes (/stats) MUST come before /{entry_id}, otherwise FastAPI
tries to parse "stats" as a UUID and answers 422.
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from timetrack.database import get_db
from timetrack.dependencies import get_caller
from timetrack.schemas.timesheet import (
    MessageResponse,
    RejectRequest,
    TimesheetEntryIn,
    TimesheetEntryResponse,
    TimesheetEnvelope,
    TimesheetFilters,
    TimesheetStats,
)
from timetrack.services import timesheets as service
from timetrack.services.authorization import Caller
from timetrack.services.stats import timesheet_stats

router = APIRouter(prefix="/timesheets", tags=["Timesheets"])


def _envelope(message: str, entry) -> dict:
    return {"message": message, "data": TimesheetEntryResponse.model_validate(entry)}


# ══════════════════════════════════════════════
# COLLECTION + STATIC ROUTES
# ══════════════════════════════════════════════

@router.post("", response_model=TimesheetEnvelope, status_code=201)
def create_entry(
    body: TimesheetEntryIn,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    entry = service.create_entry(
        db, caller,
        project=body.project, hours_worked=body.hours_worked, date=body.date, notes=body.notes,
    )
    return _envelope("Timesheet submitted successfully.", entry)


@router.get("", response_model=list[TimesheetEntryResponse])
def list_entries(
    status: Optional[str] = Query(None),
    project: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    filters = TimesheetFilters(status=status, project=project, date_from=date_from, date_to=date_to)
    return service.list_entries(db, caller, filters)


@router.get("/stats", response_model=TimesheetStats)
def stats(
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return timesheet_stats(db, caller)


# ══════════════════════════════════════════════
# DYNAMIC ROUTES — /{entry_id} AFTER static routes
# ══════════════════════════════════════════════

@router.get("/{entry_id}", response_model=TimesheetEntryResponse)
def get_entry(
    entry_id: uuid.UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return service.get_entry(db, caller, entry_id)


@router.put("/{entry_id}", response_model=TimesheetEnvelope)
def update_entry(
    entry_id: uuid.UUID,
    body: TimesheetEntryIn,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    entry = service.update_entry(
        db, caller, entry_id,
        project=body.project, hours_worked=body.hours_worked, date=body.date, notes=body.notes,
    )
    return _envelope("Timesheet updated successfully.", entry)


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_entry(
    entry_id: uuid.UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    service.delete_entry(db, caller, entry_id)
    return {"message": "Timesheet deleted successfully."}


# ── Review (admin action) ──

@router.patch("/{entry_id}/approve", response_model=TimesheetEnvelope)
def approve_entry(
    entry_id: uuid.UUID,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    entry = service.approve_entry(db, caller, entry_id)
    return _envelope("Timesheet approved successfully.", entry)


@router.patch("/{entry_id}/reject", response_model=TimesheetEnvelope)
def reject_entry(
    entry_id: uuid.UUID,
    body: Optional[RejectRequest] = Body(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    entry = service.reject_entry(db, caller, entry_id, reason=body.reason if body else None)
    return _envelope("Timesheet rejected.", entry)
