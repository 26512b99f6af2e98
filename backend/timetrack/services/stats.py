"""Aggregate timesheet figures, scoped by caller role."""

from decimal import Decimal

from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from timetrack.models.timesheet import TimesheetEntry, TimesheetStatus
from timetrack.services.authorization import Caller, scope_query


def timesheet_stats(db: Session, caller: Caller) -> dict:
    """Counts per status and hour totals over the entries caller can see.

    average_hours is None when there are no entries.
    """
    q = db.query(
        TimesheetEntry.status,
        sa_func.count(TimesheetEntry.id),
        sa_func.coalesce(sa_func.sum(TimesheetEntry.hours_worked), 0),
    )
    rows = scope_query(q, caller).group_by(TimesheetEntry.status).all()

    counts = {s: 0 for s in TimesheetStatus}
    total_hours = Decimal("0")
    for status, count, hours in rows:
        counts[TimesheetStatus(status)] += count
        total_hours += Decimal(str(hours))

    total = sum(counts.values())
    return {
        "total": total,
        "approved": counts[TimesheetStatus.approved],
        "pending": counts[TimesheetStatus.pending],
        "rejected": counts[TimesheetStatus.rejected],
        "total_hours": round(float(total_hours), 2),
        "average_hours": round(float(total_hours / total), 2) if total else None,
    }
