from __future__ import annotations

from datetime import date, timedelta

from timetrack.services import timesheets as service
from timetrack.services.stats import timesheet_stats


def _seed_alice(db, employee, admin):
    today = date.today()
    a = service.create_entry(db, employee, project="Apollo", hours_worked="4", date=today)
    b = service.create_entry(db, employee, project="Apollo", hours_worked="6", date=today - timedelta(days=1))
    service.create_entry(db, employee, project="Apollo", hours_worked="8", date=today - timedelta(days=2))
    service.approve_entry(db, admin, a.id)
    service.approve_entry(db, admin, b.id)


def test_employee_stats_cover_own_entries(db, employee, admin) -> None:
    _seed_alice(db, employee, admin)

    assert timesheet_stats(db, employee) == {
        "total": 3,
        "approved": 2,
        "pending": 1,
        "rejected": 0,
        "total_hours": 18.0,
        "average_hours": 6.0,
    }


def test_employee_stats_ignore_other_users(db, employee, other_employee, admin) -> None:
    _seed_alice(db, employee, admin)

    stats = timesheet_stats(db, other_employee)
    assert stats["total"] == 0
    assert stats["total_hours"] == 0
    assert stats["average_hours"] is None


def test_admin_stats_cover_everyone(db, employee, other_employee, admin) -> None:
    _seed_alice(db, employee, admin)
    e = service.create_entry(db, other_employee, project="Gemini", hours_worked="3", date=date.today())
    service.reject_entry(db, admin, e.id)

    stats = timesheet_stats(db, admin)
    assert stats["total"] == 4
    assert stats["approved"] == 2
    assert stats["pending"] == 1
    assert stats["rejected"] == 1
    assert stats["total_hours"] == 21.0
    assert stats["average_hours"] == 5.25


def test_empty_store_has_no_average(db, admin) -> None:
    stats = timesheet_stats(db, admin)
    assert stats["total"] == 0
    assert stats["average_hours"] is None
