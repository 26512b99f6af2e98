"""
Authorization gate — decides what a caller may see and change.

Roles:
  employee: own entries only; other people's entries are invisible
  admin:    every entry, plus approve/reject

All role checks go through decide(); nothing else compares role values.
"""

import enum
import logging
import uuid

from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Query

from timetrack.errors import AuthorizationError
from timetrack.models.timesheet import TimesheetEntry

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    employee = "employee"
    admin = "admin"


class Access(enum.Enum):
    FULL = "full"
    OWNER_ONLY = "owner_only"
    DENIED = "denied"


class Caller(BaseModel):
    """The authenticated identity behind a request."""

    user_id: uuid.UUID
    role: Role

    model_config = ConfigDict(frozen=True)


def decide(caller: Caller, owner_id: uuid.UUID | None) -> Access:
    """Access level of caller over a resource owned by owner_id.

    owner_id=None asks about owner-independent actions (approve/reject),
    which only admins hold.
    """
    if caller.role is Role.admin:
        return Access.FULL
    if owner_id is not None and caller.user_id == owner_id:
        return Access.OWNER_ONLY
    return Access.DENIED


def can_view(caller: Caller, entry: TimesheetEntry) -> bool:
    return decide(caller, entry.user_id) is not Access.DENIED


def require_entry_access(caller: Caller, entry: TimesheetEntry) -> Access:
    """Raise AuthorizationError unless caller may mutate entry."""
    access = decide(caller, entry.user_id)
    if access is Access.DENIED:
        logger.warning("user=%s denied access to entry %s", caller.user_id, entry.id)
        raise AuthorizationError("Unauthorized")
    return access


def require_reviewer(caller: Caller, action: str = "review") -> None:
    """Approve/reject are admin-only regardless of who owns the entry."""
    if decide(caller, None) is not Access.FULL:
        logger.warning("user=%s attempted to %s without admin role", caller.user_id, action)
        raise AuthorizationError(f"Unauthorized. Only admin can {action}.")


def scope_query(query: Query, caller: Caller) -> Query:
    """Restrict a TimesheetEntry query to the rows caller may see."""
    if decide(caller, None) is Access.FULL:
        return query
    return query.filter(TimesheetEntry.user_id == caller.user_id)
