import uuid
from typing import Any, Union
from sqlalchemy.orm import Session

from timetrack.models.audit_log import AuditLog


def log_action(
    db: Session,
    user_id: Union[uuid.UUID, str],
    action: str,
    resource_type: str,
    resource_id: Any = None,
    details: dict | None = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction; it commits with the change it describes."""
    entry = AuditLog(
        user_id=user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id)),
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details.copy() if isinstance(details, dict) else None,
    )
    db.add(entry)
    return entry
