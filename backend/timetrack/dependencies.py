"""
Caller resolution dependencies.

AUTH_MODE=token (default): Bearer token from the auth service; role and
active flag come from the users table.
AUTH_MODE=demo: X-User-Id / X-User-Role headers are trusted as-is. Local use only.
"""

import logging
import os
import uuid
from fastapi import Header, Depends
from sqlalchemy.orm import Session
from typing import Optional

from timetrack.database import get_db
from timetrack.errors import AuthenticationError, AuthorizationError
from timetrack.models.user import User
from timetrack.services.auth import decode_access_token
from timetrack.services.authorization import Caller, Role

logger = logging.getLogger(__name__)

AUTH_MODE = os.getenv("AUTH_MODE", "token")  # "token" or "demo"


def _parse_role(value: Optional[str]) -> Role:
    try:
        return Role((value or "").strip().lower())
    except ValueError:
        raise AuthorizationError(f"Unknown role: {value!r}")


def _caller_from_token(authorization: Optional[str], db: Session) -> Caller:
    if not authorization:
        raise AuthenticationError("Not authenticated")

    token = authorization.removeprefix("Bearer ").strip()
    payload = decode_access_token(token) if token else None
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    user = db.query(User).filter(User.user_id == payload["sub"]).first()
    if not user or user.is_active is False:
        raise AuthenticationError("User not found or disabled")

    return Caller(user_id=user.user_id, role=_parse_role(user.role))


def _caller_from_headers(x_user_id: Optional[str], x_user_role: Optional[str]) -> Caller:
    if not x_user_id:
        raise AuthenticationError("Not authenticated")
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise AuthenticationError("Invalid X-User-Id (must be UUID)")
    return Caller(user_id=user_id, role=_parse_role(x_user_role or Role.employee.value))


def get_caller(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Caller:
    """The authenticated caller of the current request."""
    if AUTH_MODE == "demo" and not authorization:
        return _caller_from_headers(x_user_id, x_user_role)
    return _caller_from_token(authorization, db)
