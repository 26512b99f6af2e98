import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.sql import func

from timetrack.database import Base


# ---------------------------------------------------
# Enums
# ---------------------------------------------------

USER_ROLE_ENUM = String(20)  # "employee" | "admin", parsed into services.authorization.Role


# ---------------------------------------------------
# User
# ---------------------------------------------------

class User(Base):
    """Account row owned by the external auth service; read here for roles and owner identity."""

    __tablename__ = "users"

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    email = Column(String(255), nullable=True, unique=True, index=True)
    name = Column(String(200), nullable=True)

    role = Column(USER_ROLE_ENUM, nullable=False, default="employee")
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
