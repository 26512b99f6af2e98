"""
Seed script for Timetrack — creates one admin and one employee for local use.

Run: python -m timetrack.seed
"""
import logging
import sys

from timetrack.database import Base, DATABASE_URL, SessionLocal, engine
from timetrack.models.user import User
from timetrack.models.timesheet import TimesheetEntry  # noqa: F401  (registers the table)
from timetrack.models.audit_log import AuditLog  # noqa: F401
from timetrack.services.auth import create_access_token

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEED_USERS = [
    {"email": "admin@timetrack.local", "name": "Test Admin", "role": "admin"},
    {"email": "employee@timetrack.local", "name": "Test User", "role": "employee"},
]


def seed_users(db) -> list[User]:
    """Create the seed users that don't exist yet. Returns all seed users."""
    users = []
    for seed in SEED_USERS:
        user = db.query(User).filter(User.email == seed["email"]).first()
        if not user:
            user = User(**seed, is_active=True)
            db.add(user)
            db.flush()
            logger.info("Created %s: %s (%s)", seed["role"], seed["name"], seed["email"])
        else:
            logger.info("User %s already exists, skipping.", seed["email"])
        users.append(user)
    db.commit()
    return users


def run_seed():
    if DATABASE_URL.startswith("sqlite"):
        # no migrations for local sqlite files
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        for user in seed_users(db):
            logger.info("  %s  id=%s  token=%s", user.email, user.user_id, create_access_token(user.user_id))
        logger.info("Seed complete.")
    except Exception:
        logger.exception("Seed failed")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
