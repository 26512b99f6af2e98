from __future__ import annotations

import os

# must be set before timetrack.database builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_MODE"] = "token"

import uuid
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from timetrack.database import Base, SessionLocal, engine
from timetrack.main import app
from timetrack.models.user import User
from timetrack.models import timesheet, audit_log  # noqa: F401
from timetrack.services.auth import create_access_token
from timetrack.services.authorization import Caller, Role


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _make_caller(db, name: str, role: Role) -> Caller:
    user = User(user_id=uuid.uuid4(), email=f"{name}@example.com", name=name.title(), role=role.value)
    db.add(user)
    db.commit()
    return Caller(user_id=user.user_id, role=role)


@pytest.fixture
def employee(db) -> Caller:
    return _make_caller(db, "alice", Role.employee)


@pytest.fixture
def other_employee(db) -> Caller:
    return _make_caller(db, "bob", Role.employee)


@pytest.fixture
def admin(db) -> Caller:
    return _make_caller(db, "carol", Role.admin)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def headers():
    def _headers(caller: Caller) -> dict:
        return {"Authorization": f"Bearer {create_access_token(caller.user_id)}"}
    return _headers


@pytest.fixture
def days_ago():
    def _days_ago(n: int) -> date:
        return date.today() - timedelta(days=n)
    return _days_ago
