import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tasktracker.constants.constants import Role
from tasktracker.db import models
from tasktracker.db.models import Base
from tasktracker.db.session import get_db
from tasktracker.db.store import TaskStore
from tasktracker.main import app
from tasktracker.schemas.user import UserProfile


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def store(db):
    return TaskStore(db)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user row directly; returns its profile."""
    def _make_user(emp_id, role, team_name=None, reports_to=None, managed_teams=()):
        role = Role(role)
        user = models.User(
            emp_id=emp_id, emp_name=f"Name {emp_id}", email=f"{emp_id.lower()}@company.com",
            hashed_password="not-used", role=role.value, team_name=team_name,
            managed_teams=list(managed_teams), reports_to=reports_to,
        )
        db.add(user)
        db.commit()
        return UserProfile.model_validate(user)

    return _make_user


@pytest.fixture
def alpha_team(make_user):
    """
    Team "alpha": team-leader TL1, track-leads TR1 and TR2, employees E1
    (reports to TR1) and E2 (reports to TR2); tech-lead TECH1 manages alpha.
    """
    return {
        "TL1": make_user("TL1", "team-leader", "alpha", reports_to="TECH1"),
        "TR1": make_user("TR1", "track-lead", "alpha", reports_to="TL1"),
        "TR2": make_user("TR2", "track-lead", "alpha", reports_to="TL1"),
        "E1": make_user("E1", "employee", "alpha", reports_to="TR1"),
        "E2": make_user("E2", "employee", "alpha", reports_to="TR2"),
        "TECH1": make_user("TECH1", "tech-lead", managed_teams=["alpha"]),
        "TECH2": make_user("TECH2", "tech-lead", managed_teams=["beta"]),
        "ADMIN": make_user("ADMIN", "admin"),
    }
