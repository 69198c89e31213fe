"""Shared fixtures. Routers are exercised with the service layer patched, so no MongoDB is needed."""

import os
from datetime import datetime
from types import SimpleNamespace

import pytest
from bson import ObjectId

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from fastapi.testclient import TestClient  # noqa: E402

from wellness.features.auth.dependencies import get_current_user  # noqa: E402
from wellness.features.auth.models import UserRole, UserStatus  # noqa: E402
from wellness.main import app as wellness_app  # noqa: E402


API = "/api/v1"


def make_user(role: UserRole = UserRole.STAFF, **overrides):
    """Stand-in for a stored User with every field the responses read."""
    now = datetime(2025, 1, 1, 9, 0, 0)
    fields = dict(
        id=ObjectId(),
        email=f"{role.value}@example.com",
        name=f"Test {role.value.title()}",
        role=role,
        status=UserStatus.ACTIVE,
        password_hash=None,
        phone=None,
        title=None,
        specialty=None,
        npi=None,
        last_login=None,
        invited_by=None,
        invite_token=None,
        invitation_sent_at=None,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def app():
    yield wellness_app
    wellness_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # Not entered as a context manager: the lifespan (MongoDB connect) never runs
    return TestClient(app)


@pytest.fixture
def login_as(app):
    """Make every request run as a user with the given role."""

    def _login_as(role: UserRole = UserRole.STAFF, **overrides):
        user = make_user(role, **overrides)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login_as


@pytest.fixture
def admin(login_as):
    return login_as(UserRole.ADMIN)


@pytest.fixture
def provider(login_as):
    return login_as(UserRole.PROVIDER)


@pytest.fixture
def staff(login_as):
    return login_as(UserRole.STAFF)
