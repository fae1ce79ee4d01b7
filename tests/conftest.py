"""
Pytest configuration and fixtures.

Required settings are injected into the environment before any package module
is imported, and the SQLite schema is rebuilt around every test.
"""

import os
import tempfile
import uuid
from datetime import datetime, timedelta

import pytest

_tmpdir = tempfile.mkdtemp(prefix="gym-access-tests-")
os.environ.setdefault("DB_URL", f"sqlite:///{_tmpdir}/test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("RFID_API_KEY", "test-reader-key")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from gym_access.auth import Identity, hash_password, issue_token  # noqa: E402
from gym_access.db import SessionLocal, engine  # noqa: E402
from gym_access.models import Base, User  # noqa: E402
from gym_access.realtime import broadcaster  # noqa: E402


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for each test."""
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def empty_registry():
    """Drop anything a test left in the process-wide registry."""
    yield
    for channel in broadcaster.registry.snapshot():
        broadcaster.registry.unregister(channel)


def make_user(role="member", **fields):
    user = User(
        id=fields.pop("id", str(uuid.uuid4())),
        email=fields.pop("email", f"{uuid.uuid4().hex[:8]}@gym.test"),
        name=fields.pop("name", "Test User"),
        role=role,
        **fields,
    )
    with SessionLocal() as s:
        s.add(user)
        s.commit()
        s.refresh(user)
    return user


@pytest.fixture
def receptionist():
    return make_user(role="receptionist", name="Front Desk", hashed_password=hash_password("desk-pass"))


@pytest.fixture
def member_with_card():
    return make_user(
        role="member",
        name="Ana Member",
        rfid_card_number="CARD-001",
        membership_type="monthly",
        membership_expiry=datetime.now() + timedelta(days=10),
        membership_status="active",
    )


@pytest.fixture
def expired_member():
    return make_user(
        role="member",
        name="Late Payer",
        rfid_card_number="CARD-002",
        membership_type="monthly",
        membership_expiry=datetime.now() - timedelta(days=1),
        membership_status="active",
    )


@pytest.fixture
def receptionist_token(receptionist):
    return issue_token(receptionist)


@pytest.fixture
def identity():
    return Identity(id="u-1", email="desk@gym.test", name="Desk", role="receptionist")


@pytest.fixture
def reader_headers():
    return {"Authorization": "Bearer test-reader-key"}


@pytest.fixture
def admin_token():
    return issue_token(make_user(role="admin", name="Owner"))
