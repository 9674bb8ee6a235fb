"""Shared fixtures: a throwaway SQLite database and a fresh user per test.

The environment is set before any application module is imported so the
engines and log handlers point at a temporary directory.
"""
import os
import tempfile
import uuid

_TMP_DIR = tempfile.mkdtemp(prefix="safeplate-tests-")
os.environ.setdefault("WRITE_DATABASE_URL", "sqlite:///" + os.path.join(_TMP_DIR, "test.db"))
os.environ.setdefault("LOG_DIR", os.path.join(_TMP_DIR, "logs"))

import pytest

from database import init_db
from database.database import WriteSessionLocal


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    """Initialize database before tests."""
    init_db()


@pytest.fixture
def db():
    session = WriteSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _new_user(db) -> int:
    from api.users import create_user
    from schemas import UserCreateRequest

    user = create_user(UserCreateRequest(name="Test Caregiver", email=f"{uuid.uuid4().hex}@example.com"), db=db)
    return user.id


@pytest.fixture
def user_id(db):
    return _new_user(db)


@pytest.fixture
def other_user_id(db):
    return _new_user(db)
