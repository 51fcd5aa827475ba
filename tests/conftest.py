"""Shared pytest fixtures.

Environment is configured before the application package is imported:
settings are read at import time.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator, Iterator

import bcrypt
import pytest

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery"

_UPLOAD_ROOT = tempfile.mkdtemp(prefix="ambassador-uploads-")
_ADMIN_HASH = bcrypt.hashpw(ADMIN_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("FRONTEND_ORIGIN", "http://localhost:5173")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["UPLOAD_DIR"] = _UPLOAD_ROOT
os.environ["ADMIN_CREDENTIALS"] = f"{ADMIN_USERNAME}:{_ADMIN_HASH}:Administrator"
os.environ["LOG_JSON"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from ambassador import models  # noqa: E402,F401
from ambassador.app import app  # noqa: E402
from ambassador.core import get_session  # noqa: E402
from ambassador.services.cache import cache  # noqa: E402


# ===========================================
# DATABASE FIXTURES
# ===========================================


@pytest.fixture
def engine():
    """Fresh in-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def clear_cache() -> Iterator[None]:
    cache.clear()
    yield
    cache.clear()


# ===========================================
# HTTP CLIENT FIXTURES
# ===========================================


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    def _get_session() -> Iterator[Session]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client) -> TestClient:
    response = client.post(
        "/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def user_client(client):
    """Client signed in as a freshly registered ambassador."""
    response = client.post(
        "/auth/signup",
        json={"email": "ambassador@example.edu", "password": "hunter22", "display_name": "Ana"},
    )
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def upload_root() -> str:
    return _UPLOAD_ROOT



@pytest.fixture
def other_client(client) -> TestClient:
    """Second client with its own cookie jar, sharing the test database."""
    return TestClient(app)
