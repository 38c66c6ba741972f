"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("JWT_SECRET", "test-secret")
    os.environ.setdefault("DATABASE_URL", "sqlite://")
    os.environ.setdefault("BCRYPT_ROUNDS", "4")
    os.environ.setdefault("ENVIRONMENT", "test")
    os.environ.setdefault("AUTO_CREATE_SCHEMA", "true")


_set_default_env()

from app.config import settings  # noqa: E402
from app.db.database import Database  # noqa: E402
from app.services.credential_store import CredentialStore  # noqa: E402


@pytest.fixture()
def client() -> Iterator[TestClient]:
    """Create a FastAPI test client backed by a fresh in-memory store."""
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db() -> Iterator[Database]:
    """Open an isolated in-memory store with the schema created."""
    database = Database.from_settings(settings.model_copy(update={"database_url": "sqlite://"}))
    database.create_schema()
    yield database
    database.close()


@pytest.fixture()
def credentials(db: Database) -> CredentialStore:
    return CredentialStore(db)


@pytest.fixture()
def owner_id(credentials: CredentialStore):
    """Id of a freshly created account."""
    return credentials.create("owner@example.com", "not-a-real-hash").id


@pytest.fixture()
def other_owner_id(credentials: CredentialStore):
    """Id of a second, unrelated account."""
    return credentials.create("other@example.com", "not-a-real-hash").id
