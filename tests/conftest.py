"""Shared test configuration and fixtures for Registration API tests"""

import logging
import time
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from registration_api.main import create_app
from registration_api.models.database import RecordStore
from registration_api.models.registration import Registration, SessionMode
from registration_api.services.registration_service import RegistrationService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def record_store():
    """In-memory record store, fresh for every test"""
    store = RecordStore("sqlite://")
    store.init()

    yield store

    store.close()


@pytest.fixture
def _db_session(record_store):
    """Private DB session for fixtures only.

    Prefer `registration_service` or `make_registration` in tests to avoid
    coupling them to the session internals.
    """
    session = record_store.session()

    yield session

    session.close()


@pytest.fixture
def registration_service(_db_session):
    """Create a RegistrationService instance for testing"""
    return RegistrationService(_db_session)


@pytest.fixture
def make_registration(_db_session):
    """Insert a registration directly, with full control over created_at"""

    def _make(
        email=None,
        created_at=None,
        selected_session=SessionMode.MORNING,
        **fields,
    ) -> Registration:
        registration = Registration(
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            selected_session=selected_session,
            created_at=created_at or datetime.now(timezone.utc),
            **fields,
        )
        _db_session.add(registration)
        _db_session.commit()
        _db_session.refresh(registration)
        return registration

    return _make


@pytest.fixture
def server_tz(monkeypatch):
    """Switch the process-local time zone (POSIX TZ string) for one test"""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(name: str):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set

    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def client(record_store):
    """Test client serving from the per-test record store"""
    app = create_app(record_store)
    with TestClient(app) as test_client:
        yield test_client
