import os

# Settings are read at import time; point them at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("FIREBASE_PROJECT_ID", "volunteer-hub-test")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from volunteer_api.auth.identity import Identity
from volunteer_api.core.base import Base

# Import models so they register with SQLAlchemy metadata.
from volunteer_api.models.post import Post  # noqa: F401
from volunteer_api.models.volunteer_request import VolunteerRequest  # noqa: F401

from volunteer_api.core.database import get_db
from volunteer_api.dependencies.auth import require_identity

ORGANIZER = "organizer@example.com"
VOLUNTEER = "volunteer@example.com"
OTHER = "other@example.com"


def identity_for(email: str) -> Identity:
    return Identity.from_firebase({"sub": f"uid-{email}", "email": email})


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # StaticPool keeps one in-memory DB for the whole session; reset per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def app(db_session, monkeypatch):
    import volunteer_api.main as main

    # The real startup check targets settings.DATABASE_URL; tests use db_session.
    monkeypatch.setattr(main, "init_db", lambda: None)
    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary email.

    Usage:
        with client_for("someone@example.com") as c:
            ...
    """

    @contextmanager
    def _client_for(email: str):
        app.dependency_overrides[require_identity] = lambda: identity_for(email)
        with TestClient(app) as c:
            yield c
        app.dependency_overrides.pop(require_identity, None)

    return _client_for


@pytest.fixture()
def client(client_for):
    """
    Default client authenticated as the organizer.
    """
    with client_for(ORGANIZER) as c:
        yield c


@pytest.fixture()
def anon_client(app):
    """
    Client that goes through the real request gate.
    """
    with TestClient(app) as c:
        yield c
