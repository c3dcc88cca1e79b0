"""Shared test fixtures."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weightbalance.db.engine import DEV_USER_ID
from weightbalance.db.models import Base, UserRow


def make_memory_engine():
    """In-memory SQLite engine with foreign keys enforced."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_engine():
    engine = make_memory_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Yield a SQLAlchemy session per test, rolled back after."""
    session = sessionmaker(bind=db_engine)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def dev_user(db_session):
    """Insert a dev user and return the user_id."""
    db_session.add(UserRow(
        id=DEV_USER_ID,
        provider="local",
        provider_sub="dev",
        email="dev@localhost",
        display_name="Dev User",
    ))
    db_session.flush()
    return DEV_USER_ID


@pytest.fixture
def record_payload():
    """A complete, valid flight record body."""
    return {
        "loading_index_doc": "10000068454",
        "weight_report_doc": "WR-2024-017",
        "report_date": "2024-03-15",
        "aircraft_reg": "PK-WHX",
        "empty_weight": 13311.5,
        "empty_weight_index": 52.43,
        "dow_domestic": 13890.0,
        "doi_domestic": 48.12,
        "dow_international": 13975.0,
        "doi_international": 47.8,
    }


@pytest.fixture
def galley_payload():
    return {
        "galley_no": "G1",
        "arm_m": 20.0,
        "domestic_weight_kg": 100.0,
        "domestic_index": 0.12,
        "international_weight_kg": 50.0,
        "international_index": 0.06,
    }


@pytest.fixture
def crew_payload():
    return {
        "description": "Cabin crew + luggage",
        "qty": 2,
        "arm_m": 5.5,
        "weight_kg": 170.0,
        "index": -2.27,
    }


@pytest.fixture
def app_db():
    """In-memory SQLite engine + session factory for the test app, with the dev user seeded."""
    engine = make_memory_engine()
    TestSession = sessionmaker(bind=engine)

    session = TestSession()
    session.add(UserRow(
        id=DEV_USER_ID, provider="local", provider_sub="dev",
        email="dev@localhost", display_name="Dev User",
    ))
    session.commit()
    session.close()

    yield TestSession
    engine.dispose()


TEST_SECRET = "test-secret-for-api-tests"


@pytest.fixture
def make_client(app_db, monkeypatch):
    """Build a production-mode test client against ``app_db``.

    ``user_id`` bypasses the session cookie; leave it None to exercise real auth.
    ``env`` sets extra environment variables before the app is created.
    """
    from fastapi.testclient import TestClient

    from weightbalance.api.app import create_app
    from weightbalance.db.deps import current_user_id, get_db

    def _make(user_id: str | None = DEV_USER_ID, env: dict[str, str] | None = None):
        monkeypatch.setenv("ENVIRONMENT", "production")  # skip lifespan init_db
        monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
        monkeypatch.delenv("INDEX_POLICY", raising=False)
        monkeypatch.delenv("AIRCRAFT_TYPE", raising=False)
        for key, value in (env or {}).items():
            monkeypatch.setenv(key, value)

        app = create_app()

        def _override_get_db():
            session = app_db()
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

        app.dependency_overrides[get_db] = _override_get_db
        if user_id is not None:
            app.dependency_overrides[current_user_id] = lambda: user_id

        return TestClient(app, raise_server_exceptions=False)

    return _make
