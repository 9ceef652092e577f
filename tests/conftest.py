"""Pytest configuration and shared fixtures.

Every test gets a fresh SQLite database file. The pysqlite driver is put in
autocommit mode and transactions are started explicitly so that SAVEPOINTs
behave the way they do on PostgreSQL.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

import umuturage.db.models  # noqa: F401  registers the tables on Base.metadata
from umuturage.api.deps import get_db
from umuturage.api.main import app
from umuturage.core.rbac.roles import UserRole
from umuturage.core.security import create_access_token
from umuturage.db.base import Base
from tests.factories import create_hierarchy


def _sqlite_engine(url, begin: str = "BEGIN", timeout: float = 5.0):
    engine = create_engine(url, connect_args={"check_same_thread": False, "timeout": timeout})

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql(begin)

    return engine


@pytest.fixture
def db_engine(tmp_path):
    """Engine on a throwaway database with the full schema."""
    engine = _sqlite_engine(f"sqlite:///{tmp_path / 'umuturage.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def writer_session_factory(db_engine):
    """Sessions on the same database that take the write lock at BEGIN.

    Concurrent writers queue on the busy timeout rather than failing to
    upgrade a shared lock.
    """
    engine = _sqlite_engine(db_engine.url, begin="BEGIN IMMEDIATE", timeout=30.0)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def client(db_session):
    """Test client whose requests share the test's session."""

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def hierarchy(db_session):
    """A committed sector → cell → village → isibo branch with leaders."""
    tree = create_hierarchy(db_session)
    db_session.commit()
    return tree


def make_auth_headers(user) -> dict:
    token = create_access_token(user.id, UserRole(user.role))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user."""
    return make_auth_headers
