"""
Pytest configuration and fixtures for the tournament score API.
"""
import os
import pytest

# Settings are read at import time.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("FRONTEND_ORIGIN", "http://localhost:5173")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RANKING_SERVICE_URL", "http://ranking.test/calculate")

from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from tourney.app import app
from tourney.core.database import get_session
from tourney.services.gateway import get_session_uid

from tests.factories import make_tournament, make_user


@pytest.fixture
def engine():
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
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def caller():
    """Identity the session cookie resolves to; ``None`` means signed out."""
    return {"uid": None}


@pytest.fixture
def client(engine, caller):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_session_uid] = lambda: caller["uid"]
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def statements(engine):
    """SQL statements sent to the store while the test runs."""
    seen = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield seen
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture
def organizer(session):
    return make_user(session, "organizer@example.com", "Organizer")


@pytest.fixture
def player(session):
    return make_user(session, "player@example.com", "Player")


@pytest.fixture
def tournament(session, organizer):
    return make_tournament(session, organizer)
