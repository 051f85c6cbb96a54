"""
- Spins up a temp in-memory SQLite DB and creates tables before tests run
- Provide a db_session fixture and override FastAPI's get_db so routes use the test session
- Give every test a fresh in-memory session store
- Provide a client fixture (TestClient(app)) with both overrides applied
"""
import os
from typing import Generator

import pytest

# Must be set before mastermind.db is imported: it reads DATABASE_URL at import time.
# APP_ENV=test skips the dev-only startup hook that creates tables.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RANDOM_ORG_ENABLED", "false")

from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from mastermind import models  # noqa: F401  (registers tables)
from mastermind.db import Base, create_all, get_db, make_engine
from mastermind.main import app, get_sessions
from mastermind.store import GameStore

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"


@pytest.fixture(scope="session")
def engine():
    # In-memory SQLite on a StaticPool: TestClient threads and the test share ONE database.
    engine = make_engine(TEST_DATABASE_URL)
    create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(engine) -> Generator:
    """Provide a clean session per test with rollback."""
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    try:
        yield db
        db.rollback()
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _clean_db(engine):
    """The repository commits inside requests, so wipe rows before each test."""
    with engine.begin() as conn:
        conn.execute(text("DELETE FROM game_records"))
        conn.execute(text("DELETE FROM players"))
    yield


@pytest.fixture
def sessions() -> GameStore:
    return GameStore()


@pytest.fixture(autouse=True)
def override_dep(db_session, sessions):
    """Force the app to use our test DB session and a fresh session store."""
    def _get_db_for_tests():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_for_tests
    app.dependency_overrides[get_sessions] = lambda: sessions
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)
