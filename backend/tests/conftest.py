"""Pytest fixtures for Fenix tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fenix.db.session import Base, get_db
from fenix.main import create_app

# Ensure all models are loaded for create_all
import fenix.models  # noqa: F401


def _memory_engine():
    return create_engine(
        "sqlite+pysqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope="function")
def db():
    """Create an in-memory SQLite DB with all tables for tests."""
    engine = _memory_engine()
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def ledger_app():
    """The real app bound to a fresh in-memory database (one connection shared across threads)."""
    engine = _memory_engine()
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def _get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app = create_app()
    app.dependency_overrides[get_db] = _get_db
    return app


@pytest.fixture(scope="function")
def api(ledger_app):
    return TestClient(ledger_app)
