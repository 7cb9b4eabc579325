"""Shared test fixtures for the content CMS test suite.

Tests run against a throwaway SQLite database created in a temporary
directory. Tables are created once at import and emptied before each test.
"""

import os
import tempfile

# Point the app at the test database before any app imports.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="coffee_cms_test_")
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}",
)
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi.testclient import TestClient

from coffee_cms.database import Base, engine, get_db, SessionLocal
from coffee_cms.main import app
from coffee_cms.models import ContentEntry

Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty all data tables before each test for isolation.

    Runs before the test (not after) so test failures leave data
    available for debugging.
    """
    db = SessionLocal()
    try:
        db.query(ContentEntry).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


LONG_META_DESCRIPTION = (
    "Freshly roasted single origin beans from the highlands of Ethiopia deliver "
    "bright floral aromatics with notes of jasmine bergamot and ripe stone fruit "
    "that linger long after the last sip of your morning cup"
)


def make_entry(
    title: str = "Dialing In Espresso",
    meta_description: str = "Grind size, dose, and yield explained for home baristas.",
    **overrides,
) -> dict:
    """Factory for content entry field maps."""
    data = {
        "title": title,
        "slug": title.lower().replace(" ", "-"),
        "content": "# Dialing In\n\nStart with an 18g dose.",
        "meta_title": title,
        "meta_description": meta_description,
    }
    data.update(overrides)
    return data
