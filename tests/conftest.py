"""
Test configuration and fixtures for the go links service.
This centralizes all test setup, making individual tests clean.
"""

import os

# Point the app at the test database before anything imports the engine
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from main import app
from golinks_app.database.connection import Base, SessionLocal, engine, get_db, init_db
from golinks_app.services.link_service import LinkService
from golinks_app.services.link_store import LinkStore


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables and the default "go" domain
    init_db(engine)
    db = SessionLocal()
    LinkStore(db).ensure_default_domain()
    db.commit()

    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def service(db_session):
    """LinkService bound to the test session"""
    return LinkService(db_session)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    # Override the database dependency
    app.dependency_overrides[get_db] = override_get_db

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
