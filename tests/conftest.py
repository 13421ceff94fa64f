"""
Test configuration and fixtures for the shortlink service.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from shortlink_app.database.connection import Base, get_db
from shortlink_app.repository.factory import RepositoryFactory
from shortlink_app.repository.strategies import (
    InMemoryMappingRepository,
    SQLAlchemyMappingRepository
)

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function", params=["sql", "memory"])
def repository(request, db_session):
    """Each repository test runs against both backends"""
    if request.param == "sql":
        return SQLAlchemyMappingRepository(db_session)
    return InMemoryMappingRepository()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    RepositoryFactory.clear_instance()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    RepositoryFactory.clear_instance()
