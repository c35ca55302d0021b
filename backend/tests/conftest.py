"""Pytest configuration and fixtures."""

import os

# Must be set before userbase is imported: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from userbase.core.database import Database
from userbase.main import app
from userbase.services.user_service import user_service

SAMPLE_USERS = [
    ("John Doe", "john@x.com", "password123"),
    ("Jane Smith", "jane@x.com", "secret456"),
    ("Bob Johnson", "bob@x.com", "qwerty789"),
]


@pytest.fixture(scope="function")
def database():
    """A fresh in-memory database per test."""
    database = Database("sqlite://").open()
    database.create_all()
    yield database
    database.close()


@pytest.fixture(scope="function")
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture(scope="function")
def sample_users(db):
    """John Doe, Jane Smith and Bob Johnson, created through the service."""
    return [user_service.create_user(db, name, email, password) for name, email, password in SAMPLE_USERS]


@pytest.fixture(scope="function")
def client():
    """Test client; entering it runs the app lifespan against a new in-memory database."""
    with TestClient(app) as test_client:
        yield test_client
