"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from lexilog.config import Settings
from lexilog.core.database import create_tables, make_engine, make_session_factory
from lexilog.core.storage import DatabaseStorage
from lexilog.main import create_app

# In-memory SQLite, one shared connection per engine
TEST_DATABASE_URL = "sqlite://"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": TEST_DATABASE_URL,
        "environment": "test",
        "seed_sample_words": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def storage() -> Generator[DatabaseStorage, None, None]:
    """A gateway over a fresh, empty database."""
    engine = make_engine(TEST_DATABASE_URL)
    create_tables(engine)
    try:
        yield DatabaseStorage(make_session_factory(engine))
    finally:
        engine.dispose()


@pytest.fixture
def app() -> FastAPI:
    return create_app(make_settings())


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client over an empty database."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client() -> Generator[TestClient, None, None]:
    """Test client whose startup ran the sample-word seed."""
    with TestClient(create_app(make_settings(seed_sample_words=True))) as test_client:
        yield test_client
