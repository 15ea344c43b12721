"""Fixtures for API route tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from maintcrm.api.app import create_app
from maintcrm.config import Config


@pytest.fixture
def app(populated_database, backup_manager):
    return create_app(
        database=populated_database,
        config=Config.load(),
        backup_manager=backup_manager,
    )


@pytest.fixture
def client(app):
    """FastAPI test client around the populated store."""
    return TestClient(app)


@pytest.fixture
def empty_client(database, backup_manager):
    """FastAPI test client around an empty store."""
    return TestClient(create_app(database=database, config=Config.load(), backup_manager=backup_manager))
