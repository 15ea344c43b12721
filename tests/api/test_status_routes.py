"""API tests for status and statistics routes."""
from __future__ import annotations

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from maintcrm import __version__


def test_status(client, populated_database):
    response = client.get("/api/status")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert data["database"] == str(populated_database.path)
    assert "server_started_at" in data


def test_statistics(client):
    response = client.get("/api/statistics")
    assert response.status_code == 200
    assert response.json() == {"customers": 3, "serviceRecords": 5, "reminders": 2}


def test_statistics_empty(empty_client):
    assert empty_client.get("/api/statistics").json() == {"customers": 0, "serviceRecords": 0, "reminders": 0}


def test_statistics_store_error(client, populated_database):
    error = OperationalError("SELECT", {}, Exception("disk I/O error"))
    with patch.object(populated_database, "counts", side_effect=error):
        response = client.get("/api/statistics")
    assert response.status_code == 500


def test_lifespan_keeps_injected_database(app, populated_database):
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        assert client.get("/api/status").status_code == 200
    # Injected stores are owned by the caller and stay usable.
    assert populated_database.counts().customers == 3
