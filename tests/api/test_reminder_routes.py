"""API tests for reminder routes."""
from __future__ import annotations

import pytest


def test_list_reminders(client):
    response = client.get("/api/reminders")
    assert response.status_code == 200
    assert [r["title"] for r in response.json()] == ["年次点検のご案内", "屋根メンテナンス推奨"]


def test_list_by_status(client):
    response = client.get("/api/reminders", params={"status": "scheduled"})
    assert [r["reminder_id"] for r in response.json()] == [1]


def test_get_reminder(client):
    data = client.get("/api/reminders/1").json()
    assert data["service_record_id"] == 1
    assert data["created_by"] == "system"
    assert data["outlook_email_sent"] is False


def test_get_missing(client):
    assert client.get("/api/reminders/99").status_code == 404


def test_create_reminder(client):
    response = client.post("/api/reminders", json={
        "customer_id": 2,
        "service_record_id": 3,
        "title": "配管点検のご案内",
        "message": "配管洗浄から1年です。",
        "reminder_date": "2025-01-20T00:00:00Z",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "scheduled"
    assert data["created_by"] == "manual"


def test_create_for_missing_record(client):
    response = client.post("/api/reminders", json={
        "customer_id": 2,
        "service_record_id": 99,
        "title": "t",
        "message": "m",
        "reminder_date": "2025-01-20T00:00:00Z",
    })
    assert response.status_code == 404


def test_update_reminder(client):
    response = client.put("/api/reminders/1", json={"title": "屋根点検のご案内"})
    assert response.status_code == 200
    assert response.json()["title"] == "屋根点検のご案内"
    assert response.json()["message"] == "前回の屋根点検から1年が経過します。"


@pytest.mark.parametrize("field", ["title", "message", "reminder_date", "status"])
def test_update_null_required_field_rejected(client, field):
    response = client.put("/api/reminders/1", json={field: None})
    assert response.status_code == 422
    assert client.get("/api/reminders/1").json()["title"] == "屋根メンテナンス推奨"


@pytest.mark.parametrize(
    "action, status",
    [("sent", "sent"), ("cancel", "cancelled"), ("reschedule", "scheduled"), ("drafting", "drafting")],
)
def test_transitions(client, action, status):
    response = client.post(f"/api/reminders/1/{action}")
    assert response.status_code == 200
    assert response.json()["status"] == status


def test_sent_sets_timestamp(client):
    assert client.post("/api/reminders/1/sent").json()["sent_at"] is not None
    assert client.post("/api/reminders/1/reschedule").json()["sent_at"] is None


def test_unknown_action(client):
    assert client.post("/api/reminders/1/snooze").status_code == 404


def test_transition_missing_reminder(client):
    assert client.post("/api/reminders/99/cancel").status_code == 404


def test_delete_reminder(client):
    assert client.delete("/api/reminders/2").status_code == 200
    assert client.get("/api/reminders/2").status_code == 404
