"""API tests for service record routes."""
from __future__ import annotations

from decimal import Decimal


def test_list_service_records(client):
    response = client.get("/api/service-records")
    assert response.status_code == 200
    types = [r["service_type"] for r in response.json()]
    assert types == ["定期点検", "屋根", "電気設備", "給排水", "外壁塗装"]


def test_list_filtered_by_customer_and_dates(client):
    response = client.get(
        "/api/service-records",
        params={"customer_id": 1, "start_date": "2024-01-01T00:00:00", "end_date": "2024-12-31T00:00:00"},
    )
    assert [r["service_type"] for r in response.json()] == ["屋根"]


def test_get_service_record(client):
    data = client.get("/api/service-records/3").json()
    assert data["service_type"] == "給排水"
    assert Decimal(str(data["amount"])) == Decimal("80000.50")


def test_create_service_record(client):
    response = client.post("/api/service-records", json={
        "customer_id": 2,
        "service_date": "2024-06-01T09:00:00+09:00",
        "service_type": "防水",
        "amount": "98000",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "completed"
    assert data["service_date"].startswith("2024-06-01T00:00:00")
    assert Decimal(str(data["amount"])) == Decimal("98000")


def test_create_for_missing_customer(client):
    response = client.post("/api/service-records", json={"customer_id": 99, "service_date": "2024-06-01T00:00:00"})
    assert response.status_code == 404


def test_create_rejects_too_many_decimals(client):
    response = client.post("/api/service-records", json={
        "customer_id": 1, "service_date": "2024-06-01T00:00:00", "amount": "1.234",
    })
    assert response.status_code == 422


def test_update_service_record(client):
    response = client.put("/api/service-records/4", json={"status": "completed", "amount": "45000"})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["service_type"] == "定期点検"


def test_update_missing(client):
    assert client.put("/api/service-records/99", json={"status": "x"}).status_code == 404


def test_update_null_service_date_rejected(client):
    response = client.put("/api/service-records/1", json={"service_date": None})
    assert response.status_code == 422
    assert client.get("/api/service-records/1").json()["service_date"].startswith("2024-03-15")


def test_delete_keeps_reminders(client):
    assert client.delete("/api/service-records/1").status_code == 200
    reminder = client.get("/api/reminders/1").json()
    assert reminder["service_record_id"] is None
    assert client.get("/api/statistics").json()["reminders"] == 2


def test_delete_missing(client):
    assert client.delete("/api/service-records/99").status_code == 404
