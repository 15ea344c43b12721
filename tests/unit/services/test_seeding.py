"""Tests for fixture seeding."""
from __future__ import annotations

import json
import logging

import pytest

from maintcrm.services.backup_errors import MalformedDataError, StoreTransactionError
from maintcrm.services.seeding import load_fixtures, seed_database
from maintcrm.store import CustomerRepository, ReminderRepository, ServiceRecordRepository


FIXTURES = {
    "customers": [
        {"customerId": 1, "companyName": "鈴木設備"},
        {"customerId": 2, "companyName": "高橋住宅"},
    ],
    "serviceRecords": [
        {"recordId": 10, "customerId": 1, "serviceDate": "2024-04-01T00:00:00.000Z", "serviceType": "空調"},
        {"recordId": 11, "customerId": 2, "serviceDate": "2024-04-02T00:00:00.000Z", "amount": "30000"},
    ],
    "reminders": [
        {
            "reminderId": 100,
            "customerId": 1,
            "serviceRecordId": 10,
            "title": "空調フィルター交換",
            "message": "交換時期です。",
            "reminderDate": "2025-04-01T00:00:00.000Z",
        },
    ],
}


@pytest.mark.unit
class TestSeedDatabase:
    """Tests for seed_database."""

    def test_empty_store(self, database):
        summary = seed_database(database, FIXTURES)

        assert summary.inserted.to_dict() == {"customers": 2, "serviceRecords": 2, "reminders": 1}
        assert summary.skipped.to_dict() == {"customers": 0, "serviceRecords": 0, "reminders": 0}
        assert database.counts().to_dict() == summary.inserted.to_dict()

    def test_ids_remapped_when_store_not_empty(self, populated_database):
        summary = seed_database(populated_database, FIXTURES)

        # 3 customers and 5 records already exist
        assert summary.customer_id_map == {1: 4, 2: 5}
        assert summary.record_id_map == {10: 6, 11: 7}

        with populated_database.session() as session:
            assert CustomerRepository(session).require(1).company_name == "田中建設"
            assert CustomerRepository(session).require(4).company_name == "鈴木設備"
            record = ServiceRecordRepository(session).require(6)
            assert record.customer_id == 4
            [reminder] = [r for r in ReminderRepository(session).find_all() if r.title == "空調フィルター交換"]
            assert reminder.customer_id == 4
            assert reminder.service_record_id == 6

    def test_replace_clears_existing_rows(self, populated_database):
        seed_database(populated_database, FIXTURES, replace=True)

        assert populated_database.counts().to_dict() == {"customers": 2, "serviceRecords": 2, "reminders": 1}
        with populated_database.session() as session:
            names = sorted(c.company_name for c in CustomerRepository(session).find_all())
        assert names == ["鈴木設備", "高橋住宅"]

    def test_rows_with_unknown_customer_skipped(self, database, caplog):
        fixtures = {
            "customers": [{"customerId": 1, "companyName": "鈴木設備"}],
            "serviceRecords": [{"recordId": 10, "customerId": 9, "serviceDate": "2024-04-01T00:00:00Z"}],
            "reminders": [{
                "reminderId": 100, "customerId": 9, "title": "t", "message": "m",
                "reminderDate": "2025-04-01T00:00:00Z",
            }],
        }

        with caplog.at_level(logging.WARNING, logger="maintcrm.services.seeding"):
            summary = seed_database(database, fixtures)

        assert summary.inserted.customers == 1
        assert summary.skipped.service_records == 1
        assert summary.skipped.reminders == 1
        assert "customer 9" in caplog.text

    def test_reminder_with_unknown_record_unlinked(self, database):
        fixtures = {
            "customers": [{"customerId": 1, "companyName": "鈴木設備"}],
            "reminders": [{
                "reminderId": 100, "customerId": 1, "serviceRecordId": 55,
                "title": "t", "message": "m", "reminderDate": "2025-04-01T00:00:00Z",
            }],
        }

        summary = seed_database(database, fixtures)

        assert summary.inserted.reminders == 1
        with database.session() as session:
            [reminder] = ReminderRepository(session).find_all()
            assert reminder.service_record_id is None
            assert reminder.status == "scheduled"

    def test_missing_arrays_treated_as_empty(self, database):
        summary = seed_database(database, {"customers": [{"companyName": "単独"}]})
        assert summary.inserted.customers == 1
        assert summary.customer_id_map == {}

    def test_malformed_fixture_inserts_nothing(self, database):
        fixtures = {"customers": [{"companyName": "A"}, {"companyName": 12}]}
        with pytest.raises(MalformedDataError):
            seed_database(database, fixtures)
        assert database.counts().customers == 0

    def test_database_rejection_inserts_nothing(self, populated_database, caplog):
        fixtures = {"customers": [
            {"customerId": 1, "companyName": "鈴木設備"},
            {"customerId": 2, "phone": "03-0000-0000"},
        ]}

        with caplog.at_level(logging.ERROR, logger="maintcrm.services.seeding"):
            with pytest.raises(StoreTransactionError) as exc_info:
                seed_database(populated_database, fixtures)

        assert not exc_info.value.is_client_error
        assert "Seeding rolled back" in caplog.text
        assert populated_database.counts().to_dict() == {"customers": 3, "serviceRecords": 5, "reminders": 2}

    def test_database_rejection_keeps_rows_when_replacing(self, populated_database):
        with pytest.raises(StoreTransactionError):
            seed_database(populated_database, {"customers": [{"contactPerson": "名無し"}]}, replace=True)

        assert populated_database.counts().to_dict() == {"customers": 3, "serviceRecords": 5, "reminders": 2}

    def test_load_fixtures(self, tmp_path):
        path = tmp_path / "fixtures.json"
        path.write_text(json.dumps(FIXTURES, ensure_ascii=False), encoding="utf-8-sig")
        assert load_fixtures(path) == FIXTURES
