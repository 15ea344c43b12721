"""Load fixture data into a store that may already hold rows.

Unlike restore, seeding never trusts fixture identifiers: every row gets a
fresh primary key and child rows are re-pointed through old -> new maps.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from maintcrm.models.domain import SeedSummary
from maintcrm.models.orm import Customer, Reminder, ServiceRecord
from maintcrm.services.backup_errors import StoreTransactionError
from maintcrm.services.snapshot import decode_rows
from maintcrm.services.snapshot_validator import validate_data
from maintcrm.store.database import Database
from maintcrm.store.repositories import (
    CustomerRepository,
    ReminderRepository,
    ServiceRecordRepository,
)

logger = logging.getLogger(__name__)


def load_fixtures(path: Path) -> dict[str, Any]:
    """Read a fixture file in the ``data.json`` shape."""
    with open(path, "r", encoding="utf-8-sig") as f:
        data = json.load(f)
    return data


def _normalize(fixtures: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(fixtures, dict):
        return fixtures
    # Missing arrays are empty.
    return {key: fixtures.get(key, []) for key in ("customers", "serviceRecords", "reminders")}


def seed_database(database: Database, fixtures: dict[str, Any], *, replace: bool = False) -> SeedSummary:
    """
    Insert fixture rows with newly assigned identifiers.

    Args:
        database: Target store
        fixtures: ``{"customers": [...], "serviceRecords": [...], "reminders": [...]}``
        replace: Clear all three tables first

    Returns:
        SeedSummary with inserted and skipped counts and the identifier maps

    Raises:
        MalformedDataError: If the fixture shape or a value is invalid
        StoreTransactionError: If the database rejects a row; nothing is inserted
    """
    fixtures = _normalize(fixtures)
    validate_data(fixtures)
    customers = decode_rows("customers", fixtures["customers"])
    service_records = decode_rows("serviceRecords", fixtures["serviceRecords"])
    reminders = decode_rows("reminders", fixtures["reminders"])

    summary = SeedSummary()
    try:
        with database.transaction() as session:
            if replace:
                ReminderRepository(session).delete_all()
                ServiceRecordRepository(session).delete_all()
                CustomerRepository(session).delete_all()
                logger.info("Existing data cleared before seeding")

            for row in customers:
                old_id = row.pop("customer_id", None)
                customer = Customer(**row)
                session.add(customer)
                session.flush()
                if old_id is not None:
                    summary.customer_id_map[old_id] = customer.customer_id
                summary.inserted.customers += 1

            for row in service_records:
                old_id = row.pop("record_id", None)
                new_customer_id = summary.customer_id_map.get(row.get("customer_id"))
                if new_customer_id is None:
                    logger.warning(
                        f"Skipping service record {old_id}: customer {row.get('customer_id')} not in fixtures"
                    )
                    summary.skipped.service_records += 1
                    continue
                row["customer_id"] = new_customer_id
                record = ServiceRecord(**row)
                session.add(record)
                session.flush()
                if old_id is not None:
                    summary.record_id_map[old_id] = record.record_id
                summary.inserted.service_records += 1

            for row in reminders:
                old_id = row.pop("reminder_id", None)
                new_customer_id = summary.customer_id_map.get(row.get("customer_id"))
                if new_customer_id is None:
                    logger.warning(
                        f"Skipping reminder {old_id}: customer {row.get('customer_id')} not in fixtures"
                    )
                    summary.skipped.reminders += 1
                    continue
                row["customer_id"] = new_customer_id
                old_record_id = row.get("service_record_id")
                if old_record_id is not None:
                    row["service_record_id"] = summary.record_id_map.get(old_record_id)
                    if row["service_record_id"] is None:
                        logger.warning(
                            f"Reminder {old_id}: service record {old_record_id} not in fixtures, unlinking"
                        )
                session.add(Reminder(**row))
                summary.inserted.reminders += 1
    except SQLAlchemyError as e:
        detail = getattr(e, "orig", None) or e
        logger.error(f"Seeding rolled back: {detail}")
        raise StoreTransactionError(
            f"Seeding failed: {detail}",
            user_message="The database rejected the fixture data. No changes were made.",
        ) from e

    logger.info(
        f"Seeded {summary.inserted.customers} customers, {summary.inserted.service_records} service records, "
        f"{summary.inserted.reminders} reminders "
        f"(skipped {summary.skipped.service_records} service records, {summary.skipped.reminders} reminders)"
    )
    return summary
