"""Atomic replacement of the store contents with a validated snapshot."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from maintcrm.models.domain import EntityCounts
from maintcrm.services.backup_errors import StoreTransactionError
from maintcrm.services.snapshot import Snapshot, decode_rows
from maintcrm.store.database import Database
from maintcrm.store.repositories import (
    CustomerRepository,
    ReminderRepository,
    ServiceRecordRepository,
)

logger = logging.getLogger(__name__)


class RestoreTransaction:
    """Wipes every entity table and bulk-inserts a snapshot in one transaction.

    Identifiers from the snapshot are inserted verbatim; nothing is remapped.
    """

    def __init__(self, database: Database):
        self.database = database

    def apply(self, snapshot: Snapshot) -> EntityCounts:
        """
        Replace all customers, service records and reminders.

        Rows are decoded before the transaction opens, so a malformed value
        never touches the store.

        Args:
            snapshot: Validated snapshot

        Returns:
            Number of rows inserted per entity

        Raises:
            MalformedDataError: If a row value cannot be decoded
            StoreTransactionError: If the database rejects any statement;
                the store is left exactly as it was
        """
        customers = decode_rows("customers", snapshot.customers)
        service_records = decode_rows("serviceRecords", snapshot.service_records)
        reminders = decode_rows("reminders", snapshot.reminders)

        try:
            with self.database.transaction() as session:
                reminder_repo = ReminderRepository(session)
                record_repo = ServiceRecordRepository(session)
                customer_repo = CustomerRepository(session)

                deleted = EntityCounts(
                    reminders=reminder_repo.delete_all(),
                    service_records=record_repo.delete_all(),
                    customers=customer_repo.delete_all(),
                )
                logger.info(
                    f"Cleared existing data: {deleted.customers} customers, "
                    f"{deleted.service_records} service records, {deleted.reminders} reminders"
                )

                inserted = EntityCounts(
                    customers=customer_repo.create_many(customers),
                    service_records=record_repo.create_many(service_records),
                    reminders=reminder_repo.create_many(reminders),
                )
        except SQLAlchemyError as e:
            detail = getattr(e, "orig", None) or e
            logger.error(f"Restore transaction rolled back: {detail}")
            raise StoreTransactionError(f"Restore transaction failed: {detail}") from e

        logger.info(
            f"Restored {inserted.customers} customers, "
            f"{inserted.service_records} service records, {inserted.reminders} reminders"
        )
        return inserted
