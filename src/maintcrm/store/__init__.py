"""Persistence layer: SQLAlchemy engine ownership and per-entity repositories."""
from maintcrm.store.database import Database
from maintcrm.store.repositories import (
    CustomerRepository,
    RecordNotFoundError,
    ReminderRepository,
    ServiceRecordRepository,
)

__all__ = [
    "Database",
    "CustomerRepository",
    "RecordNotFoundError",
    "ReminderRepository",
    "ServiceRecordRepository",
]
