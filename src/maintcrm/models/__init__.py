"""Data models for maintcrm."""
from maintcrm.models.enums import ReminderSource, ReminderStatus, ServiceStatus
from maintcrm.models.orm import Base, Customer, Reminder, ServiceRecord, utcnow
from maintcrm.models.domain import (
    UNSET,
    CustomerCreate,
    CustomerFilters,
    CustomerUpdate,
    EntityCounts,
    ReminderCreate,
    ReminderFilters,
    ReminderUpdate,
    SeedSummary,
    ServiceRecordCreate,
    ServiceRecordFilters,
    ServiceRecordUpdate,
    changed_fields,
)

__all__ = [
    # Enums
    "ReminderSource",
    "ReminderStatus",
    "ServiceStatus",
    # ORM
    "Base",
    "Customer",
    "Reminder",
    "ServiceRecord",
    "utcnow",
    # Option structs
    "UNSET",
    "CustomerCreate",
    "CustomerFilters",
    "CustomerUpdate",
    "EntityCounts",
    "ReminderCreate",
    "ReminderFilters",
    "ReminderUpdate",
    "SeedSummary",
    "ServiceRecordCreate",
    "ServiceRecordFilters",
    "ServiceRecordUpdate",
    "changed_fields",
]
