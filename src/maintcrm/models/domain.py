"""Domain option structs - explicit filter and payload shapes per operation.

Every field left as ``None`` (or ``UNSET`` for updates) means "not given".
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from typing import Any


class _Unset:
    """Sentinel distinguishing "leave unchanged" from an explicit ``None``."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def changed_fields(update: Any) -> dict[str, Any]:
    """Return the fields of an update struct that were explicitly set."""
    return {
        f.name: getattr(update, f.name)
        for f in fields(update)
        if getattr(update, f.name) is not UNSET
    }


def _reject_nulls(update: Any, *names: str) -> None:
    for name in names:
        if getattr(update, name) is None:
            raise ValueError(f"{name} cannot be null")


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

@dataclass
class CustomerFilters:
    """Case-insensitive substring filters for customer listings."""
    company_name: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None


@dataclass
class CustomerCreate:
    company_name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.company_name or not self.company_name.strip():
            raise ValueError("company_name is required")


@dataclass
class CustomerUpdate:
    company_name: Any = UNSET
    contact_person: Any = UNSET
    phone: Any = UNSET
    email: Any = UNSET
    address: Any = UNSET
    notes: Any = UNSET

    def __post_init__(self) -> None:
        if self.company_name is not UNSET and (not self.company_name or not str(self.company_name).strip()):
            raise ValueError("company_name cannot be empty")


# ---------------------------------------------------------------------------
# Service records
# ---------------------------------------------------------------------------

@dataclass
class ServiceRecordFilters:
    customer_id: int | None = None
    service_type: str | None = None
    status: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass
class ServiceRecordCreate:
    customer_id: int
    service_date: datetime
    service_type: str | None = None
    service_description: str | None = None
    amount: Decimal | None = None
    status: str = "completed"


@dataclass
class ServiceRecordUpdate:
    service_date: Any = UNSET
    service_type: Any = UNSET
    service_description: Any = UNSET
    amount: Any = UNSET
    status: Any = UNSET

    def __post_init__(self) -> None:
        _reject_nulls(self, "service_date", "status")


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------

@dataclass
class ReminderFilters:
    customer_id: int | None = None
    status: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass
class ReminderCreate:
    customer_id: int
    title: str
    message: str
    reminder_date: datetime
    service_record_id: int | None = None
    created_by: str = "manual"
    notes: str | None = None


@dataclass
class ReminderUpdate:
    title: Any = UNSET
    message: Any = UNSET
    reminder_date: Any = UNSET
    status: Any = UNSET
    sent_at: Any = UNSET
    notes: Any = UNSET

    def __post_init__(self) -> None:
        _reject_nulls(self, "title", "message", "reminder_date", "status")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class EntityCounts:
    """Row counts per entity table."""
    customers: int = 0
    service_records: int = 0
    reminders: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "customers": self.customers,
            "serviceRecords": self.service_records,
            "reminders": self.reminders,
        }


@dataclass
class SeedSummary:
    inserted: EntityCounts = field(default_factory=EntityCounts)
    skipped: EntityCounts = field(default_factory=EntityCounts)
    customer_id_map: dict[int, int] = field(default_factory=dict)
    record_id_map: dict[int, int] = field(default_factory=dict)
