"""Pydantic request models for API endpoints."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Stored datetimes are naive UTC.
UtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]


class CustomerCreateRequest(BaseModel):
    """New customer."""
    company_name: str = Field(min_length=1)
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None


class CustomerUpdateRequest(BaseModel):
    """Partial customer update; omitted fields stay unchanged."""
    company_name: str | None = Field(default=None, min_length=1)
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None


class ServiceRecordCreateRequest(BaseModel):
    customer_id: int
    service_date: UtcDatetime
    service_type: str | None = None
    service_description: str | None = None
    amount: Decimal | None = Field(default=None, max_digits=14, decimal_places=2)
    status: str = "completed"


class ServiceRecordUpdateRequest(BaseModel):
    service_date: UtcDatetime | None = None
    service_type: str | None = None
    service_description: str | None = None
    amount: Decimal | None = Field(default=None, max_digits=14, decimal_places=2)
    status: str | None = None


class ReminderCreateRequest(BaseModel):
    customer_id: int
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    reminder_date: UtcDatetime
    service_record_id: int | None = None
    created_by: str = "manual"
    notes: str | None = None


class ReminderUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    message: str | None = Field(default=None, min_length=1)
    reminder_date: UtcDatetime | None = None
    status: str | None = None
    notes: str | None = None


class BackupCreateRequest(BaseModel):
    """Backup creation request. Without ``output_path`` the archive goes to the backup directory."""
    output_path: str | None = None


class BackupRestoreRequest(BaseModel):
    """Backup restore request."""
    backup_path: str
    create_safety_backup: bool | None = None
