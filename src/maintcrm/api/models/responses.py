"""Pydantic response models for API endpoints."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    customer_id: int
    company_name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ServiceRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    record_id: int
    customer_id: int
    service_date: datetime
    service_type: str | None = None
    service_description: str | None = None
    amount: Decimal | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class ReminderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reminder_id: int
    customer_id: int
    service_record_id: int | None = None
    title: str
    message: str
    reminder_date: datetime
    status: str
    sent_at: datetime | None = None
    outlook_event_id: str | None = None
    outlook_email_sent: bool
    created_by: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class StatisticsResponse(BaseModel):
    """Row counts per entity."""
    customers: int
    serviceRecords: int
    reminders: int


class BackupInfoResponse(BaseModel):
    """One backup archive."""
    name: str
    path: str
    size_bytes: int
    size_mb: float
    includes_database_file: bool
    version: str
    createdAt: str
    customerCount: int
    serviceRecordCount: int
    reminderCount: int


class BackupListResponse(BaseModel):
    backups: list[BackupInfoResponse]
    total: int
    backup_directory: str


class BackupCreateResponse(BaseModel):
    success: bool
    backup: BackupInfoResponse
    message: str


class BackupRestoreResponse(BaseModel):
    success: bool
    restored_from: str
    restored: StatisticsResponse
    pre_restore_backup: BackupInfoResponse | None = None
    message: str
