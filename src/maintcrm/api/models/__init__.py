"""Pydantic models for API requests and responses."""
from maintcrm.api.models.requests import (
    CustomerCreateRequest,
    CustomerUpdateRequest,
    ServiceRecordCreateRequest,
    ServiceRecordUpdateRequest,
    ReminderCreateRequest,
    ReminderUpdateRequest,
    BackupCreateRequest,
    BackupRestoreRequest,
)
from maintcrm.api.models.responses import (
    CustomerResponse,
    ServiceRecordResponse,
    ReminderResponse,
    StatisticsResponse,
    BackupInfoResponse,
    BackupListResponse,
    BackupCreateResponse,
    BackupRestoreResponse,
)

__all__ = [
    # Requests
    "CustomerCreateRequest",
    "CustomerUpdateRequest",
    "ServiceRecordCreateRequest",
    "ServiceRecordUpdateRequest",
    "ReminderCreateRequest",
    "ReminderUpdateRequest",
    "BackupCreateRequest",
    "BackupRestoreRequest",
    # Responses
    "CustomerResponse",
    "ServiceRecordResponse",
    "ReminderResponse",
    "StatisticsResponse",
    "BackupInfoResponse",
    "BackupListResponse",
    "BackupCreateResponse",
    "BackupRestoreResponse",
]
