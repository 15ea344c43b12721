"""Backup/restore, seeding and export services."""
from maintcrm.services.backup import BackupArchiveInfo, BackupManager, RestoreResult
from maintcrm.services.backup_errors import (
    ArchiveCorruptError,
    BackupError,
    BackupIOError,
    MalformedDataError,
    MalformedManifestError,
    MissingDataError,
    MissingManifestError,
    StoreTransactionError,
)
from maintcrm.services.csv_export import NoDataToExportError
from maintcrm.services.seeding import seed_database

__all__ = [
    "BackupArchiveInfo",
    "BackupManager",
    "RestoreResult",
    "ArchiveCorruptError",
    "BackupError",
    "BackupIOError",
    "MalformedDataError",
    "MalformedManifestError",
    "MissingDataError",
    "MissingManifestError",
    "StoreTransactionError",
    "NoDataToExportError",
    "seed_database",
]
