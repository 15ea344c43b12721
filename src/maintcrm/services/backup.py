"""
Backup and restore of the CRM store.

A backup is a ZIP archive holding ``data.json`` (every customer, service
record and reminder), ``backup-info.json`` (format version, timestamp and
per-entity counts) and, when available, a raw copy of the SQLite file.
Restoring replaces the whole store inside one transaction; it never merges.
"""
from __future__ import annotations

import json
import logging
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from maintcrm.config.constants import (
    BACKUP_DATABASE_FILE,
    BACKUP_FILENAME_PREFIX,
    BACKUP_MANIFEST_FILE,
    BACKUP_TIMESTAMP_FORMAT,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_INCLUDE_DATABASE_FILE,
    DEFAULT_STRICT_MANIFEST_COUNTS,
    SAFETY_BACKUP_FILENAME_PREFIX,
    TEMP_BACKUP_PREFIX,
    TEMP_RESTORE_PREFIX,
)
from maintcrm.config.path_resolver import PathResolver
from maintcrm.models.domain import EntityCounts
from maintcrm.services.archive_codec import UNREADABLE_ZIP_ERRORS, pack_directory, unpack_archive
from maintcrm.services.backup_errors import (
    ArchiveCorruptError,
    BackupError,
    BackupIOError,
    MissingManifestError,
    StoreTransactionError,
)
from maintcrm.services.restore import RestoreTransaction
from maintcrm.services.snapshot import BackupManifest, SnapshotSerializer
from maintcrm.services.snapshot_validator import validate_manifest, validate_snapshot_dir
from maintcrm.store.database import Database

logger = logging.getLogger(__name__)


def backup_filename(prefix: str = BACKUP_FILENAME_PREFIX, when: datetime | None = None) -> str:
    """``<prefix>_<YYYY-MM-DD_HH-MM-SS>.zip`` for the given (or current local) time."""
    when = when or datetime.now()
    return f"{prefix}_{when.strftime(BACKUP_TIMESTAMP_FORMAT)}.zip"


@dataclass
class BackupArchiveInfo:
    """A backup archive on disk and what its manifest says about it."""

    path: Path
    manifest: BackupManifest
    size_bytes: int
    includes_database_file: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.path.name,
            "path": str(self.path),
            "size_bytes": self.size_bytes,
            "size_mb": round(self.size_bytes / (1024 * 1024), 2),
            "includes_database_file": self.includes_database_file,
            **self.manifest.to_dict(),
        }


@dataclass
class RestoreResult:
    manifest: BackupManifest
    restored: EntityCounts
    safety_backup: BackupArchiveInfo | None = None


class BackupManager:
    """Creates, restores, lists and deletes CRM backup archives."""

    def __init__(
        self,
        database: Database,
        *,
        backup_dir: Path | None = None,
        temp_root: Path | None = None,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        include_database_file: bool = DEFAULT_INCLUDE_DATABASE_FILE,
        strict_manifest_counts: bool = DEFAULT_STRICT_MANIFEST_COUNTS,
    ):
        """
        Initialize backup manager.

        Args:
            database: Store to back up and restore into
            backup_dir: Default directory for new archives and listings
            temp_root: Parent of working directories; system temp dir when None
            compression_level: Deflate level for new archives
            include_database_file: Add a raw copy of the SQLite file to new archives
            strict_manifest_counts: Reject archives whose manifest counts disagree with their data
        """
        self.database = database
        self.backup_dir = Path(backup_dir) if backup_dir is not None else None
        self.temp_root = Path(temp_root) if temp_root is not None else None
        self.compression_level = compression_level
        self.include_database_file = include_database_file
        self.strict_manifest_counts = strict_manifest_counts
        self.serializer = SnapshotSerializer(database)

        if self.backup_dir is not None:
            self.backup_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_config(cls, database: Database, config) -> "BackupManager":
        return cls(
            database,
            backup_dir=PathResolver.get_backup_dir(config),
            temp_root=PathResolver.get_temp_dir(config),
            compression_level=config.backup.compression_level,
            include_database_file=config.backup.include_database_file,
            strict_manifest_counts=config.backup.strict_manifest_counts,
        )

    @staticmethod
    def default_backup_filename(when: datetime | None = None) -> str:
        return backup_filename(BACKUP_FILENAME_PREFIX, when)

    def _require_backup_dir(self, directory: Path | None) -> Path:
        if directory is not None:
            return Path(directory)
        if self.backup_dir is None:
            raise ValueError("No backup directory configured")
        return self.backup_dir

    def _make_temp_dir(self, prefix: str) -> Path:
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        try:
            if self.temp_root is not None:
                self.temp_root.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix=f"{prefix}{stamp}-", dir=self.temp_root))
        except OSError as e:
            raise BackupIOError(f"Failed to create working directory: {e}") from e

    def _remove_temp_dir(self, path: Path) -> None:
        if not path.exists():
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.warning(f"Failed to remove working directory {path}: {e}")

    def _copy_database_file(self, dest_dir: Path) -> bool:
        db_path = self.database.path
        if not self.include_database_file or db_path is None or not db_path.is_file():
            return False
        try:
            shutil.copy2(db_path, dest_dir / BACKUP_DATABASE_FILE)
        except OSError as e:
            raise BackupIOError(f"Failed to copy database file {db_path}: {e}") from e
        return True

    def create_backup(self, output_path: Path | None = None) -> BackupArchiveInfo:
        """
        Create a backup archive of the whole store.

        Args:
            output_path: Archive destination. Defaults to a timestamped file
                in the backup directory.

        Returns:
            BackupArchiveInfo describing the new archive

        Raises:
            StoreTransactionError: If reading the store fails
            BackupIOError: If writing any file fails
        """
        if output_path is None:
            output_path = self._require_backup_dir(None) / self.default_backup_filename()
        output_path = Path(output_path)

        logger.info(f"Creating backup: {output_path}")
        temp_dir = self._make_temp_dir(TEMP_BACKUP_PREFIX)
        try:
            manifest = self.serializer.write(temp_dir)
            has_db_file = self._copy_database_file(temp_dir)
            pack_directory(temp_dir, output_path, compression_level=self.compression_level)
        except BackupError:
            logger.error(f"Backup creation failed: {output_path}", exc_info=True)
            raise
        except SQLAlchemyError as e:
            logger.error(f"Backup creation failed reading the store: {output_path}", exc_info=True)
            raise StoreTransactionError(
                f"Failed to read the store: {e}",
                user_message="The database could not be read. No backup was written.",
            ) from e
        finally:
            self._remove_temp_dir(temp_dir)

        info = BackupArchiveInfo(
            path=output_path,
            manifest=manifest,
            size_bytes=output_path.stat().st_size,
            includes_database_file=has_db_file,
        )
        logger.info(
            f"Backup created: {output_path.name} "
            f"({manifest.customer_count} customers, {manifest.service_record_count} service records, "
            f"{manifest.reminder_count} reminders, {info.to_dict()['size_mb']} MB)"
        )
        return info

    def create_safety_backup(self, directory: Path | None = None) -> BackupArchiveInfo:
        """Write a ``pre_restore_<timestamp>.zip`` archive of the current store."""
        directory = self._require_backup_dir(directory)
        output_path = directory / backup_filename(SAFETY_BACKUP_FILENAME_PREFIX)
        base = output_path.stem
        suffix = 1
        while output_path.exists():
            output_path = directory / f"{base}_{suffix}.zip"
            suffix += 1
        logger.info("Creating pre-restore backup...")
        return self.create_backup(output_path)

    def restore_backup(self, backup_file_path: Path) -> RestoreResult:
        """
        Replace the store contents with those of a backup archive.

        Does not create a safety backup; callers do that first (see
        ``create_safety_backup``).

        Args:
            backup_file_path: Archive to restore

        Returns:
            RestoreResult with the archive manifest and inserted row counts

        Raises:
            ArchiveCorruptError: The file is missing or not a valid ZIP
            MissingManifestError, MalformedManifestError,
            MissingDataError, MalformedDataError: Archive contents are invalid
            StoreTransactionError: The database rejected the data; nothing changed
            BackupIOError: Extraction failed
        """
        backup_file_path = Path(backup_file_path)
        logger.info(f"Restoring from backup: {backup_file_path}")

        temp_dir = self._make_temp_dir(TEMP_RESTORE_PREFIX)
        try:
            unpack_archive(backup_file_path, temp_dir)
            manifest, snapshot = validate_snapshot_dir(
                temp_dir,
                strict_counts=self.strict_manifest_counts,
            )
            restored = RestoreTransaction(self.database).apply(snapshot)
        except BackupError:
            logger.error(f"Restore failed: {backup_file_path}", exc_info=True)
            raise
        finally:
            self._remove_temp_dir(temp_dir)

        logger.info(f"Restore complete from: {backup_file_path.name}")
        return RestoreResult(manifest=manifest, restored=restored)

    def read_manifest(self, archive_path: Path) -> BackupManifest:
        """
        Read and check ``backup-info.json`` straight from an archive.

        Raises:
            ArchiveCorruptError: If the file is missing or not a ZIP
            MissingManifestError: If the archive has no readable manifest
            MalformedManifestError: If the manifest fields are invalid
        """
        archive_path = Path(archive_path)
        if not archive_path.is_file():
            raise ArchiveCorruptError(f"Backup archive not found: {archive_path}")
        try:
            with zipfile.ZipFile(archive_path, "r") as zf:
                raw = zf.read(BACKUP_MANIFEST_FILE)
        except KeyError as e:
            raise MissingManifestError(f"{BACKUP_MANIFEST_FILE} not found in {archive_path}") from e
        except UNREADABLE_ZIP_ERRORS as e:
            raise ArchiveCorruptError(f"Not a valid ZIP archive: {archive_path}: {e}") from e

        try:
            data = json.loads(raw.decode("utf-8-sig"))
        except (ValueError, UnicodeDecodeError) as e:
            raise MissingManifestError(f"{BACKUP_MANIFEST_FILE} is not valid JSON: {e}") from e
        validate_manifest(data)
        return BackupManifest.from_dict(data)

    def _archive_has_database_file(self, archive_path: Path) -> bool:
        with zipfile.ZipFile(archive_path, "r") as zf:
            return BACKUP_DATABASE_FILE in zf.namelist()

    def list_backups(self, directory: Path | None = None) -> list[BackupArchiveInfo]:
        """
        List the backup archives in a directory.

        Archives whose manifest cannot be read are skipped with a warning.

        Returns:
            BackupArchiveInfo objects, newest first
        """
        directory = self._require_backup_dir(directory)
        if not directory.exists():
            return []

        backups: list[BackupArchiveInfo] = []
        for archive_path in directory.glob("*.zip"):
            if not archive_path.is_file():
                continue
            try:
                manifest = self.read_manifest(archive_path)
                has_db_file = self._archive_has_database_file(archive_path)
            except (BackupError, zipfile.BadZipFile, OSError) as e:
                logger.warning(f"Skipping unreadable backup {archive_path.name}: {e}")
                continue
            backups.append(
                BackupArchiveInfo(
                    path=archive_path,
                    manifest=manifest,
                    size_bytes=archive_path.stat().st_size,
                    includes_database_file=has_db_file,
                )
            )

        backups.sort(key=lambda b: (b.manifest.created_at, b.path.name), reverse=True)
        return backups

    def delete_backup(self, backup_path: Path) -> None:
        """
        Delete a backup archive.

        Raises:
            FileNotFoundError: If the archive doesn't exist
        """
        backup_path = Path(backup_path)
        if not backup_path.is_file():
            raise FileNotFoundError(f"Backup not found: {backup_path}")

        logger.info(f"Deleting backup: {backup_path}")
        backup_path.unlink()
        logger.info(f"Backup deleted: {backup_path.name}")
