"""Structural validation of an unpacked backup before any of it is trusted."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from maintcrm.config.constants import BACKUP_DATA_FILE, BACKUP_MANIFEST_FILE
from maintcrm.services.backup_errors import (
    MalformedDataError,
    MalformedManifestError,
    MissingDataError,
    MissingManifestError,
)
from maintcrm.services.snapshot import BackupManifest, Snapshot

logger = logging.getLogger(__name__)

SUPPORTED_MAJOR_VERSION = 1

# Manifest count key -> snapshot array key.
COUNT_FIELDS = {
    "customerCount": "customers",
    "serviceRecordCount": "serviceRecords",
    "reminderCount": "reminders",
}


def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8-sig") as f:
        return json.load(f)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_manifest(manifest: Any) -> None:
    """
    Check the parsed ``backup-info.json`` document.

    Raises:
        MalformedManifestError: On a non-object root, a missing or unsupported
            version, or counts that are not non-negative integers
    """
    if not isinstance(manifest, dict):
        raise MalformedManifestError("backup-info.json root must be an object")

    version = manifest.get("version")
    if not isinstance(version, str) or not version.strip():
        raise MalformedManifestError("backup-info.json is missing a version")
    major = version.strip().split(".")[0]
    if not major.isdigit() or int(major) != SUPPORTED_MAJOR_VERSION:
        raise MalformedManifestError(
            f"Unsupported backup format version: {version}",
            user_message=f"This backup was written by an unsupported version ({version}).",
        )

    if not _is_count(manifest.get("customerCount")):
        raise MalformedManifestError("backup-info.json customerCount must be a non-negative integer")
    for key in ("serviceRecordCount", "reminderCount"):
        if key in manifest and not _is_count(manifest[key]):
            raise MalformedManifestError(f"backup-info.json {key} must be a non-negative integer")


def validate_data(data: Any) -> None:
    """
    Check the parsed ``data.json`` document.

    Raises:
        MalformedDataError: If an entity array is missing, not an array, or
            holds anything but objects
    """
    if not isinstance(data, dict):
        raise MalformedDataError("data.json root must be an object")
    for key in COUNT_FIELDS.values():
        if key not in data:
            raise MalformedDataError(f"data.json is missing '{key}'")
        rows = data[key]
        if not isinstance(rows, list):
            raise MalformedDataError(f"data.json '{key}' must be an array")
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise MalformedDataError(f"data.json {key}[{index}] must be an object")


def check_counts(manifest: dict[str, Any], data: dict[str, Any]) -> None:
    """Raise MalformedManifestError when a manifest count disagrees with its array."""
    for count_key, array_key in COUNT_FIELDS.items():
        if count_key not in manifest:
            continue
        expected = manifest[count_key]
        actual = len(data[array_key])
        if expected != actual:
            raise MalformedManifestError(
                f"backup-info.json {count_key}={expected} but data.json has {actual} {array_key}",
                user_message="The backup is incomplete: record counts do not match its backup information.",
            )


def validate_snapshot_dir(directory: Path, *, strict_counts: bool = True) -> tuple[BackupManifest, Snapshot]:
    """
    Validate an unpacked backup directory and load its contents.

    Checks run in order: manifest presence, manifest fields, data presence,
    data shape, then (when ``strict_counts``) manifest counts against the
    array lengths.

    Args:
        directory: Directory the archive was extracted into
        strict_counts: Reject archives whose manifest counts disagree with the data

    Returns:
        The parsed manifest and the snapshot rows

    Raises:
        MissingManifestError: backup-info.json absent or not JSON
        MalformedManifestError: Manifest fields invalid or counts mismatched
        MissingDataError: data.json absent or not JSON
        MalformedDataError: data.json arrays missing or mistyped
    """
    directory = Path(directory)

    manifest_path = directory / BACKUP_MANIFEST_FILE
    if not manifest_path.is_file():
        raise MissingManifestError(f"{BACKUP_MANIFEST_FILE} not found in {directory}")
    try:
        manifest = _load_json(manifest_path)
    except (ValueError, UnicodeDecodeError) as e:
        raise MissingManifestError(f"{BACKUP_MANIFEST_FILE} is not valid JSON: {e}") from e
    validate_manifest(manifest)

    data_path = directory / BACKUP_DATA_FILE
    if not data_path.is_file():
        raise MissingDataError(f"{BACKUP_DATA_FILE} not found in {directory}")
    try:
        data = _load_json(data_path)
    except (ValueError, UnicodeDecodeError) as e:
        raise MissingDataError(f"{BACKUP_DATA_FILE} is not valid JSON: {e}") from e
    validate_data(data)

    if strict_counts:
        check_counts(manifest, data)

    logger.debug(f"Snapshot validated: {directory}")
    parsed = BackupManifest.from_dict(manifest)
    return parsed, Snapshot.from_data(data, created_at=parsed.created_at)
