"""
Snapshot serialization: every persisted entity as canonical JSON plus a manifest.

Row shape follows the archive format shared with earlier releases of the
application: camelCase keys, ISO-8601 UTC datetimes with a ``Z`` suffix and
decimals as strings.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, Numeric

from maintcrm.config.constants import (
    BACKUP_DATA_FILE,
    BACKUP_FORMAT_VERSION,
    BACKUP_MANIFEST_FILE,
)
from maintcrm.models.orm import Base, Customer, Reminder, ServiceRecord, utcnow
from maintcrm.services.backup_errors import BackupIOError, MalformedDataError
from maintcrm.store.database import Database
from maintcrm.store.repositories import (
    CustomerRepository,
    ReminderRepository,
    ServiceRecordRepository,
)

logger = logging.getLogger(__name__)

# Snapshot array key -> ORM model, in parent-before-child order.
ENTITY_MODELS: dict[str, type[Base]] = {
    "customers": Customer,
    "serviceRecords": ServiceRecord,
    "reminders": Reminder,
}


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def format_datetime(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    return value.isoformat(timespec=timespec) + "Z"


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string into a naive UTC datetime."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def encode_row(obj: Base) -> dict[str, Any]:
    """Dump every mapped column of ``obj`` into a JSON-ready camelCase dict."""
    row: dict[str, Any] = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.key)
        if isinstance(value, datetime):
            value = format_datetime(value)
        elif isinstance(value, Decimal):
            value = str(value)
        row[to_camel(column.key)] = value
    return row


def _check_numeric_fits(decoded: Decimal, precision: int | None, scale: int | None) -> None:
    """Reject values the column would round or truncate on write."""
    if scale is not None and decoded.normalize().as_tuple().exponent < -scale:
        raise ValueError(f"more than {scale} decimal places: {decoded}")
    if precision is not None and decoded != 0:
        integer_digits = precision - (scale or 0)
        if decoded.adjusted() >= integer_digits:
            raise ValueError(f"more than {integer_digits} integer digits: {decoded}")


def _decode_value(column, value: Any) -> Any:
    if value is None:
        return None
    col_type = column.type
    if isinstance(col_type, DateTime):
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str):
            raise ValueError(f"expected an ISO-8601 string, got {type(value).__name__}")
        return parse_datetime(value)
    if isinstance(col_type, Numeric):
        if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
            raise ValueError(f"expected a decimal, got {type(value).__name__}")
        try:
            decoded = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"not a decimal: {value!r}") from e
        if not decoded.is_finite():
            raise ValueError(f"not a finite decimal: {value!r}")
        _check_numeric_fits(decoded, col_type.precision, col_type.scale)
        return decoded
    if isinstance(col_type, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValueError(f"expected a boolean, got {value!r}")
    if isinstance(col_type, Integer):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected an integer, got {value!r}")
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {type(value).__name__}")
    return value


def decode_rows(entity: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Convert snapshot rows of one entity into attribute-keyed insert parameters.

    Keys that match no column are dropped with a single warning per entity.

    Raises:
        MalformedDataError: If a value cannot be converted to its column type
    """
    model = ENTITY_MODELS[entity]
    columns = {to_camel(c.key): c for c in model.__table__.columns}
    unknown: set[str] = set()
    decoded_rows: list[dict[str, Any]] = []

    for index, row in enumerate(rows):
        decoded: dict[str, Any] = {}
        for key, value in row.items():
            column = columns.get(key)
            if column is None:
                unknown.add(key)
                continue
            try:
                decoded[column.key] = _decode_value(column, value)
            except ValueError as e:
                raise MalformedDataError(f"{entity}[{index}].{key}: {e}") from e
        decoded_rows.append(decoded)

    if unknown:
        logger.warning(f"Ignoring unknown {entity} fields: {', '.join(sorted(unknown))}")
    return decoded_rows


@dataclass
class BackupManifest:
    """Contents of ``backup-info.json``."""

    version: str
    created_at: str
    customer_count: int
    service_record_count: int
    reminder_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "createdAt": self.created_at,
            "customerCount": self.customer_count,
            "serviceRecordCount": self.service_record_count,
            "reminderCount": self.reminder_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BackupManifest":
        return cls(
            version=str(data.get("version", "")),
            created_at=str(data.get("createdAt", "")),
            customer_count=int(data.get("customerCount") or 0),
            service_record_count=int(data.get("serviceRecordCount") or 0),
            reminder_count=int(data.get("reminderCount") or 0),
        )


@dataclass
class Snapshot:
    """Full dump of the store: one list of wire rows per entity."""

    customers: list[dict[str, Any]] = field(default_factory=list)
    service_records: list[dict[str, Any]] = field(default_factory=list)
    reminders: list[dict[str, Any]] = field(default_factory=list)
    created_at: str = ""

    def to_data(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "customers": self.customers,
            "serviceRecords": self.service_records,
            "reminders": self.reminders,
        }

    @classmethod
    def from_data(cls, data: dict[str, Any], created_at: str = "") -> "Snapshot":
        return cls(
            customers=list(data.get("customers", [])),
            service_records=list(data.get("serviceRecords", [])),
            reminders=list(data.get("reminders", [])),
            created_at=created_at,
        )

    def manifest(self) -> BackupManifest:
        return BackupManifest(
            version=BACKUP_FORMAT_VERSION,
            created_at=self.created_at or format_datetime(utcnow()),
            customer_count=len(self.customers),
            service_record_count=len(self.service_records),
            reminder_count=len(self.reminders),
        )


class SnapshotSerializer:
    """Reads the whole store and writes ``data.json`` plus ``backup-info.json``."""

    def __init__(self, database: Database):
        self.database = database

    def capture(self) -> Snapshot:
        """Read every row of every entity, ordered by primary key."""
        with self.database.session() as session:
            snapshot = Snapshot(
                customers=[encode_row(c) for c in CustomerRepository(session).find_all()],
                service_records=[encode_row(r) for r in ServiceRecordRepository(session).find_all()],
                reminders=[encode_row(r) for r in ReminderRepository(session).find_all()],
                created_at=format_datetime(utcnow()),
            )
        logger.info(
            f"Snapshot captured: {len(snapshot.customers)} customers, "
            f"{len(snapshot.service_records)} service records, "
            f"{len(snapshot.reminders)} reminders"
        )
        return snapshot

    def write(self, dest_dir: Path, snapshot: Snapshot | None = None) -> BackupManifest:
        """
        Write the snapshot and its manifest into ``dest_dir``.

        Args:
            dest_dir: Existing working directory
            snapshot: Previously captured snapshot; captured now when omitted

        Returns:
            The manifest that was written

        Raises:
            BackupIOError: If a file cannot be written
        """
        if snapshot is None:
            snapshot = self.capture()
        manifest = snapshot.manifest()
        dest_dir = Path(dest_dir)
        try:
            with open(dest_dir / BACKUP_DATA_FILE, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_data(), f, ensure_ascii=False, indent=2)
            with open(dest_dir / BACKUP_MANIFEST_FILE, "w", encoding="utf-8") as f:
                json.dump(manifest.to_dict(), f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise BackupIOError(f"Failed to write snapshot files to {dest_dir}: {e}") from e
        return manifest
