"""Pytest configuration and fixtures for maintcrm tests.

Every test runs against its own data directory and its own SQLite file under
``tmp_path``; nothing touches ``~/.maintcrm``.
"""

from __future__ import annotations

import logging
import zipfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import pytest

from maintcrm.models import CustomerCreate, ReminderCreate, ServiceRecordCreate
from maintcrm.services.backup import BackupManager
from maintcrm.services.snapshot import SnapshotSerializer
from maintcrm.store import (
    CustomerRepository,
    Database,
    ReminderRepository,
    ServiceRecordRepository,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")


_MAINTCRM_ENV_VARS = (
    "MAINTCRM_DATABASE_PATH",
    "MAINTCRM_DATABASE_ECHO",
    "MAINTCRM_BACKUP_DIR",
    "MAINTCRM_BACKUP_TEMP_DIR",
    "MAINTCRM_COMPRESSION_LEVEL",
    "MAINTCRM_INCLUDE_DATABASE_FILE",
    "MAINTCRM_STRICT_MANIFEST_COUNTS",
    "MAINTCRM_SAFETY_BACKUP",
    "MAINTCRM_CORS_ORIGINS",
    "MAINTCRM_PORT",
    "MAINTCRM_HOST",
)


@pytest.fixture(autouse=True)
def _isolate_maintcrm_data_dir(monkeypatch, tmp_path):
    """Point the data directory at tmp_path and drop any inherited overrides."""
    data_dir = tmp_path / ".maintcrm"
    monkeypatch.setenv("MAINTCRM_DATA_DIR", str(data_dir))
    for name in _MAINTCRM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def database(tmp_path) -> Database:
    """Empty file-backed store."""
    db = Database(tmp_path / "db" / "crm.db")
    yield db
    db.dispose()


@pytest.fixture
def backup_manager(database, tmp_path) -> BackupManager:
    """Backup manager with its own backup and working directories."""
    return BackupManager(
        database,
        backup_dir=tmp_path / "backups",
        temp_root=tmp_path / "work",
    )


@pytest.fixture
def populated_database(database) -> Database:
    """Store with 3 customers, 5 service records and 2 reminders.

    Reminder 1 is linked to 田中建設's roof service; reminder 2 has no
    service record.
    """
    with database.session() as session:
        customers = CustomerRepository(session)
        records = ServiceRecordRepository(session)
        reminders = ReminderRepository(session)

        tanaka = customers.create(CustomerCreate(
            company_name="田中建設",
            contact_person="田中太郎",
            phone="03-1234-5678",
            email="Tanaka@Example.jp",
            address="東京都新宿区西新宿1-1-1",
            notes="屋上防水は2019年施工",
        ))
        yamada = customers.create(CustomerCreate(
            company_name="山田工務店",
            contact_person="山田花子",
            phone="06-9876-5432",
        ))
        sato = customers.create(CustomerCreate(
            company_name="佐藤ビル管理",
            email="info@sato-bm.example.com",
        ))

        roof = records.create(ServiceRecordCreate(
            customer_id=tanaka.customer_id,
            service_date=datetime(2024, 3, 15),
            service_type="屋根",
            service_description="屋根点検・補修",
            amount=Decimal("150000"),
        ))
        records.create(ServiceRecordCreate(
            customer_id=tanaka.customer_id,
            service_date=datetime(2023, 9, 1),
            service_type="外壁塗装",
            service_description="外壁全面塗装",
            amount=Decimal("500000"),
        ))
        records.create(ServiceRecordCreate(
            customer_id=yamada.customer_id,
            service_date=datetime(2024, 1, 20),
            service_type="給排水",
            service_description="配管洗浄",
            amount=Decimal("80000.50"),
        ))
        records.create(ServiceRecordCreate(
            customer_id=yamada.customer_id,
            service_date=datetime(2024, 5, 10),
            service_type="定期点検",
            amount=None,
            status="scheduled",
        ))
        records.create(ServiceRecordCreate(
            customer_id=sato.customer_id,
            service_date=datetime(2024, 2, 1),
            service_type="電気設備",
            service_description="分電盤交換",
            amount=Decimal("120000"),
        ))

        reminders.create(ReminderCreate(
            customer_id=tanaka.customer_id,
            service_record_id=roof.record_id,
            title="屋根メンテナンス推奨",
            message="前回の屋根点検から1年が経過します。",
            reminder_date=datetime(2025, 3, 15),
            created_by="system",
        ))
        unlinked = reminders.create(ReminderCreate(
            customer_id=sato.customer_id,
            title="年次点検のご案内",
            message="電気設備の年次点検時期です。",
            reminder_date=datetime(2024, 12, 1),
        ))
        reminders.mark_sent(unlinked.reminder_id)

    return database


@pytest.fixture
def store_dump() -> Callable[[Database], dict[str, Any]]:
    """Serialize every row of a store, for before/after comparisons."""

    def _dump(db: Database) -> dict[str, Any]:
        return SnapshotSerializer(db).capture().to_data()

    return _dump



@pytest.fixture
def write_encrypted_zip() -> Callable[[Path, dict[str, str]], Path]:
    """Write a stored ZIP whose members all carry the encryption flag.

    zipfile refuses to read such members without a password, which is how a
    password-protected archive presents itself.
    """

    def _flag_headers(raw: bytearray, signature: bytes, flag_offset: int) -> None:
        start = raw.find(signature)
        while start != -1:
            raw[start + flag_offset] |= 0x01
            start = raw.find(signature, start + 4)

    def _write(path: Path, members: dict[str, str]) -> Path:
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as zf:
            for name, content in members.items():
                zf.writestr(name, content)
        raw = bytearray(path.read_bytes())
        _flag_headers(raw, b"PK\x03\x04", 6)
        _flag_headers(raw, b"PK\x01\x02", 8)
        path.write_bytes(bytes(raw))
        return path

    return _write
