"""Jobkan-compatible CSV export of customers and service records.

Files are UTF-8 with a BOM and CRLF line endings so Excel opens them
without mangling the Japanese headers.
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Literal

import pandas as pd
from sqlalchemy import select

from maintcrm.models.orm import Customer, ServiceRecord
from maintcrm.store.database import Database

logger = logging.getLogger(__name__)

CSV_ENCODING = "utf-8-sig"
CSV_LINE_TERMINATOR = "\r\n"

CUSTOMER_HEADERS = ["会社名", "担当者", "電話番号", "メールアドレス", "住所", "備考"]
SERVICE_RECORD_HEADERS = ["日付", "顧客名", "サービス種別", "サービス内容", "金額", "備考"]
UNKNOWN_CUSTOMER = "不明"

ExportKind = Literal["customers", "service-records"]


class NoDataToExportError(ValueError):
    """The table selected for export has no rows."""


def format_amount(amount: Decimal | None) -> str:
    """Whole-yen string, rounded half up; ``"0"`` when unset."""
    if not amount:
        return "0"
    return str(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _to_csv(rows: list[list[str]], headers: list[str]) -> str:
    frame = pd.DataFrame(rows, columns=headers, dtype="object")
    return frame.to_csv(index=False, lineterminator=CSV_LINE_TERMINATOR)


def generate_customers_csv(database: Database) -> str:
    """
    Build the customer CSV, ordered by company name.

    Raises:
        NoDataToExportError: If there are no customers
    """
    with database.session() as session:
        customers = list(session.scalars(select(Customer).order_by(Customer.company_name.asc())))
        rows = [
            [
                c.company_name or "",
                c.contact_person or "",
                c.phone or "",
                c.email or "",
                c.address or "",
                c.notes or "",
            ]
            for c in customers
        ]

    if not rows:
        raise NoDataToExportError("No customers to export")
    logger.info(f"Customer CSV generated: {len(rows)} rows")
    return _to_csv(rows, CUSTOMER_HEADERS)


def generate_service_records_csv(database: Database) -> str:
    """
    Build the invoicing CSV of service records joined with their customer,
    newest service date first.

    Raises:
        NoDataToExportError: If there are no service records
    """
    stmt = (
        select(ServiceRecord, Customer.company_name)
        .outerjoin(Customer, ServiceRecord.customer_id == Customer.customer_id)
        .order_by(ServiceRecord.service_date.desc(), ServiceRecord.record_id.desc())
    )
    with database.session() as session:
        rows = [
            [
                record.service_date.strftime("%Y-%m-%d") if record.service_date else "",
                company_name or UNKNOWN_CUSTOMER,
                record.service_type or "",
                record.service_description or "",
                format_amount(record.amount),
                "",
            ]
            for record, company_name in session.execute(stmt)
        ]

    if not rows:
        raise NoDataToExportError("No service records to export")
    logger.info(f"Service record CSV generated: {len(rows)} rows")
    return _to_csv(rows, SERVICE_RECORD_HEADERS)


def generate_csv(database: Database, kind: ExportKind) -> str:
    if kind == "customers":
        return generate_customers_csv(database)
    if kind == "service-records":
        return generate_service_records_csv(database)
    raise ValueError(f"Unsupported export: {kind}")


def write_csv(content: str, output_path: Path) -> Path:
    """Write CSV text BOM-prefixed, keeping its CRLF line endings."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding=CSV_ENCODING, newline="") as f:
        f.write(content)
    logger.info(f"CSV written: {output_path}")
    return output_path


def export_csv(database: Database, kind: ExportKind, output_path: Path) -> Path:
    return write_csv(generate_csv(database, kind), output_path)
