"""CSV export endpoints (Jobkan-compatible)."""
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from maintcrm.api.dependencies import get_database
from maintcrm.services.csv_export import CSV_ENCODING, NoDataToExportError, generate_csv
from maintcrm.store import Database


router = APIRouter()
logger = logging.getLogger(__name__)


def _csv_response(database: Database, kind: str, basename: str) -> Response:
    try:
        content = generate_csv(database, kind)
    except NoDataToExportError as e:
        raise HTTPException(status_code=404, detail=str(e))

    filename = f"{basename}_{datetime.now().strftime('%Y-%m-%d')}.csv"
    return Response(
        content=content.encode(CSV_ENCODING),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/customers.csv")
def export_customers(database: Database = Depends(get_database)):
    """Customer list as BOM-prefixed UTF-8 CSV."""
    return _csv_response(database, "customers", "customers")


@router.get("/export/service-records.csv")
def export_service_records(database: Database = Depends(get_database)):
    """Service history joined with customer names, for invoicing."""
    return _csv_response(database, "service-records", "service_records")
