"""Service record endpoints."""
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from maintcrm.api.dependencies import get_database
from maintcrm.api.models import (
    ServiceRecordCreateRequest,
    ServiceRecordResponse,
    ServiceRecordUpdateRequest,
)
from maintcrm.models import ServiceRecordCreate, ServiceRecordFilters, ServiceRecordUpdate
from maintcrm.store import Database, RecordNotFoundError, ServiceRecordRepository


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/service-records", response_model=list[ServiceRecordResponse])
def list_service_records(
    customer_id: int | None = None,
    service_type: str | None = None,
    status: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    database: Database = Depends(get_database),
):
    """List service records, most recent service date first."""
    filters = ServiceRecordFilters(
        customer_id=customer_id,
        service_type=service_type,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    with database.session() as session:
        records = ServiceRecordRepository(session).list(filters)
        return [ServiceRecordResponse.model_validate(r) for r in records]


@router.get("/service-records/{record_id}", response_model=ServiceRecordResponse)
def get_service_record(record_id: int, database: Database = Depends(get_database)):
    with database.session() as session:
        record = ServiceRecordRepository(session).get(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"Service record not found: {record_id}")
        return ServiceRecordResponse.model_validate(record)


@router.post("/service-records", response_model=ServiceRecordResponse, status_code=201)
def create_service_record(
    request: ServiceRecordCreateRequest,
    database: Database = Depends(get_database),
):
    """Create a service record for an existing customer."""
    try:
        with database.session() as session:
            record = ServiceRecordRepository(session).create(ServiceRecordCreate(**request.model_dump()))
            return ServiceRecordResponse.model_validate(record)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/service-records/{record_id}", response_model=ServiceRecordResponse)
def update_service_record(
    record_id: int,
    request: ServiceRecordUpdateRequest,
    database: Database = Depends(get_database),
):
    try:
        changes = ServiceRecordUpdate(**request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        with database.session() as session:
            record = ServiceRecordRepository(session).update(record_id, changes)
            return ServiceRecordResponse.model_validate(record)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/service-records/{record_id}")
def delete_service_record(record_id: int, database: Database = Depends(get_database)):
    """Delete a service record; reminders that pointed at it are kept and unlinked."""
    try:
        with database.session() as session:
            ServiceRecordRepository(session).delete(record_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Service record deleted: {record_id}")
    return {"success": True, "deleted": record_id}
