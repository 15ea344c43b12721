"""Customer endpoints - list, fetch, create, update, delete."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from maintcrm.api.dependencies import get_database
from maintcrm.api.models import CustomerCreateRequest, CustomerResponse, CustomerUpdateRequest
from maintcrm.models import CustomerCreate, CustomerFilters, CustomerUpdate
from maintcrm.store import CustomerRepository, Database, RecordNotFoundError


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/customers", response_model=list[CustomerResponse])
def list_customers(
    company_name: str | None = None,
    contact_person: str | None = None,
    phone: str | None = None,
    email: str | None = None,
    database: Database = Depends(get_database),
):
    """List customers, newest first, optionally filtered by substring."""
    filters = CustomerFilters(
        company_name=company_name,
        contact_person=contact_person,
        phone=phone,
        email=email,
    )
    with database.session() as session:
        customers = CustomerRepository(session).list(filters)
        return [CustomerResponse.model_validate(c) for c in customers]


@router.get("/customers/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: int, database: Database = Depends(get_database)):
    with database.session() as session:
        customer = CustomerRepository(session).get(customer_id)
        if customer is None:
            raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
        return CustomerResponse.model_validate(customer)


@router.post("/customers", response_model=CustomerResponse, status_code=201)
def create_customer(request: CustomerCreateRequest, database: Database = Depends(get_database)):
    try:
        data = CustomerCreate(**request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    with database.session() as session:
        customer = CustomerRepository(session).create(data)
        return CustomerResponse.model_validate(customer)


@router.put("/customers/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    request: CustomerUpdateRequest,
    database: Database = Depends(get_database),
):
    """Update only the fields present in the request body."""
    try:
        changes = CustomerUpdate(**request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        with database.session() as session:
            customer = CustomerRepository(session).update(customer_id, changes)
            return CustomerResponse.model_validate(customer)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/customers/{customer_id}")
def delete_customer(customer_id: int, database: Database = Depends(get_database)):
    """Delete a customer together with its service records and reminders."""
    try:
        with database.session() as session:
            CustomerRepository(session).delete(customer_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Customer deleted: {customer_id}")
    return {"success": True, "deleted": customer_id}
