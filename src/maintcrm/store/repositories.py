"""Per-entity repositories over an open SQLAlchemy session.

Repositories never commit; the caller owns the unit of work through
``Database.session()`` or ``Database.transaction()``.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from maintcrm.models.domain import (
    CustomerCreate,
    CustomerFilters,
    CustomerUpdate,
    ReminderCreate,
    ReminderFilters,
    ReminderUpdate,
    ServiceRecordCreate,
    ServiceRecordFilters,
    ServiceRecordUpdate,
    changed_fields,
)
from maintcrm.models.enums import ReminderStatus
from maintcrm.models.orm import Base, Customer, Reminder, ServiceRecord, utcnow

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordNotFoundError(LookupError):
    """A referenced row does not exist."""

    def __init__(self, entity: str, key: int):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


def _contains(column, value: str):
    return func.lower(column).contains(value.lower(), autoescape=True)


class _Repository(Generic[ModelT]):
    model: type[ModelT]
    entity_name: str = "record"

    def __init__(self, session: Session):
        self.session = session

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(self.model)) or 0

    def get(self, key: int) -> ModelT | None:
        return self.session.get(self.model, key)

    def require(self, key: int) -> ModelT:
        obj = self.get(key)
        if obj is None:
            raise RecordNotFoundError(self.entity_name, key)
        return obj

    def find_all(self) -> list[ModelT]:
        """Every row, ordered by primary key."""
        pk = self.model.__mapper__.primary_key[0]
        return list(self.session.scalars(select(self.model).order_by(pk)))

    def create_many(self, rows: Iterable[Mapping[str, Any]]) -> int:
        """Bulk insert attribute-keyed rows verbatim, primary keys included."""
        batch = [dict(row) for row in rows]
        if not batch:
            return 0
        self.session.execute(insert(self.model), batch)
        return len(batch)

    def delete_all(self) -> int:
        result = self.session.execute(delete(self.model))
        return result.rowcount or 0

    def delete(self, key: int) -> None:
        obj = self.require(key)
        self.session.delete(obj)
        self.session.flush()

    def _apply(self, obj: ModelT, changes: Mapping[str, Any]) -> ModelT:
        for name, value in changes.items():
            setattr(obj, name, value)
        if changes:
            obj.updated_at = utcnow()
        self.session.flush()
        return obj


class CustomerRepository(_Repository[Customer]):
    model = Customer
    entity_name = "customer"

    def list(self, filters: CustomerFilters | None = None) -> list[Customer]:
        filters = filters or CustomerFilters()
        stmt = select(Customer)
        if filters.company_name:
            stmt = stmt.where(_contains(Customer.company_name, filters.company_name))
        if filters.contact_person:
            stmt = stmt.where(_contains(Customer.contact_person, filters.contact_person))
        if filters.phone:
            stmt = stmt.where(Customer.phone.contains(filters.phone, autoescape=True))
        if filters.email:
            stmt = stmt.where(_contains(Customer.email, filters.email))
        stmt = stmt.order_by(Customer.created_at.desc(), Customer.customer_id.desc())
        return list(self.session.scalars(stmt))

    def create(self, data: CustomerCreate) -> Customer:
        customer = Customer(
            company_name=data.company_name.strip(),
            contact_person=data.contact_person,
            phone=data.phone,
            email=data.email,
            address=data.address,
            notes=data.notes,
        )
        self.session.add(customer)
        self.session.flush()
        logger.info(f"Customer created: {customer.customer_id} ({customer.company_name})")
        return customer

    def update(self, customer_id: int, changes: CustomerUpdate) -> Customer:
        customer = self.require(customer_id)
        return self._apply(customer, changed_fields(changes))


class ServiceRecordRepository(_Repository[ServiceRecord]):
    model = ServiceRecord
    entity_name = "service record"

    def list(self, filters: ServiceRecordFilters | None = None) -> list[ServiceRecord]:
        filters = filters or ServiceRecordFilters()
        stmt = select(ServiceRecord)
        if filters.customer_id is not None:
            stmt = stmt.where(ServiceRecord.customer_id == filters.customer_id)
        if filters.service_type:
            stmt = stmt.where(_contains(ServiceRecord.service_type, filters.service_type))
        if filters.status:
            stmt = stmt.where(ServiceRecord.status == filters.status)
        if filters.start_date is not None:
            stmt = stmt.where(ServiceRecord.service_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(ServiceRecord.service_date <= filters.end_date)
        stmt = stmt.order_by(ServiceRecord.service_date.desc(), ServiceRecord.record_id.desc())
        return list(self.session.scalars(stmt))

    def create(self, data: ServiceRecordCreate) -> ServiceRecord:
        CustomerRepository(self.session).require(data.customer_id)
        record = ServiceRecord(
            customer_id=data.customer_id,
            service_date=data.service_date,
            service_type=data.service_type,
            service_description=data.service_description,
            amount=data.amount,
            status=data.status,
        )
        self.session.add(record)
        self.session.flush()
        logger.info(f"Service record created: {record.record_id} for customer {record.customer_id}")
        return record

    def update(self, record_id: int, changes: ServiceRecordUpdate) -> ServiceRecord:
        record = self.require(record_id)
        return self._apply(record, changed_fields(changes))


class ReminderRepository(_Repository[Reminder]):
    model = Reminder
    entity_name = "reminder"

    def list(self, filters: ReminderFilters | None = None) -> list[Reminder]:
        filters = filters or ReminderFilters()
        stmt = select(Reminder)
        if filters.customer_id is not None:
            stmt = stmt.where(Reminder.customer_id == filters.customer_id)
        if filters.status:
            stmt = stmt.where(Reminder.status == filters.status)
        if filters.start_date is not None:
            stmt = stmt.where(Reminder.reminder_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(Reminder.reminder_date <= filters.end_date)
        stmt = stmt.order_by(Reminder.reminder_date.asc(), Reminder.reminder_id.asc())
        return list(self.session.scalars(stmt))

    def create(self, data: ReminderCreate) -> Reminder:
        CustomerRepository(self.session).require(data.customer_id)
        if data.service_record_id is not None:
            ServiceRecordRepository(self.session).require(data.service_record_id)
        reminder = Reminder(
            customer_id=data.customer_id,
            service_record_id=data.service_record_id,
            title=data.title,
            message=data.message,
            reminder_date=data.reminder_date,
            status=ReminderStatus.SCHEDULED.value,
            created_by=data.created_by or "manual",
            notes=data.notes,
        )
        self.session.add(reminder)
        self.session.flush()
        logger.info(f"Reminder created: {reminder.reminder_id} for customer {reminder.customer_id}")
        return reminder

    def update(self, reminder_id: int, changes: ReminderUpdate) -> Reminder:
        reminder = self.require(reminder_id)
        return self._apply(reminder, changed_fields(changes))

    def mark_sent(self, reminder_id: int) -> Reminder:
        return self.update(reminder_id, ReminderUpdate(status=ReminderStatus.SENT.value, sent_at=utcnow()))

    def cancel(self, reminder_id: int) -> Reminder:
        return self.update(reminder_id, ReminderUpdate(status=ReminderStatus.CANCELLED.value))

    def reschedule(self, reminder_id: int) -> Reminder:
        return self.update(reminder_id, ReminderUpdate(status=ReminderStatus.SCHEDULED.value, sent_at=None))

    def mark_drafting(self, reminder_id: int) -> Reminder:
        return self.update(reminder_id, ReminderUpdate(status=ReminderStatus.DRAFTING.value))
