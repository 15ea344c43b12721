"""Reminder endpoints - CRUD plus status transitions."""
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from maintcrm.api.dependencies import get_database
from maintcrm.api.models import ReminderCreateRequest, ReminderResponse, ReminderUpdateRequest
from maintcrm.models import ReminderCreate, ReminderFilters, ReminderUpdate
from maintcrm.store import Database, RecordNotFoundError, ReminderRepository


router = APIRouter()
logger = logging.getLogger(__name__)

# URL action -> repository method
_TRANSITIONS = {
    "sent": "mark_sent",
    "cancel": "cancel",
    "reschedule": "reschedule",
    "drafting": "mark_drafting",
}


@router.get("/reminders", response_model=list[ReminderResponse])
def list_reminders(
    customer_id: int | None = None,
    status: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    database: Database = Depends(get_database),
):
    """List reminders, soonest first."""
    filters = ReminderFilters(
        customer_id=customer_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    with database.session() as session:
        reminders = ReminderRepository(session).list(filters)
        return [ReminderResponse.model_validate(r) for r in reminders]


@router.get("/reminders/{reminder_id}", response_model=ReminderResponse)
def get_reminder(reminder_id: int, database: Database = Depends(get_database)):
    with database.session() as session:
        reminder = ReminderRepository(session).get(reminder_id)
        if reminder is None:
            raise HTTPException(status_code=404, detail=f"Reminder not found: {reminder_id}")
        return ReminderResponse.model_validate(reminder)


@router.post("/reminders", response_model=ReminderResponse, status_code=201)
def create_reminder(request: ReminderCreateRequest, database: Database = Depends(get_database)):
    try:
        with database.session() as session:
            reminder = ReminderRepository(session).create(ReminderCreate(**request.model_dump()))
            return ReminderResponse.model_validate(reminder)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/reminders/{reminder_id}", response_model=ReminderResponse)
def update_reminder(
    reminder_id: int,
    request: ReminderUpdateRequest,
    database: Database = Depends(get_database),
):
    try:
        changes = ReminderUpdate(**request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        with database.session() as session:
            reminder = ReminderRepository(session).update(reminder_id, changes)
            return ReminderResponse.model_validate(reminder)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/reminders/{reminder_id}/{action}", response_model=ReminderResponse)
def transition_reminder(reminder_id: int, action: str, database: Database = Depends(get_database)):
    """Apply a status transition: sent, cancel, reschedule or drafting."""
    method_name = _TRANSITIONS.get(action)
    if method_name is None:
        raise HTTPException(status_code=404, detail=f"Unknown reminder action: {action}")
    try:
        with database.session() as session:
            reminder = getattr(ReminderRepository(session), method_name)(reminder_id)
            logger.info(f"Reminder {reminder_id} -> {reminder.status}")
            return ReminderResponse.model_validate(reminder)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/reminders/{reminder_id}")
def delete_reminder(reminder_id: int, database: Database = Depends(get_database)):
    try:
        with database.session() as session:
            ReminderRepository(session).delete(reminder_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "deleted": reminder_id}
