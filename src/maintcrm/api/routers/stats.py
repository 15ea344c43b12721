"""Statistics endpoint - per-entity row counts."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from maintcrm.api.dependencies import get_database
from maintcrm.api.models import StatisticsResponse
from maintcrm.store import Database


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/statistics", response_model=StatisticsResponse)
def get_statistics(database: Database = Depends(get_database)):
    """Count customers, service records and reminders."""
    try:
        return database.counts().to_dict()
    except SQLAlchemyError as e:
        logger.error(f"Failed to count records: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
