"""Status endpoint - liveness and version."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from maintcrm.api.dependencies import get_database
from maintcrm.config.constants import APP_VERSION
from maintcrm.store import Database


router = APIRouter()


_SERVER_STARTED_AT = datetime.now(timezone.utc).isoformat()


@router.get("/status")
def get_status(database: Database = Depends(get_database)):
    """Return liveness and version for health checks."""
    return {
        "status": "ok",
        "version": APP_VERSION,
        "server_started_at": _SERVER_STARTED_AT,
        "database": str(database.path) if database.path else ":memory:",
    }
