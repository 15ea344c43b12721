"""FastAPI route handlers organized by resource."""
from maintcrm.api.routers.status import router as status_router
from maintcrm.api.routers.stats import router as stats_router
from maintcrm.api.routers.customers import router as customers_router
from maintcrm.api.routers.service_records import router as service_records_router
from maintcrm.api.routers.reminders import router as reminders_router
from maintcrm.api.routers.export import router as export_router
from maintcrm.api.routers.backup import router as backup_router

__all__ = [
    "status_router",
    "stats_router",
    "customers_router",
    "service_records_router",
    "reminders_router",
    "export_router",
    "backup_router",
]
