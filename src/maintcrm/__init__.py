from __future__ import annotations

__version__ = "0.3.0"
__author__ = "maintcrm Contributors"

from maintcrm.models import (
    Customer,
    ServiceRecord,
    Reminder,
    ReminderStatus,
)
from maintcrm.store import Database

__all__ = [
    "Customer",
    "ServiceRecord",
    "Reminder",
    "ReminderStatus",
    "Database",
]
