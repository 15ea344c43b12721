"""Enumerations for maintcrm."""
from __future__ import annotations

from enum import Enum


class ReminderStatus(str, Enum):
    """Lifecycle state of a reminder.

    The database column stores the plain string value so that snapshots
    written by other tools restore verbatim even if they carry a value not
    listed here.
    """
    SCHEDULED = "scheduled"
    DRAFTING = "drafting"
    SENT = "sent"
    CANCELLED = "cancelled"


class ServiceStatus(str, Enum):
    """Status of a service record."""
    COMPLETED = "completed"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    CANCELLED = "cancelled"


class ReminderSource(str, Enum):
    """Who created a reminder (the ``created_by`` column)."""
    SYSTEM = "system"
    MANUAL = "manual"
