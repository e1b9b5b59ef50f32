"""Status enum for reminder urgency levels."""

from enum import Enum


class Status(Enum):
    """Reminder status labels, derived from due date and completion."""

    OVERDUE = "overdue"
    URGENT = "urgent"  # Due within 7 days (including today)
    WARNING = "warning"  # Due within 30 days
    OK = "ok"
    COMPLETED = "completed"
