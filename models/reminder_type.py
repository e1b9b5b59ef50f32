"""ReminderType class and reminder type lookup."""

from datetime import datetime
from typing import List, Optional

DEFAULT_ICON = "default"
DEFAULT_COLOR = "#6366f1"


class ReminderType:
    """A named kind of reminder, e.g. Insurance or RoadTax."""

    def __init__(
        self,
        name: str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        is_default: bool = False,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.icon = icon or DEFAULT_ICON
        self.color = color or DEFAULT_COLOR
        self.is_default = is_default or False
        self.created_at = created_at


def default_reminder_types() -> List[ReminderType]:
    """System types seeded into every new data file. They can't be deleted."""
    return [
        ReminderType("Insurance", "insurance", "#3b82f6", is_default=True, id=1),
        ReminderType("Inspection", "inspection", "#10b981", is_default=True, id=2),
        ReminderType("RoadTax", "roadtax", "#f59e0b", is_default=True, id=3),
        ReminderType("Service", "service", "#8b5cf6", is_default=True, id=4),
    ]


def resolve_reminder_type(types: List[ReminderType], name: str) -> ReminderType:
    """
    Find a reminder type by name, ignoring case.

    Raises ValueError listing the valid names if nothing matches.
    """
    normalized = (name or "").lower()
    for reminder_type in types:
        if reminder_type.name.lower() == normalized:
            return reminder_type
    valid_names = ", ".join(t.name for t in types)
    raise ValueError(f"Invalid reminder type. Valid types: {valid_names}")
