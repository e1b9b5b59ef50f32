"""Reminder class for dated vehicle obligations."""

from datetime import date, datetime
from typing import Optional


class Reminder:
    """A dated obligation (insurance, inspection, ...) attached to a vehicle."""

    def __init__(
        self,
        vehicle_id: int,
        type: str,
        due_date: date,
        notes: Optional[str] = None,
        is_completed: bool = False,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.type = type
        self.due_date = due_date
        self.notes = notes
        self.is_completed = is_completed or False
        self.created_at = created_at
