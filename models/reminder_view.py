"""ReminderView dataclass and the reminder/vehicle join."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from .calculations import DateLike, as_date, classify, days_until_due
from .reminder import Reminder
from .status import Status
from .vehicle import Vehicle

UNKNOWN_VEHICLE_NAME = "Unknown"


@dataclass
class ReminderView:
    """A reminder enriched with its vehicle name and calculated status."""

    id: Optional[int]
    vehicle_id: int
    vehicle_name: str
    type: str
    due_date: date
    notes: Optional[str]
    is_completed: bool
    days_until_due: int
    status: Status

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the API format (camelCase keys, ISO date)."""
        return {
            "id": self.id,
            "vehicleId": self.vehicle_id,
            "vehicleName": self.vehicle_name,
            "type": self.type,
            "dueDate": self.due_date.isoformat(),
            "notes": self.notes,
            "isCompleted": self.is_completed,
            "daysUntilDue": self.days_until_due,
            "status": self.status.value,
        }


def vehicle_display_name(vehicle: Optional[Vehicle]) -> str:
    """Display name for a joined vehicle, or the 'Unknown' sentinel."""
    if vehicle is None:
        return UNKNOWN_VEHICLE_NAME
    return vehicle.name


def to_view(reminder: Reminder, vehicle: Optional[Vehicle], today: DateLike) -> ReminderView:
    """Build the view for one reminder. Status depends only on this reminder."""
    return ReminderView(
        id=reminder.id,
        vehicle_id=reminder.vehicle_id,
        vehicle_name=vehicle_display_name(vehicle),
        type=reminder.type,
        due_date=as_date(reminder.due_date),
        notes=reminder.notes,
        is_completed=reminder.is_completed,
        days_until_due=days_until_due(reminder.due_date, today),
        status=classify(reminder.due_date, reminder.is_completed, today),
    )


def build_reminder_views(
    reminders: Iterable[Reminder], vehicles: Iterable[Vehicle], today: DateLike
) -> List[ReminderView]:
    """
    Join reminders with their vehicles, in reminder order.

    A reminder pointing at a missing vehicle gets the 'Unknown' name
    instead of raising.
    """
    vehicles_by_id = {v.id: v for v in vehicles}
    return [to_view(r, vehicles_by_id.get(r.vehicle_id), today) for r in reminders]


def build_reminder_views_for_vehicle(
    vehicle_id: int,
    reminders: Iterable[Reminder],
    vehicle: Optional[Vehicle],
    today: DateLike,
) -> List[ReminderView]:
    """Views for one vehicle's reminders, joined against that vehicle record."""
    return [to_view(r, vehicle, today) for r in reminders if r.vehicle_id == vehicle_id]
