"""
Vehicle reminder tracking models.

This package provides data models for tracking vehicle reminders:
- Status: Urgency levels (OVERDUE, URGENT, WARNING, OK, COMPLETED)
- Vehicle / VehicleShare: Vehicles and who can see them
- Reminder: Dated obligations attached to a vehicle
- ReminderType: Known kinds of reminder (Insurance, RoadTax, ...)
- User: Vehicle owners and notification recipients
- ReminderView: Reminder joined with its vehicle and calculated status
- DashboardSummary: Overdue/upcoming overview built from reminder views
"""

from .status import Status
from .vehicle import Vehicle, VehicleShare, PUBLIC_OWNER_ID
from .reminder import Reminder
from .reminder_type import ReminderType, default_reminder_types, resolve_reminder_type
from .user import User
from .calculations import as_date, days_until_due, classify, month_end, utc_today
from .reminder_view import (
    ReminderView,
    UNKNOWN_VEHICLE_NAME,
    build_reminder_views,
    build_reminder_views_for_vehicle,
)
from .dashboard import DashboardStats, DashboardSummary, build_dashboard
from .loader import (
    NotFoundError,
    init_data_file,
    load_snapshot,
    load_vehicles,
    load_reminders,
    load_reminder_types,
    load_users,
    create_vehicle,
    create_reminder,
)

__all__ = [
    "Status",
    "Vehicle",
    "VehicleShare",
    "PUBLIC_OWNER_ID",
    "Reminder",
    "ReminderType",
    "default_reminder_types",
    "resolve_reminder_type",
    "User",
    "as_date",
    "days_until_due",
    "classify",
    "month_end",
    "utc_today",
    "ReminderView",
    "UNKNOWN_VEHICLE_NAME",
    "build_reminder_views",
    "build_reminder_views_for_vehicle",
    "DashboardStats",
    "DashboardSummary",
    "build_dashboard",
    "NotFoundError",
    "init_data_file",
    "load_snapshot",
    "load_vehicles",
    "load_reminders",
    "load_reminder_types",
    "load_users",
    "create_vehicle",
    "create_reminder",
]
