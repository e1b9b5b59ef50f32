"""Dashboard summary of overdue and upcoming reminders."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from .calculations import DateLike, as_date, month_end
from .reminder import Reminder
from .reminder_view import ReminderView, build_reminder_views
from .status import Status
from .vehicle import Vehicle

UPCOMING_LIMIT = 10


@dataclass
class DashboardStats:
    total_vehicles: int = 0
    overdue_reminders: int = 0
    upcoming_this_month: int = 0
    # Counts every completed reminder; no completion date is recorded to filter on
    completed_this_year: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalVehicles": self.total_vehicles,
            "overdueReminders": self.overdue_reminders,
            "upcomingThisMonth": self.upcoming_this_month,
            "completedThisYear": self.completed_this_year,
        }


@dataclass
class DashboardSummary:
    """Summary counts plus the overdue and upcoming reminder lists."""

    stats: DashboardStats = field(default_factory=DashboardStats)
    upcoming_reminders: List[ReminderView] = field(default_factory=list)
    overdue_reminders: List[ReminderView] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "upcomingReminders": [v.to_dict() for v in self.upcoming_reminders],
            "overdueReminders": [v.to_dict() for v in self.overdue_reminders],
        }


def build_dashboard(
    reminders: Iterable[Reminder], vehicles: Iterable[Vehicle], today: DateLike
) -> DashboardSummary:
    """
    Build the dashboard for a snapshot of reminders and vehicles.

    Logic:
    - overdue: every OVERDUE view, earliest due first
    - upcoming: not completed and due between today and the end of this
      month (inclusive), earliest due first, first 10 only
    - upcoming_this_month counts the truncated upcoming list
    """
    vehicles = list(vehicles)
    views = build_reminder_views(reminders, vehicles, today)
    start = as_date(today)
    end = month_end(today)

    overdue = sorted(
        [v for v in views if v.status == Status.OVERDUE], key=lambda v: v.due_date
    )
    upcoming = sorted(
        [v for v in views if not v.is_completed and start <= v.due_date <= end],
        key=lambda v: v.due_date,
    )[:UPCOMING_LIMIT]

    stats = DashboardStats(
        total_vehicles=len(vehicles),
        overdue_reminders=len(overdue),
        upcoming_this_month=len(upcoming),
        completed_this_year=sum(1 for v in views if v.is_completed),
    )
    return DashboardSummary(
        stats=stats, upcoming_reminders=upcoming, overdue_reminders=overdue
    )
