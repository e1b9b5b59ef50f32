#!/usr/bin/env python3
"""Tests for the dashboard summary."""

import json
from datetime import date, timedelta

import pytest

from models import Reminder, Vehicle, build_dashboard

TODAY = date(2025, 3, 12)


def reminder(id, vehicle_id, days, completed=False):
    return Reminder(vehicle_id, "Insurance", TODAY + timedelta(days=days), None, completed, id)


@pytest.fixture
def vehicles():
    return [
        Vehicle("Volvo", "XC60", 2021, "ABC 123", id=1),
        Vehicle("Tesla", "Model 3", 2023, "EV 456", id=2),
    ]


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_scenario(self, vehicles):
        """One overdue, one upcoming, one completed."""
        reminders = [
            reminder(1, 1, -5),
            reminder(2, 1, 5),
            reminder(3, 2, 10, completed=True),
        ]
        summary = build_dashboard(reminders, vehicles, TODAY)

        assert summary.stats.total_vehicles == 2
        assert summary.stats.overdue_reminders == 1
        assert summary.stats.completed_this_year == 1
        assert summary.stats.upcoming_this_month == 1
        assert [v.id for v in summary.upcoming_reminders] == [2]
        assert [v.id for v in summary.overdue_reminders] == [1]

    def test_empty(self):
        summary = build_dashboard([], [], TODAY)
        assert summary.to_dict() == {
            "stats": {
                "totalVehicles": 0,
                "overdueReminders": 0,
                "upcomingThisMonth": 0,
                "completedThisYear": 0,
            },
            "upcomingReminders": [],
            "overdueReminders": [],
        }

    def test_vehicles_without_reminders(self, vehicles):
        summary = build_dashboard([], vehicles, TODAY)
        assert summary.stats.total_vehicles == 2
        assert summary.upcoming_reminders == []

    def test_overdue_sorted_by_due_date(self, vehicles):
        reminders = [reminder(1, 1, -2), reminder(2, 1, -30), reminder(3, 2, -10)]
        summary = build_dashboard(reminders, vehicles, TODAY)
        assert [v.id for v in summary.overdue_reminders] == [2, 3, 1]

    def test_completing_removes_from_overdue(self, vehicles):
        summary = build_dashboard([reminder(1, 1, -5, completed=True)], vehicles, TODAY)
        assert summary.overdue_reminders == []
        assert summary.stats.overdue_reminders == 0
        assert summary.stats.completed_this_year == 1

    def test_upcoming_window(self, vehicles):
        """Due today through the last day of this month; overdue and next month excluded."""
        reminders = [
            reminder(1, 1, -1),  # yesterday
            reminder(2, 1, 0),  # today
            reminder(3, 1, 19),  # March 31
            reminder(4, 1, 20),  # April 1
        ]
        summary = build_dashboard(reminders, vehicles, TODAY)
        assert [v.id for v in summary.upcoming_reminders] == [2, 3]

    def test_upcoming_on_first_of_month(self, vehicles):
        """On the 1st the window still ends at this month's end."""
        first = date(2025, 4, 1)
        reminders = [
            Reminder(1, "Insurance", date(2025, 4, 30), id=1),
            Reminder(1, "Insurance", date(2025, 5, 1), id=2),
        ]
        summary = build_dashboard(reminders, vehicles, first)
        assert [v.id for v in summary.upcoming_reminders] == [1]

    def test_upcoming_sorted_by_due_date(self, vehicles):
        reminders = [reminder(1, 1, 9), reminder(2, 2, 1), reminder(3, 1, 4)]
        summary = build_dashboard(reminders, vehicles, TODAY)
        assert [v.id for v in summary.upcoming_reminders] == [2, 3, 1]

    def test_upcoming_truncated_to_ten(self, vehicles):
        """The ten earliest are kept and the count reflects the truncated list."""
        reminders = [reminder(i, 1, 14 - i) for i in range(15)]
        summary = build_dashboard(reminders, vehicles, TODAY)

        assert len(summary.upcoming_reminders) == 10
        assert summary.stats.upcoming_this_month == 10
        assert [v.days_until_due for v in summary.upcoming_reminders] == list(range(10))

    def test_overdue_count_is_not_capped(self, vehicles):
        reminders = [reminder(i, 1, -(i + 1)) for i in range(15)]
        summary = build_dashboard(reminders, vehicles, TODAY)
        assert summary.stats.overdue_reminders == 15
        assert len(summary.overdue_reminders) == 15

    def test_completed_counts_all_time(self, vehicles):
        reminders = [
            Reminder(1, "Insurance", date(2019, 1, 1), is_completed=True, id=1),
            Reminder(1, "Insurance", date(2031, 1, 1), is_completed=True, id=2),
        ]
        summary = build_dashboard(reminders, vehicles, TODAY)
        assert summary.stats.completed_this_year == 2

    def test_dangling_reminder_still_counted(self, vehicles):
        summary = build_dashboard([reminder(1, 99, -1)], vehicles, TODAY)
        assert summary.overdue_reminders[0].vehicle_name == "Unknown"

    def test_idempotent(self, vehicles):
        reminders = [reminder(1, 1, -5), reminder(2, 1, 5), reminder(3, 2, 10, completed=True)]
        first = json.dumps(build_dashboard(reminders, vehicles, TODAY).to_dict())
        second = json.dumps(build_dashboard(reminders, vehicles, TODAY).to_dict())
        assert first == second

    def test_accepts_generators(self, vehicles):
        summary = build_dashboard(
            (r for r in [reminder(1, 1, 2)]), (v for v in vehicles), TODAY
        )
        assert summary.stats.total_vehicles == 2
        assert summary.upcoming_reminders[0].vehicle_name == "Volvo XC60 (ABC 123)"
