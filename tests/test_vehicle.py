#!/usr/bin/env python3
"""Tests for Vehicle and Reminder classes."""

from datetime import date

from models import Vehicle, Reminder, PUBLIC_OWNER_ID


class TestVehicle:
    """Tests for Vehicle properties."""

    def test_name(self):
        vehicle = Vehicle("Volvo", "XC60", 2021, "ABC 123")
        assert vehicle.name == "Volvo XC60 (ABC 123)"

    def test_defaults_to_public(self):
        vehicle = Vehicle("Volvo", "XC60", 2021, "ABC 123")
        assert vehicle.user_id == PUBLIC_OWNER_ID
        assert vehicle.is_public

    def test_none_owner_is_public(self):
        vehicle = Vehicle("Volvo", "XC60", 2021, "ABC 123", user_id=None)
        assert vehicle.is_public

    def test_owned_vehicle(self):
        vehicle = Vehicle("Tesla", "Model 3", 2023, "EV 456", user_id=5)
        assert not vehicle.is_public
        assert vehicle.is_owned_by(5)
        assert not vehicle.is_owned_by(6)

    def test_public_vehicle_owned_by_everyone(self):
        vehicle = Vehicle("Volvo", "XC60", 2021, "ABC 123")
        assert vehicle.is_owned_by(1)
        assert vehicle.is_owned_by(42)


class TestReminder:
    """Tests for Reminder defaults."""

    def test_defaults(self):
        reminder = Reminder(1, "Insurance", date(2025, 6, 30))
        assert reminder.is_completed is False
        assert reminder.notes is None
        assert reminder.id is None

    def test_none_completed_is_false(self):
        reminder = Reminder(1, "Insurance", date(2025, 6, 30), is_completed=None)
        assert reminder.is_completed is False
