#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from datetime import date

from models import Reminder, Vehicle, User
from models import loader
from validate_yaml import check_references, load_schema, main, validate_data_file


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_expected_structure(self):
        properties = load_schema()["properties"]
        for section in ("users", "vehicles", "vehicleShares", "reminders", "reminderTypes"):
            assert section in properties


class TestValidateDataFile:
    """Tests for validate_data_file function."""

    def test_valid_minimal_returns_no_errors(self, tmp_path):
        """Valid minimal data file returns empty error list."""
        path = tmp_path / "valid.yaml"
        path.write_text("""
vehicles:
  - id: 1
    make: Volvo
    model: XC60
    year: 2021
    licensePlate: ABC 123

reminders:
  - id: 1
    vehicleId: 1
    type: Insurance
    dueDate: '2025-06-30'
""")
        errors = validate_data_file(path, load_schema())
        assert errors == []

    def test_store_written_file_is_valid(self, data_file):
        """Files written by the store pass validation."""
        alice = loader.create_user(data_file, User("alice", "alice@example.com"))
        bob = loader.create_user(data_file, User("bob"))
        vehicle = loader.create_vehicle(
            data_file, Vehicle("Volvo", "XC60", 2021, "ABC 123", color="Black", user_id=alice.id)
        )
        loader.create_reminder(data_file, Reminder(vehicle.id, "service", date(2025, 6, 30)))
        loader.share_vehicle(data_file, vehicle.id, bob.id)

        assert validate_data_file(data_file, load_schema()) == []

    def test_unquoted_dates_are_valid(self, tmp_path):
        """Hand-written files may leave dates and timestamps unquoted."""
        path = tmp_path / "handwritten.yaml"
        path.write_text("""
vehicles:
  - id: 1
    make: Volvo
    model: XC60
    year: 2021
    licensePlate: ABC 123
    createdAt: 2025-01-01T08:00:00+00:00

reminders:
  - id: 1
    vehicleId: 1
    type: Insurance
    dueDate: 2025-06-30
""")
        assert validate_data_file(path, load_schema()) == []

    def test_missing_required_field_returns_errors(self, tmp_path):
        """Missing required vehicle field returns schema validation errors."""
        path = tmp_path / "invalid.yaml"
        path.write_text("""
vehicles:
  - id: 1
    make: Volvo
    model: XC60
    year: 2021
    # licensePlate missing
""")
        errors = validate_data_file(path, load_schema())
        assert len(errors) >= 1
        assert any("Schema validation" in e for e in errors)
        assert any("vehicles.0" in e for e in errors)

    def test_bad_due_date_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
reminders:
  - id: 1
    vehicleId: 1
    type: Insurance
    dueDate: 'next june'
""")
        errors = validate_data_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)

    def test_unknown_section_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("cars: []\n")
        errors = validate_data_file(path, load_schema())
        assert len(errors) >= 1

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        """Invalid YAML syntax returns YAML parse error."""
        path = tmp_path / "bad.yaml"
        path.write_text("""
vehicles:
  - make: Volvo
    invalid: [unclosed
""")
        errors = validate_data_file(path, load_schema())
        assert len(errors) >= 1
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        """Nonexistent file returns error (caught by validate_data_file)."""
        path = tmp_path / "does_not_exist.yaml"
        errors = validate_data_file(path, load_schema())
        assert len(errors) >= 1
        assert any("Error" in e for e in errors)


class TestMain:
    """Tests for the validate_yaml command line."""

    def test_reports_each_file(self, tmp_path, data_file, capsys):
        bad = tmp_path / "bad.yaml"
        bad.write_text("cars: []\n")

        assert main([str(data_file)]) == 0
        assert main([str(data_file), str(bad)]) == 1

        out = capsys.readouterr().out
        assert f"OK: {data_file}" in out
        assert f"FAIL: {bad}" in out
        assert "1 of 2 file(s) failed validation" in out


class TestCheckReferences:
    """Tests for check_references."""

    def test_empty(self):
        assert check_references(None) == []
        assert check_references({"vehicles": None}) == []

    def test_dangling_reminder_and_share(self):
        data = {
            "users": [{"id": 1, "username": "alice"}],
            "vehicles": [{"id": 1}],
            "reminders": [
                {"id": 1, "vehicleId": 1},
                {"id": 2, "vehicleId": 7},
            ],
            "vehicleShares": [{"id": 1, "vehicleId": 3, "userId": 4}],
        }
        assert check_references(data) == [
            "Reminder 2 refers to unknown vehicle 7",
            "Share 1 refers to unknown vehicle 3",
            "Share 1 refers to unknown user 4",
        ]

    def test_duplicate_ids(self):
        data = {"reminderTypes": [{"id": 2}, {"id": 2}, {"id": 3}]}
        assert check_references(data) == ["Duplicate id 2 in reminderTypes"]

    def test_reported_by_validate_data_file(self, tmp_path):
        path = tmp_path / "dangling.yaml"
        path.write_text("""
reminders:
  - id: 1
    vehicleId: 4
    type: Insurance
    dueDate: '2025-06-30'
""")
        errors = validate_data_file(path, load_schema())
        assert errors == ["Reminder 1 refers to unknown vehicle 4"]
