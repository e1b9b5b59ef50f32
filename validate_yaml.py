#!/usr/bin/env python3
"""Validate CarMonitor data files against the schema and cross-references."""
import sys
from collections import Counter
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

import config

SECTIONS = ("users", "vehicles", "vehicleShares", "reminders", "reminderTypes")


class DataFileLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted dates and timestamps as their ISO text."""


DataFileLoader.add_constructor("tag:yaml.org,2002:timestamp", yaml.SafeLoader.construct_scalar)


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_references(data: dict) -> list[str]:
    """
    Check ids the schema can't: duplicates within a section, and shares or
    reminders pointing at vehicles or users that don't exist.

    Reminders for missing vehicles are reported but still load (they show
    up under the 'Unknown' vehicle name).
    """
    data = data or {}
    errors = []
    ids = {}
    for section in SECTIONS:
        records = data.get(section) or []
        ids[section] = {r["id"] for r in records}
        counts = Counter(r["id"] for r in records)
        for record_id in sorted(i for i, n in counts.items() if n > 1):
            errors.append(f"Duplicate id {record_id} in {section}")

    for reminder in data.get("reminders") or []:
        if reminder["vehicleId"] not in ids["vehicles"]:
            errors.append(
                f"Reminder {reminder['id']} refers to unknown vehicle {reminder['vehicleId']}"
            )
    for share in data.get("vehicleShares") or []:
        if share["vehicleId"] not in ids["vehicles"]:
            errors.append(f"Share {share['id']} refers to unknown vehicle {share['vehicleId']}")
        if share["userId"] not in ids["users"]:
            errors.append(f"Share {share['id']} refers to unknown user {share['userId']}")
    return errors


def validate_data_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single data file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.load(f, Loader=DataFileLoader)
        validate(instance=data, schema=schema)
        errors.extend(check_references(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the given data files (default: the configured data file)."""
    paths = [Path(p) for p in (argv if argv is not None else sys.argv[1:])]
    if not paths:
        paths = [Path(config.DATA_FILE)]

    schema = load_schema()
    failed = 0
    for filepath in paths:
        errors = validate_data_file(filepath, schema)
        if not errors:
            print(f"OK: {filepath}")
            continue
        failed += 1
        print(f"FAIL: {filepath}")
        for error in errors:
            print(f"  {error}")

    if failed:
        print(f"\n{failed} of {len(paths)} file(s) failed validation")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
