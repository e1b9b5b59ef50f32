"""YAML loading and saving utilities for CarMonitor data files."""

import logging
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from dateutil.parser import isoparse

from .reminder import Reminder
from .reminder_type import ReminderType, default_reminder_types, resolve_reminder_type
from .user import User
from .vehicle import Vehicle, VehicleShare

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class NotFoundError(LookupError):
    """A record referenced by id or name does not exist in the data file."""


SECTIONS = ("users", "vehicles", "vehicleShares", "reminders", "reminderTypes")

# One coarse lock around every read-modify-write of a data file
_lock = threading.RLock()


# =============================================================================
# Parsing helpers
# =============================================================================


def parse_date(value: Any) -> Optional[date]:
    """Parse a date-only value. Datetimes and ISO timestamps lose their time."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return isoparse(str(value))


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _next_id(items: List[Dict[str, Any]]) -> int:
    return max((item["id"] for item in items), default=0) + 1


def _find_index(items: List[Dict[str, Any]], item_id: int) -> Optional[int]:
    for index, item in enumerate(items):
        if item["id"] == item_id:
            return index
    return None


# =============================================================================
# Record <-> dict conversion (camelCase keys)
# =============================================================================


def _vehicle_from_dict(dct: Dict[str, Any]) -> Vehicle:
    return Vehicle(
        dct["make"],
        dct["model"],
        dct["year"],
        dct["licensePlate"],
        dct.get("vin"),
        dct.get("color"),
        dct.get("notes"),
        dct.get("userId"),
        dct["id"],
        parse_datetime(dct.get("createdAt")),
    )


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": vehicle.id,
        "userId": vehicle.user_id,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "licensePlate": vehicle.license_plate,
    }
    if vehicle.vin is not None:
        d["vin"] = vehicle.vin
    if vehicle.color is not None:
        d["color"] = vehicle.color
    if vehicle.notes is not None:
        d["notes"] = vehicle.notes
    d["createdAt"] = _timestamp(vehicle.created_at)
    return d


def _reminder_from_dict(dct: Dict[str, Any]) -> Reminder:
    return Reminder(
        dct["vehicleId"],
        dct["type"],
        parse_date(dct["dueDate"]),
        dct.get("notes"),
        dct.get("isCompleted"),
        dct["id"],
        parse_datetime(dct.get("createdAt")),
    )


def _reminder_to_dict(reminder: Reminder) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": reminder.id,
        "vehicleId": reminder.vehicle_id,
        "type": reminder.type,
        "dueDate": parse_date(reminder.due_date).isoformat(),
    }
    if reminder.notes is not None:
        d["notes"] = reminder.notes
    d["isCompleted"] = reminder.is_completed
    d["createdAt"] = _timestamp(reminder.created_at)
    return d


def _reminder_type_from_dict(dct: Dict[str, Any]) -> ReminderType:
    return ReminderType(
        dct["name"],
        dct.get("icon"),
        dct.get("color"),
        dct.get("isDefault"),
        dct["id"],
        parse_datetime(dct.get("createdAt")),
    )


def _reminder_type_to_dict(reminder_type: ReminderType) -> Dict[str, Any]:
    return {
        "id": reminder_type.id,
        "name": reminder_type.name,
        "icon": reminder_type.icon,
        "color": reminder_type.color,
        "isDefault": reminder_type.is_default,
        "createdAt": _timestamp(reminder_type.created_at),
    }


def _user_from_dict(dct: Dict[str, Any]) -> User:
    return User(
        dct["username"],
        dct.get("email"),
        dct["id"],
        parse_datetime(dct.get("createdAt")),
    )


def _user_to_dict(user: User) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": user.id, "username": user.username}
    if user.email is not None:
        d["email"] = user.email
    d["createdAt"] = _timestamp(user.created_at)
    return d


def _share_from_dict(dct: Dict[str, Any]) -> VehicleShare:
    return VehicleShare(
        dct["vehicleId"],
        dct["userId"],
        dct["id"],
        parse_datetime(dct.get("sharedAt")),
    )


def _share_to_dict(share: VehicleShare) -> Dict[str, Any]:
    return {
        "id": share.id,
        "vehicleId": share.vehicle_id,
        "userId": share.user_id,
        "sharedAt": _timestamp(share.shared_at),
    }


# =============================================================================
# File access
# =============================================================================


def _read(filename: PathLike) -> Dict[str, Any]:
    """Load the raw YAML data, with every section present as a list."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    for section in SECTIONS:
        if data.get(section) is None:
            data[section] = []
    return data


def _write(filename: PathLike, data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def init_data_file(filename: PathLike) -> bool:
    """
    Create a data file seeded with the default reminder types.

    Does nothing if the file already exists. Returns True if it was created.
    """
    with _lock:
        path = Path(filename)
        if path.exists():
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        now = _now()
        types = default_reminder_types()
        for reminder_type in types:
            reminder_type.created_at = now
        data: Dict[str, Any] = {section: [] for section in SECTIONS}
        data["reminderTypes"] = [_reminder_type_to_dict(t) for t in types]
        _write(path, data)
        logger.info("Created data file %s", path)
        return True


# =============================================================================
# Reads
# =============================================================================


def load_vehicles(filename: PathLike) -> List[Vehicle]:
    with _lock:
        return [_vehicle_from_dict(d) for d in _read(filename)["vehicles"]]


def load_reminders(filename: PathLike) -> List[Reminder]:
    with _lock:
        return [_reminder_from_dict(d) for d in _read(filename)["reminders"]]


def load_reminder_types(filename: PathLike) -> List[ReminderType]:
    with _lock:
        return [_reminder_type_from_dict(d) for d in _read(filename)["reminderTypes"]]


def load_users(filename: PathLike) -> List[User]:
    with _lock:
        return [_user_from_dict(d) for d in _read(filename)["users"]]


def load_vehicle_shares(filename: PathLike) -> List[VehicleShare]:
    with _lock:
        return [_share_from_dict(d) for d in _read(filename)["vehicleShares"]]


def load_snapshot(filename: PathLike) -> Tuple[List[Vehicle], List[Reminder]]:
    """Load vehicles and reminders from a single read of the file."""
    with _lock:
        data = _read(filename)
    vehicles = [_vehicle_from_dict(d) for d in data["vehicles"]]
    reminders = [_reminder_from_dict(d) for d in data["reminders"]]
    return vehicles, reminders


def get_vehicle(filename: PathLike, vehicle_id: int) -> Optional[Vehicle]:
    for vehicle in load_vehicles(filename):
        if vehicle.id == vehicle_id:
            return vehicle
    return None


def get_reminder(filename: PathLike, reminder_id: int) -> Optional[Reminder]:
    for reminder in load_reminders(filename):
        if reminder.id == reminder_id:
            return reminder
    return None


def get_reminder_type(filename: PathLike, type_id: int) -> Optional[ReminderType]:
    for reminder_type in load_reminder_types(filename):
        if reminder_type.id == type_id:
            return reminder_type
    return None


def get_user(filename: PathLike, user_id: int) -> Optional[User]:
    for user in load_users(filename):
        if user.id == user_id:
            return user
    return None


def get_user_by_username(filename: PathLike, username: str) -> Optional[User]:
    for user in load_users(filename):
        if user.username == username:
            return user
    return None


def get_reminders_for_vehicle(filename: PathLike, vehicle_id: int) -> List[Reminder]:
    """Reminders for one vehicle, in storage order."""
    return [r for r in load_reminders(filename) if r.vehicle_id == vehicle_id]


def get_vehicles_for_user(filename: PathLike, user_id: int) -> List[Vehicle]:
    """Vehicles the user owns, public vehicles, and vehicles shared with them."""
    with _lock:
        vehicles = load_vehicles(filename)
        shared_ids = {
            s.vehicle_id for s in load_vehicle_shares(filename) if s.user_id == user_id
        }
    return [v for v in vehicles if v.is_owned_by(user_id) or v.id in shared_ids]


def get_shared_users(filename: PathLike, vehicle_id: int) -> List[User]:
    """Users a vehicle has been shared with, in share order."""
    with _lock:
        users = {u.id: u for u in load_users(filename)}
        shares = load_vehicle_shares(filename)
    return [
        users[s.user_id]
        for s in shares
        if s.vehicle_id == vehicle_id and s.user_id in users
    ]


def user_has_access_to_vehicle(filename: PathLike, user_id: int, vehicle_id: int) -> bool:
    return any(v.id == vehicle_id for v in get_vehicles_for_user(filename, user_id))


# =============================================================================
# Vehicles
# =============================================================================


def create_vehicle(filename: PathLike, vehicle: Vehicle) -> Vehicle:
    """Append a vehicle, assigning its id and creation time."""
    with _lock:
        data = _read(filename)
        vehicle.id = _next_id(data["vehicles"])
        vehicle.created_at = _now()
        data["vehicles"].append(_vehicle_to_dict(vehicle))
        _write(filename, data)
    logger.info("Created vehicle %d (%s)", vehicle.id, vehicle.name)
    return vehicle


def update_vehicle(filename: PathLike, vehicle_id: int, vehicle: Vehicle) -> Vehicle:
    """
    Replace a vehicle's descriptive fields.

    Id, owner and creation time are kept from the stored record.
    """
    with _lock:
        data = _read(filename)
        index = _find_index(data["vehicles"], vehicle_id)
        if index is None:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        existing = _vehicle_from_dict(data["vehicles"][index])
        vehicle.id = existing.id
        vehicle.user_id = existing.user_id
        vehicle.created_at = existing.created_at
        data["vehicles"][index] = _vehicle_to_dict(vehicle)
        _write(filename, data)
    return vehicle


def delete_vehicle(filename: PathLike, vehicle_id: int) -> None:
    """Remove a vehicle along with its reminders and shares."""
    with _lock:
        data = _read(filename)
        index = _find_index(data["vehicles"], vehicle_id)
        if index is None:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        del data["vehicles"][index]
        reminders = [r for r in data["reminders"] if r["vehicleId"] != vehicle_id]
        removed = len(data["reminders"]) - len(reminders)
        data["reminders"] = reminders
        data["vehicleShares"] = [
            s for s in data["vehicleShares"] if s["vehicleId"] != vehicle_id
        ]
        _write(filename, data)
    logger.info("Deleted vehicle %d and %d reminder(s)", vehicle_id, removed)


# =============================================================================
# Reminders
# =============================================================================


def create_reminder(filename: PathLike, reminder: Reminder) -> Reminder:
    """
    Append a reminder for an existing vehicle.

    The type is matched case-insensitively against the known reminder
    types and stored under its canonical name. New reminders start
    not completed.
    """
    with _lock:
        data = _read(filename)
        if _find_index(data["vehicles"], reminder.vehicle_id) is None:
            raise NotFoundError("Vehicle not found")
        types = [_reminder_type_from_dict(d) for d in data["reminderTypes"]]
        reminder.type = resolve_reminder_type(types, reminder.type).name
        reminder.id = _next_id(data["reminders"])
        reminder.is_completed = False
        reminder.created_at = _now()
        data["reminders"].append(_reminder_to_dict(reminder))
        _write(filename, data)
    logger.info(
        "Created reminder %d (%s) for vehicle %d", reminder.id, reminder.type, reminder.vehicle_id
    )
    return reminder


def update_reminder(
    filename: PathLike,
    reminder_id: int,
    due_date: date,
    notes: Optional[str] = None,
    is_completed: bool = False,
) -> Reminder:
    """Replace a reminder's due date, notes and completed flag."""
    with _lock:
        data = _read(filename)
        index = _find_index(data["reminders"], reminder_id)
        if index is None:
            raise NotFoundError(f"Reminder {reminder_id} not found")
        reminder = _reminder_from_dict(data["reminders"][index])
        reminder.due_date = parse_date(due_date)
        reminder.notes = notes
        reminder.is_completed = bool(is_completed)
        data["reminders"][index] = _reminder_to_dict(reminder)
        _write(filename, data)
    return reminder


def complete_reminder(filename: PathLike, reminder_id: int) -> Reminder:
    """Mark a reminder completed, keeping its due date and notes."""
    with _lock:
        existing = get_reminder(filename, reminder_id)
        if existing is None:
            raise NotFoundError(f"Reminder {reminder_id} not found")
        return update_reminder(
            filename, reminder_id, existing.due_date, existing.notes, is_completed=True
        )


def delete_reminder(filename: PathLike, reminder_id: int) -> None:
    with _lock:
        data = _read(filename)
        index = _find_index(data["reminders"], reminder_id)
        if index is None:
            raise NotFoundError(f"Reminder {reminder_id} not found")
        del data["reminders"][index]
        _write(filename, data)


# =============================================================================
# Reminder types
# =============================================================================


def create_reminder_type(filename: PathLike, reminder_type: ReminderType) -> ReminderType:
    if not (reminder_type.name or "").strip():
        raise ValueError("Name is required")
    with _lock:
        data = _read(filename)
        reminder_type.id = _next_id(data["reminderTypes"])
        reminder_type.is_default = False
        reminder_type.created_at = _now()
        data["reminderTypes"].append(_reminder_type_to_dict(reminder_type))
        _write(filename, data)
    return reminder_type


def update_reminder_type(
    filename: PathLike, type_id: int, reminder_type: ReminderType
) -> ReminderType:
    """Replace name, icon and color. The default flag can't be changed."""
    if not (reminder_type.name or "").strip():
        raise ValueError("Name is required")
    with _lock:
        data = _read(filename)
        index = _find_index(data["reminderTypes"], type_id)
        if index is None:
            raise NotFoundError(f"Reminder type {type_id} not found")
        existing = _reminder_type_from_dict(data["reminderTypes"][index])
        reminder_type.id = existing.id
        reminder_type.is_default = existing.is_default
        reminder_type.created_at = existing.created_at
        data["reminderTypes"][index] = _reminder_type_to_dict(reminder_type)
        _write(filename, data)
    return reminder_type


def delete_reminder_type(filename: PathLike, type_id: int) -> None:
    with _lock:
        data = _read(filename)
        index = _find_index(data["reminderTypes"], type_id)
        if index is None:
            raise NotFoundError(f"Reminder type {type_id} not found")
        if data["reminderTypes"][index].get("isDefault"):
            raise ValueError("Cannot delete default reminder types")
        del data["reminderTypes"][index]
        _write(filename, data)


# =============================================================================
# Users and shares
# =============================================================================


def create_user(filename: PathLike, user: User) -> User:
    if not (user.username or "").strip():
        raise ValueError("Username is required")
    with _lock:
        data = _read(filename)
        if any(u["username"] == user.username for u in data["users"]):
            raise ValueError(f"Username '{user.username}' already exists")
        user.id = _next_id(data["users"])
        user.created_at = _now()
        data["users"].append(_user_to_dict(user))
        _write(filename, data)
    return user


def update_user_email(filename: PathLike, user_id: int, email: Optional[str]) -> User:
    """Set or clear the address reminder digests are sent to."""
    with _lock:
        data = _read(filename)
        index = _find_index(data["users"], user_id)
        if index is None:
            raise NotFoundError("User not found")
        user = _user_from_dict(data["users"][index])
        user.email = (email or "").strip() or None
        data["users"][index] = _user_to_dict(user)
        _write(filename, data)
    return user


def share_vehicle(filename: PathLike, vehicle_id: int, user_id: int) -> VehicleShare:
    """Give a user access to a vehicle. Sharing twice returns the existing grant."""
    with _lock:
        data = _read(filename)
        vehicle_index = _find_index(data["vehicles"], vehicle_id)
        if vehicle_index is None:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        if _find_index(data["users"], user_id) is None:
            raise NotFoundError("User not found")
        if data["vehicles"][vehicle_index].get("userId") == user_id:
            raise ValueError("Cannot share a vehicle with its owner")
        for existing in data["vehicleShares"]:
            if existing["vehicleId"] == vehicle_id and existing["userId"] == user_id:
                return _share_from_dict(existing)
        share = VehicleShare(
            vehicle_id, user_id, _next_id(data["vehicleShares"]), _now()
        )
        data["vehicleShares"].append(_share_to_dict(share))
        _write(filename, data)
    return share


def unshare_vehicle(filename: PathLike, vehicle_id: int, user_id: int) -> bool:
    """Revoke a share. Returns False if there was nothing to revoke."""
    with _lock:
        data = _read(filename)
        shares = [
            s
            for s in data["vehicleShares"]
            if not (s["vehicleId"] == vehicle_id and s["userId"] == user_id)
        ]
        if len(shares) == len(data["vehicleShares"]):
            return False
        data["vehicleShares"] = shares
        _write(filename, data)
    return True
