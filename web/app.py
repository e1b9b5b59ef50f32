"""Flask JSON API for vehicle reminder tracking."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

import config
from models import (
    Reminder,
    ReminderType,
    User,
    Vehicle,
    build_dashboard,
    build_reminder_views,
    build_reminder_views_for_vehicle,
    init_data_file,
    utc_today,
)
from models import loader
from models.loader import NotFoundError
from models.reminder_view import to_view

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = config.SECRET_KEY
app.config["DATA_FILE"] = config.DATA_FILE
# Pin "today" (a date) for every request; None means the current UTC date
app.config["TODAY"] = None


def get_data_file():
    """Data file for this app, created with default reminder types if missing."""
    data_file = app.config["DATA_FILE"]
    init_data_file(data_file)
    return data_file


def get_today() -> date:
    """The date statuses are calculated against, read once per request."""
    return app.config["TODAY"] or utc_today()


def error(message: str, status: int):
    return jsonify({"message": message}), status


def user_to_dict(user: User) -> Dict[str, Any]:
    return {"id": user.id, "username": user.username, "email": user.email}


def shared_user_to_dict(user: User) -> Dict[str, Any]:
    return {"userId": user.id, "username": user.username}


def vehicle_to_dict(
    vehicle: Vehicle,
    owner_name: Optional[str] = None,
    shared_with: Optional[List[User]] = None,
) -> Dict[str, Any]:
    """Serialize a Vehicle for the API (camelCase keys)."""
    return {
        "id": vehicle.id,
        "userId": vehicle.user_id,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "licensePlate": vehicle.license_plate,
        "vin": vehicle.vin,
        "color": vehicle.color,
        "notes": vehicle.notes,
        "isPublic": vehicle.is_public,
        "ownerName": owner_name,
        "sharedWith": [shared_user_to_dict(u) for u in shared_with or []],
    }


def vehicles_json(data_file, vehicles: List[Vehicle]) -> List[Dict[str, Any]]:
    """Serialize vehicles with their owner's name and the users they're shared with."""
    users = {u.id: u for u in loader.load_users(data_file)}
    shares = loader.load_vehicle_shares(data_file)
    result = []
    for vehicle in vehicles:
        if vehicle.is_public:
            owner_name = None
        else:
            owner = users.get(vehicle.user_id)
            owner_name = owner.username if owner else "Unknown"
        shared_with = [
            users[s.user_id]
            for s in shares
            if s.vehicle_id == vehicle.id and s.user_id in users
        ]
        result.append(vehicle_to_dict(vehicle, owner_name, shared_with))
    return result


def get_visible_vehicle(data_file, vehicle_id: int) -> Optional[Vehicle]:
    """
    Look up a vehicle, honouring ?userId= when given.

    Vehicles the user can't see are treated as missing.
    """
    vehicle = loader.get_vehicle(data_file, vehicle_id)
    user_id = request.args.get("userId", type=int)
    if vehicle is None or user_id is None:
        return vehicle
    if not loader.user_has_access_to_vehicle(data_file, user_id, vehicle_id):
        return None
    return vehicle


def completed_from_json(body: Dict[str, Any]) -> bool:
    """Read isCompleted, which must be a JSON boolean when present."""
    value = body.get("isCompleted")
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError("isCompleted must be true or false")
    return value


def reminder_type_to_dict(reminder_type: ReminderType) -> Dict[str, Any]:
    return {
        "id": reminder_type.id,
        "name": reminder_type.name,
        "icon": reminder_type.icon,
        "color": reminder_type.color,
        "isDefault": reminder_type.is_default,
    }


def vehicle_from_json(body: Dict[str, Any]) -> Vehicle:
    """Build a Vehicle from a request body. Raises ValueError on bad input."""
    missing = [k for k in ("make", "model", "year", "licensePlate") if not body.get(k)]
    if missing:
        raise ValueError(f"Missing required field(s): {', '.join(missing)}")
    try:
        year = int(body["year"])
    except (TypeError, ValueError):
        raise ValueError("Year must be a number")
    return Vehicle(
        make=body["make"],
        model=body["model"],
        year=year,
        license_plate=body["licensePlate"],
        vin=body.get("vin"),
        color=body.get("color"),
        notes=body.get("notes"),
        user_id=body.get("userId") or 0,
    )


def due_date_from_json(body: Dict[str, Any]) -> date:
    """Parse the dueDate field (ISO date or timestamp). Raises ValueError."""
    if not body.get("dueDate"):
        raise ValueError("dueDate is required")
    try:
        return loader.parse_date(body["dueDate"])
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Invalid dueDate: {body['dueDate']}")


def reminder_view_json(data_file, reminder: Reminder):
    """Serialize one reminder joined with its (possibly missing) vehicle."""
    vehicle = loader.get_vehicle(data_file, reminder.vehicle_id)
    return to_view(reminder, vehicle, get_today()).to_dict()


@app.errorhandler(NotFoundError)
def handle_not_found(e):
    return error(str(e), 404)


@app.errorhandler(ValueError)
def handle_bad_request(e):
    return error(str(e), 400)


# =============================================================================
# Dashboard
# =============================================================================


@app.route("/api/dashboard")
def dashboard():
    """Summary stats with overdue and upcoming reminders."""
    vehicles, reminders = loader.load_snapshot(get_data_file())
    return jsonify(build_dashboard(reminders, vehicles, get_today()).to_dict())


# =============================================================================
# Reminders
# =============================================================================


@app.route("/api/reminders", methods=["GET"])
def list_reminders():
    vehicles, reminders = loader.load_snapshot(get_data_file())
    views = build_reminder_views(reminders, vehicles, get_today())
    return jsonify([v.to_dict() for v in views])


@app.route("/api/reminders/<int:reminder_id>", methods=["GET"])
def get_reminder(reminder_id: int):
    data_file = get_data_file()
    reminder = loader.get_reminder(data_file, reminder_id)
    if reminder is None:
        return error(f"Reminder {reminder_id} not found", 404)
    return jsonify(reminder_view_json(data_file, reminder))


@app.route("/api/reminders", methods=["POST"])
def create_reminder():
    """Create a reminder. Unknown vehicles and reminder types are a 400."""
    data_file = get_data_file()
    body = request.get_json(silent=True) or {}

    vehicle_id = body.get("vehicleId")
    if vehicle_id is None or loader.get_vehicle(data_file, vehicle_id) is None:
        return error("Vehicle not found", 400)

    reminder = Reminder(
        vehicle_id=vehicle_id,
        type=body.get("type") or "",
        due_date=due_date_from_json(body),
        notes=body.get("notes"),
    )
    created = loader.create_reminder(data_file, reminder)
    return jsonify(reminder_view_json(data_file, created)), 201


@app.route("/api/reminders/<int:reminder_id>", methods=["PUT"])
def update_reminder(reminder_id: int):
    data_file = get_data_file()
    body = request.get_json(silent=True) or {}
    if loader.get_reminder(data_file, reminder_id) is None:
        return error(f"Reminder {reminder_id} not found", 404)

    updated = loader.update_reminder(
        data_file,
        reminder_id,
        due_date_from_json(body),
        body.get("notes"),
        completed_from_json(body),
    )
    return jsonify(reminder_view_json(data_file, updated))


@app.route("/api/reminders/<int:reminder_id>/complete", methods=["PATCH"])
def complete_reminder(reminder_id: int):
    data_file = get_data_file()
    completed = loader.complete_reminder(data_file, reminder_id)
    return jsonify(reminder_view_json(data_file, completed))


@app.route("/api/reminders/<int:reminder_id>", methods=["DELETE"])
def delete_reminder(reminder_id: int):
    loader.delete_reminder(get_data_file(), reminder_id)
    return "", 204


# =============================================================================
# Vehicles
# =============================================================================


@app.route("/api/vehicles", methods=["GET"])
def list_vehicles():
    """All vehicles, or only those visible to ?userId= when given."""
    data_file = get_data_file()
    user_id = request.args.get("userId", type=int)
    if user_id is None:
        vehicles = loader.load_vehicles(data_file)
    else:
        vehicles = loader.get_vehicles_for_user(data_file, user_id)
    return jsonify(vehicles_json(data_file, vehicles))


@app.route("/api/vehicles/<int:vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id: int):
    data_file = get_data_file()
    vehicle = get_visible_vehicle(data_file, vehicle_id)
    if vehicle is None:
        return error(f"Vehicle {vehicle_id} not found", 404)
    return jsonify(vehicles_json(data_file, [vehicle])[0])


@app.route("/api/vehicles", methods=["POST"])
def create_vehicle():
    data_file = get_data_file()
    vehicle = vehicle_from_json(request.get_json(silent=True) or {})
    created = loader.create_vehicle(data_file, vehicle)
    return jsonify(vehicles_json(data_file, [created])[0]), 201


@app.route("/api/vehicles/<int:vehicle_id>", methods=["PUT"])
def update_vehicle(vehicle_id: int):
    data_file = get_data_file()
    if get_visible_vehicle(data_file, vehicle_id) is None:
        return error(f"Vehicle {vehicle_id} not found", 404)
    vehicle = vehicle_from_json(request.get_json(silent=True) or {})
    updated = loader.update_vehicle(data_file, vehicle_id, vehicle)
    return jsonify(vehicles_json(data_file, [updated])[0])


@app.route("/api/vehicles/<int:vehicle_id>", methods=["DELETE"])
def delete_vehicle(vehicle_id: int):
    """Delete a vehicle along with its reminders and shares."""
    data_file = get_data_file()
    if get_visible_vehicle(data_file, vehicle_id) is None:
        return error(f"Vehicle {vehicle_id} not found", 404)
    loader.delete_vehicle(data_file, vehicle_id)
    return "", 204


@app.route("/api/vehicles/<int:vehicle_id>/reminders")
def vehicle_reminders(vehicle_id: int):
    """Reminder views for one vehicle, in storage order."""
    data_file = get_data_file()
    vehicle = get_visible_vehicle(data_file, vehicle_id)
    if vehicle is None:
        return error(f"Vehicle {vehicle_id} not found", 404)
    reminders = loader.get_reminders_for_vehicle(data_file, vehicle_id)
    views = build_reminder_views_for_vehicle(vehicle_id, reminders, vehicle, get_today())
    return jsonify([v.to_dict() for v in views])


@app.route("/api/vehicles/<int:vehicle_id>/share", methods=["POST"])
def share_vehicle(vehicle_id: int):
    """Share a vehicle with {"username": ...}. Unknown users are a 400."""
    data_file = get_data_file()
    if loader.get_vehicle(data_file, vehicle_id) is None:
        return error(f"Vehicle {vehicle_id} not found", 404)
    body = request.get_json(silent=True) or {}
    user = loader.get_user_by_username(data_file, body.get("username") or "")
    if user is None:
        return error("User not found", 400)
    loader.share_vehicle(data_file, vehicle_id, user.id)
    return jsonify(shared_user_to_dict(user))


@app.route("/api/vehicles/<int:vehicle_id>/share/<int:user_id>", methods=["DELETE"])
def unshare_vehicle(vehicle_id: int, user_id: int):
    data_file = get_data_file()
    if loader.get_vehicle(data_file, vehicle_id) is None:
        return error(f"Vehicle {vehicle_id} not found", 404)
    loader.unshare_vehicle(data_file, vehicle_id, user_id)
    return "", 204


# =============================================================================
# Users
# =============================================================================


@app.route("/api/users", methods=["GET"])
def list_users():
    return jsonify([user_to_dict(u) for u in loader.load_users(get_data_file())])


@app.route("/api/users", methods=["POST"])
def create_user():
    body = request.get_json(silent=True) or {}
    user = User(body.get("username") or "", body.get("email") or None)
    created = loader.create_user(get_data_file(), user)
    return jsonify(user_to_dict(created)), 201


@app.route("/api/users/<int:user_id>/settings", methods=["GET"])
def get_user_settings(user_id: int):
    user = loader.get_user(get_data_file(), user_id)
    if user is None:
        return error("User not found", 404)
    return jsonify({"email": user.email})


@app.route("/api/users/<int:user_id>/settings", methods=["PUT"])
def update_user_settings(user_id: int):
    """Set or clear the digest email address."""
    body = request.get_json(silent=True) or {}
    updated = loader.update_user_email(get_data_file(), user_id, body.get("email"))
    return jsonify({"email": updated.email})


# =============================================================================
# Reminder types
# =============================================================================


@app.route("/api/reminder-types", methods=["GET"])
def list_reminder_types():
    types = loader.load_reminder_types(get_data_file())
    return jsonify([reminder_type_to_dict(t) for t in types])


@app.route("/api/reminder-types/<int:type_id>", methods=["GET"])
def get_reminder_type(type_id: int):
    reminder_type = loader.get_reminder_type(get_data_file(), type_id)
    if reminder_type is None:
        return error(f"Reminder type {type_id} not found", 404)
    return jsonify(reminder_type_to_dict(reminder_type))


@app.route("/api/reminder-types", methods=["POST"])
def create_reminder_type():
    body = request.get_json(silent=True) or {}
    reminder_type = ReminderType(body.get("name") or "", body.get("icon"), body.get("color"))
    created = loader.create_reminder_type(get_data_file(), reminder_type)
    return jsonify(reminder_type_to_dict(created)), 201


@app.route("/api/reminder-types/<int:type_id>", methods=["PUT"])
def update_reminder_type(type_id: int):
    body = request.get_json(silent=True) or {}
    reminder_type = ReminderType(body.get("name") or "", body.get("icon"), body.get("color"))
    updated = loader.update_reminder_type(get_data_file(), type_id, reminder_type)
    return jsonify(reminder_type_to_dict(updated))


@app.route("/api/reminder-types/<int:type_id>", methods=["DELETE"])
def delete_reminder_type(type_id: int):
    """Delete a custom reminder type. Default types are a 400."""
    loader.delete_reminder_type(get_data_file(), type_id)
    return "", 204


if __name__ == "__main__":
    from logging_config import setup_logging

    setup_logging()
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
