#!/usr/bin/env python3
"""
Unified CLI for vehicle reminder tracking.

Commands:
  dashboard       - Show overdue and upcoming reminders
  reminders       - List reminders with their status
  vehicles        - List vehicles
  add-vehicle     - Add a vehicle
  delete-vehicle  - Delete a vehicle and its reminders
  add-reminder    - Add a reminder to a vehicle
  complete        - Mark a reminder completed
  delete-reminder - Delete a reminder
  types           - List reminder types
  add-type        - Add a custom reminder type
  add-user        - Add a user (digest email recipient)
  users           - List users
  set-email       - Set or clear a user's digest email
  share           - Share a vehicle with a user
  unshare         - Stop sharing a vehicle with a user
  notify          - Send the daily reminder digest
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from logging_config import setup_logging
from models import (
    Reminder,
    ReminderType,
    ReminderView,
    User,
    Vehicle,
    build_dashboard,
    build_reminder_views,
    build_reminder_views_for_vehicle,
    init_data_file,
    load_reminder_types,
    load_snapshot,
    load_users,
    load_vehicles,
    utc_today,
)
from models import loader
from models.loader import NotFoundError
from notifier import (
    build_email_subject,
    select_due_soon,
    send_daily_reminder_emails,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_days(days: Optional[int]) -> str:
    """Format days until due for display (e.g., '3mo 15d' or '-2mo 5d')."""
    if days is None:
        return "-"

    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def make_reminder_table(views: List[ReminderView]) -> List[List[str]]:
    """Convert reminder views to table rows."""
    rows = []
    for view in views:
        rows.append(
            [
                str(view.id),
                view.vehicle_name,
                view.type,
                view.due_date.isoformat(),
                format_days(view.days_until_due),
                view.status.value.upper(),
                truncate(view.notes),
            ]
        )
    return rows


def make_vehicle_table(vehicles: List[Vehicle], users: List[User]) -> List[List[str]]:
    """Convert vehicles to table rows, resolving owner names."""
    usernames = {u.id: u.username for u in users}
    rows = []
    for vehicle in vehicles:
        owner = "(public)" if vehicle.is_public else usernames.get(vehicle.user_id, "Unknown")
        rows.append(
            [
                str(vehicle.id),
                vehicle.name,
                str(vehicle.year),
                vehicle.vin or "-",
                vehicle.color or "-",
                owner,
                truncate(vehicle.notes),
            ]
        )
    return rows


REMINDER_HEADERS = ["Id", "Vehicle", "Type", "Due", "Remaining", "Status", "Notes"]


def _find_user(data_file: Path, username: str) -> Optional[User]:
    return loader.get_user_by_username(data_file, username)


# =============================================================================
# Read commands
# =============================================================================


def cmd_dashboard(args):
    """Show overdue and upcoming reminders."""
    vehicles, reminders = load_snapshot(args.data_file)
    summary = build_dashboard(reminders, vehicles, args.today)
    stats = summary.stats

    print(f"Today: {args.today.isoformat()}")
    print(f"Vehicles: {stats.total_vehicles}")
    print(f"Overdue: {stats.overdue_reminders}")
    print(f"Upcoming this month: {stats.upcoming_this_month}")
    print(f"Completed: {stats.completed_this_year}")
    print()

    if summary.overdue_reminders:
        print("OVERDUE:")
        print(
            tabulate(
                make_reminder_table(summary.overdue_reminders),
                headers=REMINDER_HEADERS,
                tablefmt="simple",
            )
        )
        print()

    if summary.upcoming_reminders:
        print("UPCOMING THIS MONTH:")
        print(
            tabulate(
                make_reminder_table(summary.upcoming_reminders),
                headers=REMINDER_HEADERS,
                tablefmt="simple",
            )
        )
        print()

    if not summary.overdue_reminders and not summary.upcoming_reminders:
        print("Nothing due this month.")

    return 0


def cmd_reminders(args):
    """List reminders with their status."""
    vehicles, reminders = load_snapshot(args.data_file)

    if args.vehicle is not None:
        vehicle = next((v for v in vehicles if v.id == args.vehicle), None)
        if vehicle is None:
            print(f"Error: Vehicle {args.vehicle} not found")
            return 1
        views = build_reminder_views_for_vehicle(args.vehicle, reminders, vehicle, args.today)
    else:
        views = build_reminder_views(reminders, vehicles, args.today)

    if args.status:
        views = [v for v in views if v.status.value == args.status]

    if not views:
        print("No reminders found.")
        return 0

    print(tabulate(make_reminder_table(views), headers=REMINDER_HEADERS, tablefmt="simple"))
    return 0


def cmd_vehicles(args):
    """List vehicles, optionally only those visible to one user."""
    users = load_users(args.data_file)

    if args.user:
        user = _find_user(args.data_file, args.user)
        if user is None:
            print(f"Error: Unknown user '{args.user}'")
            return 1
        vehicles = loader.get_vehicles_for_user(args.data_file, user.id)
    else:
        vehicles = load_vehicles(args.data_file)

    if not vehicles:
        print("No vehicles found.")
        return 0

    headers = ["Id", "Vehicle", "Year", "VIN", "Color", "Owner", "Notes"]
    print(tabulate(make_vehicle_table(vehicles, users), headers=headers, tablefmt="simple"))
    return 0


def cmd_users(args):
    """List users and their digest email addresses."""
    users = load_users(args.data_file)
    if not users:
        print("No users found.")
        return 0
    rows = [[str(u.id), u.username, u.email or "-"] for u in users]
    print(tabulate(rows, headers=["Id", "Username", "Email"], tablefmt="simple"))
    return 0


def cmd_types(args):
    """List reminder types."""
    rows = [
        [str(t.id), t.name, t.icon, t.color, "yes" if t.is_default else ""]
        for t in load_reminder_types(args.data_file)
    ]
    print(tabulate(rows, headers=["Id", "Name", "Icon", "Color", "Default"], tablefmt="simple"))
    return 0


# =============================================================================
# Write commands
# =============================================================================


def cmd_add_vehicle(args):
    """Add a vehicle."""
    owner_id = 0
    if args.owner:
        owner = _find_user(args.data_file, args.owner)
        if owner is None:
            print(f"Error: Unknown user '{args.owner}'")
            return 1
        owner_id = owner.id

    vehicle = Vehicle(
        make=args.make,
        model=args.model,
        year=args.year,
        license_plate=args.license_plate,
        vin=args.vin,
        color=args.color,
        notes=args.notes,
        user_id=owner_id,
    )

    print(f"Adding vehicle to {args.data_file}:")
    print(f"  Vehicle: {vehicle.name}")
    print(f"  Year:    {vehicle.year}")
    if vehicle.vin:
        print(f"  VIN:     {vehicle.vin}")
    if args.owner:
        print(f"  Owner:   {args.owner}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    created = loader.create_vehicle(args.data_file, vehicle)
    print(f"Vehicle saved with id {created.id}.")
    return 0


def cmd_delete_vehicle(args):
    """Delete a vehicle and its reminders."""
    loader.delete_vehicle(args.data_file, args.vehicle_id)
    print(f"Vehicle {args.vehicle_id} deleted.")
    return 0


def cmd_add_reminder(args):
    """Add a reminder to a vehicle."""
    reminder = Reminder(
        vehicle_id=args.vehicle_id,
        type=args.type,
        due_date=args.due_date,
        notes=args.notes,
    )

    print(f"Adding reminder to {args.data_file}:")
    print(f"  Vehicle: {args.vehicle_id}")
    print(f"  Type:    {args.type}")
    print(f"  Due:     {args.due_date.isoformat()}")
    if args.notes:
        print(f"  Notes:   {args.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    created = loader.create_reminder(args.data_file, reminder)
    print(f"Reminder saved with id {created.id} ({created.type}).")
    return 0


def cmd_complete(args):
    """Mark a reminder completed."""
    reminder = loader.complete_reminder(args.data_file, args.reminder_id)
    print(f"Reminder {reminder.id} ({reminder.type}) marked completed.")
    return 0


def cmd_delete_reminder(args):
    """Delete a reminder."""
    loader.delete_reminder(args.data_file, args.reminder_id)
    print(f"Reminder {args.reminder_id} deleted.")
    return 0


def cmd_add_type(args):
    """Add a custom reminder type."""
    created = loader.create_reminder_type(
        args.data_file, ReminderType(args.name, args.icon, args.color)
    )
    print(f"Reminder type '{created.name}' saved with id {created.id}.")
    return 0


def cmd_add_user(args):
    """Add a user."""
    created = loader.create_user(args.data_file, User(args.username, args.email))
    print(f"User '{created.username}' saved with id {created.id}.")
    return 0


def cmd_share(args):
    """Share a vehicle with a user."""
    user = _find_user(args.data_file, args.username)
    if user is None:
        print(f"Error: Unknown user '{args.username}'")
        return 1
    loader.share_vehicle(args.data_file, args.vehicle_id, user.id)
    print(f"Vehicle {args.vehicle_id} shared with {user.username}.")
    return 0


def cmd_unshare(args):
    """Stop sharing a vehicle with a user."""
    user = _find_user(args.data_file, args.username)
    if user is None:
        print(f"Error: Unknown user '{args.username}'")
        return 1
    if loader.get_vehicle(args.data_file, args.vehicle_id) is None:
        print(f"Error: Vehicle {args.vehicle_id} not found")
        return 1
    if not loader.unshare_vehicle(args.data_file, args.vehicle_id, user.id):
        print(f"Vehicle {args.vehicle_id} was not shared with {user.username}.")
        return 0
    print(f"Vehicle {args.vehicle_id} no longer shared with {user.username}.")
    return 0


def cmd_set_email(args):
    """Set or clear a user's digest email address."""
    user = _find_user(args.data_file, args.username)
    if user is None:
        print(f"Error: Unknown user '{args.username}'")
        return 1
    updated = loader.update_user_email(args.data_file, user.id, args.email)
    print(f"Email for {updated.username}: {updated.email or '-'}")
    return 0


def cmd_notify(args):
    """Send the daily reminder digest."""
    if args.dry_run:
        vehicles, reminders = load_snapshot(args.data_file)
        due = select_due_soon(build_reminder_views(reminders, vehicles, args.today))
        recipients = [u.email for u in load_users(args.data_file) if u.email]
        print(f"Recipients: {', '.join(recipients) or '-'}")
        print(f"Subject:    {build_email_subject(due)}")
        print()
        if due:
            print(tabulate(make_reminder_table(due), headers=REMINDER_HEADERS, tablefmt="simple"))
            print()
        print("(dry run - no emails sent)")
        return 0

    sent = send_daily_reminder_emails(args.data_file, args.today)
    print(f"Emails sent: {sent}")
    return 0


# =============================================================================
# Main
# =============================================================================

COMMANDS = {
    "dashboard": cmd_dashboard,
    "reminders": cmd_reminders,
    "vehicles": cmd_vehicles,
    "types": cmd_types,
    "add-vehicle": cmd_add_vehicle,
    "delete-vehicle": cmd_delete_vehicle,
    "add-reminder": cmd_add_reminder,
    "complete": cmd_complete,
    "delete-reminder": cmd_delete_reminder,
    "add-type": cmd_add_type,
    "add-user": cmd_add_user,
    "users": cmd_users,
    "share": cmd_share,
    "unshare": cmd_unshare,
    "set-email": cmd_set_email,
    "notify": cmd_notify,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle reminder tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/carmonitor.yaml dashboard
  %(prog)s data/carmonitor.yaml reminders --vehicle 1
  %(prog)s data/carmonitor.yaml add-vehicle Volvo XC60 2021 "ABC 123"
  %(prog)s data/carmonitor.yaml add-reminder 1 insurance 2025-06-30 \\
      --notes "Annual renewal"
  %(prog)s data/carmonitor.yaml complete 3
  %(prog)s data/carmonitor.yaml notify --dry-run
""",
    )
    parser.add_argument(
        "data_file",
        type=Path,
        help="Path to CarMonitor YAML data file (created if missing)",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Date to calculate status against in YYYY-MM-DD format (default: today, UTC)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("dashboard", help="Show overdue and upcoming reminders")

    reminders_parser = subparsers.add_parser("reminders", help="List reminders")
    reminders_parser.add_argument(
        "--vehicle",
        type=int,
        help="Only show reminders for this vehicle id",
    )
    reminders_parser.add_argument(
        "--status",
        choices=["overdue", "urgent", "warning", "ok", "completed"],
        help="Only show reminders with this status",
    )

    vehicles_parser = subparsers.add_parser("vehicles", help="List vehicles")
    vehicles_parser.add_argument(
        "--user",
        type=str,
        help="Only show vehicles visible to this user",
    )

    subparsers.add_parser("types", help="List reminder types")

    add_vehicle_parser = subparsers.add_parser("add-vehicle", help="Add a vehicle")
    add_vehicle_parser.add_argument("make", type=str)
    add_vehicle_parser.add_argument("model", type=str)
    add_vehicle_parser.add_argument("year", type=int)
    add_vehicle_parser.add_argument("license_plate", type=str)
    add_vehicle_parser.add_argument("--vin", type=str)
    add_vehicle_parser.add_argument("--color", type=str)
    add_vehicle_parser.add_argument("--notes", type=str)
    add_vehicle_parser.add_argument(
        "--owner",
        type=str,
        help="Owning username (default: public, visible to everyone)",
    )
    add_vehicle_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    delete_vehicle_parser = subparsers.add_parser(
        "delete-vehicle", help="Delete a vehicle and its reminders"
    )
    delete_vehicle_parser.add_argument("vehicle_id", type=int)

    add_reminder_parser = subparsers.add_parser("add-reminder", help="Add a reminder")
    add_reminder_parser.add_argument("vehicle_id", type=int)
    add_reminder_parser.add_argument(
        "type",
        type=str,
        help="Reminder type name, case-insensitive (e.g., 'insurance')",
    )
    add_reminder_parser.add_argument(
        "due_date",
        type=date.fromisoformat,
        help="Due date in YYYY-MM-DD format",
    )
    add_reminder_parser.add_argument("--notes", type=str)
    add_reminder_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    complete_parser = subparsers.add_parser("complete", help="Mark a reminder completed")
    complete_parser.add_argument("reminder_id", type=int)

    delete_reminder_parser = subparsers.add_parser("delete-reminder", help="Delete a reminder")
    delete_reminder_parser.add_argument("reminder_id", type=int)

    add_type_parser = subparsers.add_parser("add-type", help="Add a reminder type")
    add_type_parser.add_argument("name", type=str)
    add_type_parser.add_argument("--icon", type=str)
    add_type_parser.add_argument("--color", type=str, help="Hex color (e.g., '#6366f1')")

    add_user_parser = subparsers.add_parser("add-user", help="Add a user")
    add_user_parser.add_argument("username", type=str)
    add_user_parser.add_argument("--email", type=str, help="Address for reminder digests")

    share_parser = subparsers.add_parser("share", help="Share a vehicle with a user")
    share_parser.add_argument("vehicle_id", type=int)
    share_parser.add_argument("username", type=str)

    unshare_parser = subparsers.add_parser("unshare", help="Stop sharing a vehicle with a user")
    unshare_parser.add_argument("vehicle_id", type=int)
    unshare_parser.add_argument("username", type=str)

    subparsers.add_parser("users", help="List users")

    set_email_parser = subparsers.add_parser("set-email", help="Set a user's digest email")
    set_email_parser.add_argument("username", type=str)
    set_email_parser.add_argument(
        "email",
        type=str,
        nargs="?",
        help="Address for reminder digests (omit to clear)",
    )

    notify_parser = subparsers.add_parser("notify", help="Send the daily reminder digest")
    notify_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be sent without emailing",
    )

    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    setup_logging("WARNING")

    if args.today is None:
        args.today = utc_today()

    init_data_file(args.data_file)

    try:
        return COMMANDS[args.command](args)
    except (NotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
