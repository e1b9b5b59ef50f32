"""Helper functions for reminder status calculations."""

from datetime import date, datetime, timezone
from typing import Union

from dateutil.relativedelta import relativedelta

from .status import Status

URGENT_DAYS = 7
WARNING_DAYS = 30

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Strip the time-of-day from a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_due(due_date: DateLike, today: DateLike) -> int:
    """Signed calendar-day count from today until the due date."""
    return (as_date(due_date) - as_date(today)).days


def classify(due_date: DateLike, is_completed: bool, today: DateLike) -> Status:
    """
    Determine reminder status.

    Completed reminders are always COMPLETED. Otherwise:
    - past due date: OVERDUE
    - 0..7 days left: URGENT
    - 8..30 days left: WARNING
    - more than 30 days: OK
    """
    if is_completed:
        return Status.COMPLETED
    days = days_until_due(due_date, today)
    if days < 0:
        return Status.OVERDUE
    if days <= URGENT_DAYS:
        return Status.URGENT
    if days <= WARNING_DAYS:
        return Status.WARNING
    return Status.OK


def month_end(today: DateLike) -> date:
    """Last calendar day of the month containing today."""
    return as_date(today) + relativedelta(day=31)


def utc_today() -> date:
    """Current UTC date. Read once per request/command and pass it down."""
    return datetime.now(timezone.utc).date()
