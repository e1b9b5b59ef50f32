"""Daily reminder digest emails."""

import html
import logging
import smtplib
from datetime import date
from email.mime.text import MIMEText
from email.utils import formataddr
from pathlib import Path
from typing import Callable, List, Union

import config
from models import ReminderView, Status, build_reminder_views, load_snapshot, load_users

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    Status.OVERDUE: "#dc2626",
    Status.URGENT: "#ea580c",
    Status.WARNING: "#ca8a04",
}
DEFAULT_STATUS_COLOR = "#16a34a"


def select_due_soon(
    views: List[ReminderView], within_days: int = config.NOTIFY_WITHIN_DAYS
) -> List[ReminderView]:
    """Open reminders due within the window (overdue included), earliest first."""
    due = [v for v in views if not v.is_completed and v.days_until_due <= within_days]
    return sorted(due, key=lambda v: v.due_date)


def build_email_subject(views: List[ReminderView]) -> str:
    return f"CarMonitor: {len(views)} upcoming reminder(s)"


def build_email_html(views: List[ReminderView]) -> str:
    """Render the digest as an HTML table, one row per reminder."""
    rows = []
    for view in views:
        color = STATUS_COLORS.get(view.status, DEFAULT_STATUS_COLOR)
        rows.append(
            "<tr style='border-bottom: 1px solid #eee;'>"
            f"<td style='padding: 10px;'>{html.escape(view.vehicle_name)}</td>"
            f"<td style='padding: 10px;'>{html.escape(view.type)}</td>"
            f"<td style='padding: 10px;'>{view.due_date.strftime('%b %d, %Y')}</td>"
            f"<td style='padding: 10px; color: {color};'>{view.status.value.upper()}</td>"
            "</tr>"
        )

    return f"""
<html>
<body style='font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;'>
    <h2 style='color: #333;'>Vehicle Reminders</h2>
    <p>The following reminders are due within the next {config.NOTIFY_WITHIN_DAYS} days:</p>
    <table style='width: 100%; border-collapse: collapse;'>
        <thead>
            <tr style='background: #f5f5f5;'>
                <th style='padding: 10px; text-align: left;'>Vehicle</th>
                <th style='padding: 10px; text-align: left;'>Type</th>
                <th style='padding: 10px; text-align: left;'>Due Date</th>
                <th style='padding: 10px; text-align: left;'>Status</th>
            </tr>
        </thead>
        <tbody>
            {''.join(rows)}
        </tbody>
    </table>
    <p style='margin-top: 20px; color: #666;'>
        Log in to CarMonitor to manage your reminders.
    </p>
</body>
</html>"""


def send_email(to: str, subject: str, html_body: str) -> bool:
    """Send an HTML email over SMTP with STARTTLS. Returns True if sent."""
    if not config.SMTP_HOST or not config.SMTP_USER:
        logger.warning("Email not configured. Skipping email to %s", to)
        return False

    message = MIMEText(html_body, "html")
    message["To"] = to
    message["From"] = formataddr((config.FROM_NAME, config.FROM_EMAIL or config.SMTP_USER))
    message["Subject"] = subject

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30) as client:
            client.starttls()
            client.login(config.SMTP_USER, config.SMTP_PASSWORD or "")
            client.send_message(message)
        logger.info("Email sent to %s", to)
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to, e)
        return False


def send_daily_reminder_emails(
    data_file: Union[str, Path],
    today: date,
    send: Callable[[str, str, str], bool] = send_email,
) -> int:
    """
    Email every user with an address a digest of reminders due within a week.

    Returns the number of emails sent.
    """
    logger.info("Running daily reminder email job")

    recipients = [u.email for u in load_users(data_file) if u.email]
    if not recipients:
        logger.info("No users with email configured")
        return 0

    vehicles, reminders = load_snapshot(data_file)
    due = select_due_soon(build_reminder_views(reminders, vehicles, today))
    if not due:
        logger.info("No upcoming reminders within %d days", config.NOTIFY_WITHIN_DAYS)
        return 0

    subject = build_email_subject(due)
    body = build_email_html(due)
    sent = sum(1 for to in recipients if send(to, subject, body))
    logger.info("Sent %d of %d reminder email(s)", sent, len(recipients))
    return sent
