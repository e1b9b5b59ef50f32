"""Settings for CarMonitor, read from the environment with local defaults."""

import os


def _default_path(*parts: str) -> str:
    """Path under the directory CarMonitor is run from."""
    return os.path.join(os.getcwd(), *parts)


# --- FILE PATHS ---
DATA_FILE = os.environ.get("CARMONITOR_DATA_FILE") or _default_path("data", "carmonitor.yaml")
LOG_PATH = os.environ.get("CARMONITOR_LOG_PATH") or _default_path("carmonitor.log")

# --- WEB ---
SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# --- EMAIL SETTINGS ---
SMTP_HOST = os.environ.get("SMTP_HOST")
SMTP_PORT = int(os.environ.get("SMTP_PORT", "587"))
SMTP_USER = os.environ.get("SMTP_USER")
SMTP_PASSWORD = os.environ.get("SMTP_PASSWORD")
FROM_EMAIL = os.environ.get("FROM_EMAIL") or SMTP_USER
FROM_NAME = os.environ.get("FROM_NAME", "CarMonitor")

# --- SCHEDULER ---
REMINDER_EMAIL_HOUR = int(os.environ.get("REMINDER_EMAIL_HOUR", "8"))
NOTIFY_WITHIN_DAYS = 7
