#!/usr/bin/env python3
"""Background scheduler for the daily reminder email job."""

import logging
import time

from apscheduler.schedulers.background import BackgroundScheduler

import config
from logging_config import setup_logging
from models import init_data_file, utc_today
from notifier import send_daily_reminder_emails

logger = logging.getLogger(__name__)


class ReminderScheduler:
    def __init__(self, data_file: str = config.DATA_FILE):
        self.data_file = data_file
        self.scheduler = BackgroundScheduler(timezone="UTC")

    def _send_reminder_emails(self):
        today = utc_today()
        try:
            send_daily_reminder_emails(self.data_file, today)
        except Exception as e:
            logger.error("Daily reminder email job failed: %s", e, exc_info=True)

    def start(self):
        self.scheduler.add_job(
            self._send_reminder_emails, 'cron',
            hour=config.REMINDER_EMAIL_HOUR, minute=0, id='daily_reminder_emails'
        )
        self.scheduler.start()
        logger.info("Scheduler started. Reminder emails run daily at %02d:00 UTC.", config.REMINDER_EMAIL_HOUR)

    def shutdown(self):
        self.scheduler.shutdown()


def main():
    setup_logging()
    init_data_file(config.DATA_FILE)

    scheduler = ReminderScheduler(config.DATA_FILE)
    scheduler.start()
    logger.info("Use Ctrl+C to shut down.")

    try:
        while True:
            time.sleep(60)
    except KeyboardInterrupt:
        logger.info("Shutdown signal received. Shutting down scheduler...")
        scheduler.shutdown()


if __name__ == "__main__":
    main()
