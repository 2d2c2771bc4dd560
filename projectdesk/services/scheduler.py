# projectdesk/services/scheduler.py
"""
Scheduler service for the daily project start reminders
"""

import logging
import threading
from datetime import date
from typing import Any, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from projectdesk.services.email_service import EmailSender
from projectdesk.services.reminder_service import send_start_reminders

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Owns the daily reminder job; created and started by the application"""

    JOB_ID = "daily_project_start_reminders"

    def __init__(
        self,
        session_factory: Callable[[], Session],
        email_sender_factory: Callable[[], EmailSender],
        hour: int = 21,
        minute: int = 0,
        scheduler=None,
    ):
        self.session_factory = session_factory
        self.email_sender_factory = email_sender_factory
        self.hour = hour
        self.minute = minute
        self.scheduler = scheduler or AsyncIOScheduler()
        self.is_running = False
        self._run_lock = threading.Lock()
        self.last_result: Optional[Dict[str, int]] = None

    def start(self):
        """Start the scheduler"""
        if self.is_running:
            return
        # Plain functions run in the scheduler's thread pool, off the event loop
        self.scheduler.add_job(
            self.run_once,
            trigger=CronTrigger(hour=self.hour, minute=self.minute),
            id=self.JOB_ID,
            name="Daily Project Start Reminders",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        self.is_running = True
        logger.info(f"Reminder scheduler started, daily at {self.hour:02d}:{self.minute:02d}")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Reminder scheduler stopped")

    def run_once(self, today: Optional[date] = None) -> Optional[Dict[str, int]]:
        """
        Run one reminder pass. Returns None when another pass is still running.
        """
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Start reminder run already in progress, skipping")
            return None
        try:
            logger.info("Checking for projects that have started...")
            db = self.session_factory()
            try:
                result = send_start_reminders(db, self.email_sender_factory(), today)
            finally:
                db.close()
            self.last_result = result
            logger.info(
                f"Start reminders done: {result['sent']} sent, {result['failed']} failed"
            )
            return result
        finally:
            self._run_lock.release()

    def get_status(self) -> Dict[str, Any]:
        """Get scheduler status and job information"""
        if not self.is_running:
            return {"status": "stopped", "jobs": [], "last_result": self.last_result}

        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger),
            })

        return {"status": "running", "jobs": jobs, "last_result": self.last_result}
