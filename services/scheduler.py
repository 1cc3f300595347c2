from __future__ import annotations
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from core.config import settings
from services.notifier import DueReminderNotifier

JOB_ID = "notify_due_reminders"

_scheduler: BackgroundScheduler | None = None
_notifier: DueReminderNotifier | None = None


def get_scheduler() -> BackgroundScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = BackgroundScheduler(timezone=settings.timezone)
    return _scheduler


def get_notifier() -> DueReminderNotifier:
    global _notifier
    if _notifier is None:
        _notifier = DueReminderNotifier()
    return _notifier


def _job_notify_due_reminders() -> None:
    get_notifier().run_once()


def start_scheduler(scheduler: BackgroundScheduler) -> None:
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled by settings")
        return
    if not scheduler.running:
        trigger = IntervalTrigger(seconds=settings.notify_interval_seconds)
        scheduler.add_job(
            _job_notify_due_reminders,
            trigger,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        logger.info("Scheduler started, checking due reminders every {}s", settings.notify_interval_seconds)


def get_job_info() -> dict:
    scheduler = get_scheduler()
    job = scheduler.get_job(JOB_ID) if scheduler.running else None
    return {
        "job_id": JOB_ID,
        "interval_seconds": settings.notify_interval_seconds,
        "exists": job is not None,
        "next_run_time": job.next_run_time if job else None,
    }


def shutdown_scheduler(scheduler: BackgroundScheduler) -> None:
    global _scheduler
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler shutdown")
    if scheduler is _scheduler:
        _scheduler = None
