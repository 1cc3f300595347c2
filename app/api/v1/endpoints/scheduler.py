from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.dependencies import get_due_notifier
from core.config import settings
from services.notifier import DueReminderNotifier
from services.scheduler import get_scheduler, get_job_info


router = APIRouter()


class JobInfoOut(BaseModel):
    job_id: str
    interval_seconds: float
    exists: bool
    next_run_time: Optional[datetime]


class SchedulerStateOut(BaseModel):
    enabled: bool
    running: bool
    job: JobInfoOut


@router.get("", response_model=SchedulerStateOut, summary="Scheduler state")
def get_scheduler_state() -> SchedulerStateOut:
    scheduler = get_scheduler()
    return SchedulerStateOut(
        enabled=settings.scheduler_enabled,
        running=scheduler.running,
        job=JobInfoOut(**get_job_info()),
    )


@router.post("/run-now", summary="Run one due-reminder scan immediately")
def run_now(notifier: DueReminderNotifier = Depends(get_due_notifier)) -> dict:
    return {"sent": notifier.run_once()}
