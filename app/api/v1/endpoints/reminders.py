from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from loguru import logger

from app.dependencies import get_extractor, get_reminder_service
from core.errors import ExtractionError
from schemas.reminder import GeneratedReminderOut, ReminderDeleteIn, ReminderIn, ReminderOut
from services.extractor import ReminderExtractor
from services.reminder_service import ReminderService

router = APIRouter()


@router.get("/getAllReminder", response_model=List[ReminderOut])
def get_all_reminders(service: ReminderService = Depends(get_reminder_service)):
    return service.list_reminders()


@router.post("/addReminder", response_model=List[ReminderOut])
def add_reminder(payload: ReminderIn, service: ReminderService = Depends(get_reminder_service)):
    return service.add_reminder(payload.message, payload.due_at)


@router.post("/deleteReminder", response_model=List[ReminderOut])
def delete_reminder(payload: ReminderDeleteIn, service: ReminderService = Depends(get_reminder_service)):
    return service.delete_reminder(payload.id)


@router.post("/generateReminder", response_model=GeneratedReminderOut)
def generate_reminder(
    photo: Optional[UploadFile] = File(default=None),
    extractor: ReminderExtractor = Depends(get_extractor),
):
    """Read a reminder off an uploaded photo. Nothing is saved; the client posts
    the result to /addReminder itself."""
    if photo is None:
        raise ExtractionError("No photo uploaded", status_code=400)
    try:
        image_bytes = photo.file.read()
        reminder = extractor.extract(image_bytes, photo.content_type)
    finally:
        # the spooled upload is removed once closed
        photo.file.close()
    logger.info("Generated reminder from upload {}", photo.filename)
    return GeneratedReminderOut(reminder=reminder)
