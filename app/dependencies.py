from services.reminder_service import ReminderService
from services.extractor import ReminderExtractor
from services.notifier import DueReminderNotifier
from services.scheduler import get_notifier


def get_reminder_service() -> ReminderService:
    return ReminderService()


def get_extractor() -> ReminderExtractor:
    return ReminderExtractor()


def get_due_notifier() -> DueReminderNotifier:
    return get_notifier()
