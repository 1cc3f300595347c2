from __future__ import annotations
from datetime import datetime

from loguru import logger

from core.clock import to_storage
from db.session import get_session
from db.repositories.reminder_repo import ReminderRepository
from schemas.reminder import ReminderOut


class ReminderService:
    """Create/list/delete reminders.

    Mutations answer with the whole current list so the client can refresh in
    one round trip.
    """

    def list_reminders(self) -> list[ReminderOut]:
        with get_session() as session:
            return self._snapshot(ReminderRepository(session))

    def add_reminder(self, message: str, due_at: datetime) -> list[ReminderOut]:
        with get_session() as session:
            repo = ReminderRepository(session)
            reminder = repo.create(message=message, due_at=to_storage(due_at))
            logger.info("Created reminder id={} due_at={}", reminder.id, reminder.due_at.isoformat())
        return self.list_reminders()

    def delete_reminder(self, reminder_id: int) -> list[ReminderOut]:
        with get_session() as session:
            deleted = ReminderRepository(session).delete_by_id(reminder_id)
        if deleted:
            logger.info("Deleted reminder id={}", reminder_id)
        else:
            logger.debug("Delete ignored, reminder id={} not found", reminder_id)
        return self.list_reminders()

    @staticmethod
    def _snapshot(repo: ReminderRepository) -> list[ReminderOut]:
        return [ReminderOut.model_validate(r) for r in repo.list_all()]
