from __future__ import annotations
import threading
from datetime import datetime

from loguru import logger

from core.clock import utc_now
from core.errors import NotificationError, StoreError
from core.logging import REMINDER_DELIVERY_FAILED, REMINDER_NOTIFIED, get_event_logger
from db.session import get_session
from db.repositories.reminder_repo import ReminderRepository
from services.chat_service import ChatService


class DueReminderNotifier:
    """Finds due reminders and pushes them to the messaging channel.

    Each reminder is claimed with a check-and-set on ``notified`` before it is
    sent, so a reminder is dispatched at most once even when ticks overlap or
    several processes share the database. A rejected dispatch is recorded on
    the reminder (``delivery_failed``/``last_error``) and not retried.
    """

    def __init__(self, chat_service: ChatService | None = None) -> None:
        self.chat = chat_service or ChatService()
        self._tick_lock = threading.Lock()
        self.events = get_event_logger("notifier")

    def run_once(self, now: datetime | None = None) -> int:
        """Run a single scan. Returns the number of notifications delivered."""
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Notifier tick skipped, previous tick still running")
            return 0
        try:
            return self._scan(now or utc_now())
        except StoreError as ex:
            logger.error("Notifier tick aborted by store failure: {}", ex)
            return 0
        finally:
            self._tick_lock.release()

    def _scan(self, now: datetime) -> int:
        with get_session() as session:
            due = [(r.id, r.message) for r in ReminderRepository(session).due_unnotified(now)]

        sent = 0
        for reminder_id, message in due:
            with get_session() as session:
                claimed = ReminderRepository(session).mark_notified(reminder_id, at=now)
            if not claimed:
                logger.debug("Reminder id={} already claimed or deleted", reminder_id)
                continue

            try:
                sid = self.chat.send_message(message)
            except NotificationError as ex:
                logger.error("Reminder id={} claimed but delivery failed: {}", reminder_id, ex)
                self.events.warning(REMINDER_DELIVERY_FAILED, reminder_id=reminder_id, error=str(ex))
                with get_session() as session:
                    ReminderRepository(session).mark_delivery_failed(reminder_id, str(ex))
                continue

            sent += 1
            self.events.info(REMINDER_NOTIFIED, reminder_id=reminder_id, sid=sid)

        if due:
            logger.info("Notifier tick: {} due, {} delivered", len(due), sent)
        return sent
