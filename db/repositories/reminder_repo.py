from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import select, delete, update

from core.clock import utc_now
from db.models.reminder import Reminder


class ReminderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: str, due_at: datetime) -> Reminder:
        reminder = Reminder(message=message, due_at=due_at, notified=False, delivery_failed=False)
        self.session.add(reminder)
        self.session.flush()
        return reminder

    def get(self, reminder_id: int) -> Reminder | None:
        return self.session.get(Reminder, reminder_id)

    def list_all(self) -> list[Reminder]:
        stmt = select(Reminder).order_by(Reminder.id)
        return list(self.session.scalars(stmt))

    def delete_by_id(self, reminder_id: int) -> bool:
        result = self.session.execute(delete(Reminder).where(Reminder.id == reminder_id))
        return result.rowcount == 1

    def due_unnotified(self, now: datetime) -> list[Reminder]:
        stmt = (
            select(Reminder)
            .where(Reminder.notified.is_(False), Reminder.due_at <= now)
            .order_by(Reminder.id)
        )
        return list(self.session.scalars(stmt))

    def mark_notified(self, reminder_id: int, at: datetime | None = None) -> bool:
        """Flip ``notified`` false -> true.

        Returns True only for the caller that performed the flip; False when the
        reminder is gone or was already notified.
        """
        stmt = (
            update(Reminder)
            .where(Reminder.id == reminder_id, Reminder.notified.is_(False))
            .values(notified=True, notified_at=at or utc_now())
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def mark_delivery_failed(self, reminder_id: int, error: str) -> bool:
        stmt = (
            update(Reminder)
            .where(Reminder.id == reminder_id)
            .values(delivery_failed=True, last_error=error[:2000])
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1
