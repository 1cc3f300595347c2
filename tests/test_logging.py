import json
from datetime import timedelta

import pytest
from loguru import logger

from conftest import FakeChat
from core.clock import utc_now
from core.config import settings
from core.logging import REMINDER_DELIVERY_FAILED, REMINDER_NOTIFIED, configure_logging
from db.session import get_session
from db.repositories.reminder_repo import ReminderRepository
from services.notifier import DueReminderNotifier


@pytest.fixture(autouse=True)
def configured_logging(capsys):
    configure_logging()
    yield
    # the loguru sink holds the captured stream; drop it with the capture
    logger.remove()


def _events(out: str) -> list[dict]:
    return [json.loads(line) for line in out.splitlines() if line.startswith("{") and '"event"' in line]


def _due(message: str) -> None:
    with get_session() as session:
        ReminderRepository(session).create(message, utc_now() - timedelta(seconds=1))


def test_notifier_emits_json_event_per_delivery(capsys):
    _due("Pay rent")

    DueReminderNotifier(chat_service=FakeChat()).run_once()

    events = _events(capsys.readouterr().out)
    assert len(events) == 1
    event = events[0]
    assert event["event"] == REMINDER_NOTIFIED
    assert event["logger"] == "notifier"
    assert event["app"] == settings.app_name
    assert event["sid"] == "SM1"
    assert "timestamp" in event


def test_notifier_emits_failure_event(capsys):
    _due("Pay rent")

    DueReminderNotifier(chat_service=FakeChat(fail=True)).run_once()

    events = _events(capsys.readouterr().out)
    assert [e["event"] for e in events] == [REMINDER_DELIVERY_FAILED]
    assert events[0]["level"] == "warning"
    assert "bad credentials" in events[0]["error"]
