from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from core.errors import NotificationError
from db.session import configure_engine, init_db


@pytest.fixture(autouse=True)
def database(tmp_path):
    engine = configure_engine(f"sqlite+pysqlite:///{tmp_path / 'reminders-test.db'}")
    init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def client():
    from app.main import app

    # Not entered as a context manager, so the startup hook (and its scheduler) never runs
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeChat:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[str] = []

    def send_message(self, message: str) -> str:
        if self.fail:
            raise NotificationError("HTTP 401: bad credentials")
        self.sent.append(message)
        return f"SM{len(self.sent)}"


@pytest.fixture
def chat():
    return FakeChat()


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)
