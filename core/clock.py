from __future__ import annotations
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from core.config import settings


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def utc_now() -> datetime:
    """Current instant as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage(value: datetime) -> datetime:
    """Normalise a timestamp to naive UTC.

    Naive values are read as wall-clock time in the configured zone.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=local_zone())
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``.

    Raises ``ValueError`` when the text is not a timestamp.
    """
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
