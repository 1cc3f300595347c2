"""Logging for the reminder service.

Human-readable application logs go through loguru. Notification outcomes are
also emitted as one-line JSON events through structlog so delivery can be
audited separately, e.g. ``{"event": "reminder_notified", "reminder_id": 3,
"sid": "SM...", "logger": "notifier", "app": "reminder-app", ...}``.
"""
import logging
from loguru import logger
import sys
import structlog

from core.config import settings

# Event names emitted by the due-reminder notifier
REMINDER_NOTIFIED = "reminder_notified"
REMINDER_DELIVERY_FAILED = "reminder_delivery_failed"


def _get_numeric_level(level_name: str) -> int:
    try:
        return int(level_name)
    except ValueError:
        return getattr(logging, str(level_name).upper(), logging.INFO)


def configure_logging() -> None:
    logger.remove()
    logger.add(
        sys.stdout,
        level=settings.log_level.upper(),
        backtrace=False,
        diagnose=False,
        enqueue=True,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_get_numeric_level(settings.log_level)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_event_logger(name: str):
    """Structured logger for audit events, tagged with its source and the app name."""
    return structlog.get_logger(name).bind(logger=name, app=settings.app_name)
