"""Turn a photographed handwritten note into a candidate reminder.

The heavy lifting is done by an OpenAI vision model; this module builds the
request, then cleans and validates the answer.
"""
from __future__ import annotations
import base64
import json
import re
from datetime import datetime

import requests
from loguru import logger

from core.clock import local_zone, parse_timestamp, to_storage
from core.config import settings
from core.errors import ExtractionError
from schemas.reminder import ExtractedReminder

SUPPORTED_MIME_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/webp",
}

INSTRUCTION = (
    "The photo contains a handwritten reminder. Identify the reminder text and its date and time. "
    "If the year is missing assume the current year. If the time is missing assume 09:00. "
    "Respond with JSON only, no prose, in exactly this shape: "
    '{"message": "<reminder text>", "dueAt": "<ISO-8601 timestamp>"}'
)

_FENCE_RE = re.compile(r"```[a-zA-Z0-9_-]*[ \t]*\n?(.*?)```", re.DOTALL)
_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DEFAULT_TIME = (9, 0)


def strip_code_fence(text: str) -> str:
    """Return the first fenced block of ``text``, or the whole text when there is none."""
    match = _FENCE_RE.search(text)
    return (match.group(1) if match else text).strip()


def parse_answer(text: str) -> ExtractedReminder:
    """Validate the model's textual answer into an ``ExtractedReminder``."""
    cleaned = strip_code_fence(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as ex:
        raise ExtractionError(f"Recognition service returned malformed JSON: {ex.msg}") from ex
    if not isinstance(data, dict):
        raise ExtractionError("Recognition service returned an unexpected answer")

    message = data.get("message") or data.get("reminderMsg")
    if not isinstance(message, str) or not message.strip():
        raise ExtractionError("No reminder text found in the photo")

    raw_due = data.get("dueAt") or data.get("remindAt")
    if not isinstance(raw_due, str) or not raw_due.strip():
        raise ExtractionError("No date found in the photo")
    try:
        due_at = parse_timestamp(raw_due)
    except ValueError as ex:
        raise ExtractionError(f"Unparseable date in recognition answer: {raw_due!r}") from ex
    if _DATE_ONLY_RE.match(raw_due.strip()):
        # date without a time: 09:00 wall-clock in the configured zone
        due_at = due_at.replace(hour=DEFAULT_TIME[0], minute=DEFAULT_TIME[1])

    return ExtractedReminder(message=message.strip(), due_at=to_storage(due_at))


class ReminderExtractor:
    def __init__(self) -> None:
        self.api_key = settings.openai_api_key
        self.base_url = settings.openai_base_url
        self.model = settings.openai_model
        self.timeout = settings.openai_timeout_seconds
        self.max_bytes = settings.max_upload_bytes

    def extract(self, image_bytes: bytes, mime_type: str | None) -> ExtractedReminder:
        if not image_bytes:
            raise ExtractionError("No photo uploaded", status_code=400)
        mime = (mime_type or "").lower()
        if mime not in SUPPORTED_MIME_TYPES:
            raise ExtractionError(
                f"Unsupported image type '{mime_type}'. Supported: {', '.join(sorted(SUPPORTED_MIME_TYPES))}",
                status_code=415,
            )
        if len(image_bytes) > self.max_bytes:
            raise ExtractionError(f"Photo too large (max {self.max_bytes} bytes)", status_code=413)
        if not self.api_key:
            raise ExtractionError("Recognition service is not configured (OPENAI_API_KEY)", status_code=502)

        answer = self._ask_model(image_bytes, mime)
        reminder = parse_answer(answer)
        logger.info("Extracted reminder due_at={} from {} byte photo", reminder.due_at.isoformat(), len(image_bytes))
        return reminder

    def _ask_model(self, image_bytes: bytes, mime: str) -> str:
        data_url = f"data:{mime};base64,{base64.b64encode(image_bytes).decode()}"
        today = datetime.now(local_zone()).date().isoformat()
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": f"{INSTRUCTION} Today is {today} ({local_zone().key})."},
                        {"type": "image_url", "image_url": {"url": data_url}},
                    ],
                }
            ],
            "max_tokens": 256,
            "temperature": 0,
        }
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        try:
            resp = requests.post(
                url,
                headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as ex:
            logger.warning(f"Recognition service unreachable: {ex}")
            raise ExtractionError("Recognition service unreachable", status_code=502) from ex

        if resp.status_code != 200:
            logger.warning(f"Recognition service non-200: {resp.status_code} {resp.text[:200]}")
            raise ExtractionError(f"Recognition service error: HTTP {resp.status_code}", status_code=502)

        try:
            return resp.json()["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as ex:
            raise ExtractionError("Recognition service returned an unexpected payload", status_code=502) from ex
