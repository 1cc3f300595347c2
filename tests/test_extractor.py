from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.errors import ExtractionError
from services.extractor import ReminderExtractor, parse_answer, strip_code_fence

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _response(content: str, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = content
    resp.json.return_value = {"choices": [{"message": {"content": content}}]}
    return resp


@pytest.fixture
def extractor():
    ex = ReminderExtractor()
    ex.api_key = "test-key"
    return ex


def test_strip_code_fence_variants():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_strip_code_fence_finds_block_inside_prose():
    answer = 'Here you go:\n```json\n{"a": 1}\n```\nLet me know if anything is off.'
    assert strip_code_fence(answer) == '{"a": 1}'


def test_parse_answer_reads_fenced_block_after_preamble():
    result = parse_answer(
        'Here you go:\n```json\n{"message": "Dentist", "dueAt": "2026-07-01T09:00:00Z"}\n```'
    )
    assert result.message == "Dentist"
    assert result.due_at == datetime(2026, 7, 1, 9, 0)


def test_parse_answer_date_without_time_defaults_to_nine():
    result = parse_answer('{"message": "Dentist", "dueAt": "2026-07-01"}')
    assert result.due_at == datetime(2026, 7, 1, 9, 0)


def test_parse_answer_keeps_explicit_midnight():
    result = parse_answer('{"message": "New year", "dueAt": "2027-01-01T00:00:00Z"}')
    assert result.due_at == datetime(2027, 1, 1, 0, 0)


def test_parse_answer_accepts_legacy_keys():
    result = parse_answer('{"reminderMsg": "Dentist", "remindAt": "2026-07-01T18:30:00.000Z"}')
    assert result.message == "Dentist"
    assert result.due_at == datetime(2026, 7, 1, 18, 30)


@pytest.mark.parametrize(
    "answer",
    [
        "Sorry, I cannot read this note.",
        '{"message": "Call mom"}',
        '{"message": "Call mom", "dueAt": "next tuesday"}',
        '{"message": "   ", "dueAt": "2026-07-01T09:00:00Z"}',
        '["Call mom", "2026-07-01T09:00:00Z"]',
    ],
)
def test_parse_answer_rejects_unusable_answers(answer):
    with pytest.raises(ExtractionError):
        parse_answer(answer)


def test_extract_success_strips_fence(extractor):
    content = '```json\n{"message": "Pay rent", "dueAt": "2026-11-01T09:00:00Z"}\n```'
    with patch("services.extractor.requests.post", return_value=_response(content)) as post:
        result = extractor.extract(PNG, "image/png")

    assert result.message == "Pay rent"
    assert result.due_at == datetime(2026, 11, 1, 9, 0)
    body = post.call_args.kwargs["json"]
    image_part = body["messages"][0]["content"][1]
    assert image_part["image_url"]["url"].startswith("data:image/png;base64,")
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test-key"


def test_extract_rejects_missing_photo(extractor):
    with pytest.raises(ExtractionError) as exc:
        extractor.extract(b"", "image/png")
    assert exc.value.status_code == 400


def test_extract_rejects_unsupported_type(extractor):
    with pytest.raises(ExtractionError) as exc:
        extractor.extract(b"%PDF-1.7", "application/pdf")
    assert exc.value.status_code == 415


def test_extract_rejects_oversized_photo(extractor):
    extractor.max_bytes = 10
    with pytest.raises(ExtractionError) as exc:
        extractor.extract(PNG, "image/png")
    assert exc.value.status_code == 413


def test_extract_network_failure(extractor):
    with patch("services.extractor.requests.post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(ExtractionError) as exc:
            extractor.extract(PNG, "image/jpeg")
    assert exc.value.status_code == 502


def test_extract_service_error_status(extractor):
    with patch("services.extractor.requests.post", return_value=_response("rate limited", status=429)):
        with pytest.raises(ExtractionError) as exc:
            extractor.extract(PNG, "image/png")
    assert exc.value.status_code == 502


def test_extract_without_api_key_fails_before_calling_service(extractor):
    extractor.api_key = ""
    with patch("services.extractor.requests.post") as post:
        with pytest.raises(ExtractionError):
            extractor.extract(PNG, "image/png")
    post.assert_not_called()
