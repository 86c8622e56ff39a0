"""JSON log output must stay machine-parseable and carry context fields."""

from __future__ import annotations

import json
import logging
import sys

from app.core.logging import _ContainerFormatter, _JsonFormatter


def _record(msg: str = "test message", args: tuple = (), **kwargs) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=kwargs.pop("level", logging.INFO),
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=kwargs.pop("exc_info", None),
    )


def test_json_formatter_produces_valid_json() -> None:
    parsed = json.loads(_JsonFormatter().format(_record("Hello %s", ("world",))))
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test.logger"
    assert parsed["message"] == "Hello world"
    assert "timestamp" in parsed


def test_json_formatter_includes_request_fields() -> None:
    record = _record()
    record.request_id = "abc-123"  # type: ignore[attr-defined]
    record.method = "POST"  # type: ignore[attr-defined]
    record.path = "/v1/assessment-submissions"  # type: ignore[attr-defined]
    record.actor_id = "cand-1"  # type: ignore[attr-defined]
    record.status_code = 201  # type: ignore[attr-defined]
    record.duration_ms = 12.5  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "abc-123"
    assert parsed["method"] == "POST"
    assert parsed["path"] == "/v1/assessment-submissions"
    assert parsed["actor_id"] == "cand-1"
    assert parsed["status_code"] == 201
    assert parsed["duration_ms"] == 12.5


def test_json_formatter_includes_assessment_context() -> None:
    record = _record()
    record.assessment_id = "a-1"  # type: ignore[attr-defined]
    record.candidate_id = "cand-1"  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["assessment_id"] == "a-1"
    assert parsed["candidate_id"] == "cand-1"


def test_json_formatter_omits_absent_context() -> None:
    parsed = json.loads(_JsonFormatter().format(_record()))
    assert "actor_id" not in parsed
    assert "assessment_id" not in parsed


def test_json_formatter_includes_exception_info() -> None:
    try:
        raise ValueError("test error")
    except ValueError:
        output = _JsonFormatter().format(
            _record("Something failed", level=logging.ERROR, exc_info=sys.exc_info())
        )

    parsed = json.loads(output)
    assert "ValueError: test error" in parsed["exception"]


def test_container_formatter_is_plain_text() -> None:
    output = _ContainerFormatter().format(_record("server started"))
    assert "INFO" in output
    assert "server started" in output
    try:
        json.loads(output)
        raise AssertionError("Container format should not be valid JSON")
    except json.JSONDecodeError:
        pass
