from __future__ import annotations

import logging

from app.core.logging import (
    RequestContextFilter,
    _ContainerFormatter,
    request_id_var,
    setup_logging,
)


def _record(level: int = logging.INFO, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="svc.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_setup_logging_sets_root_level() -> None:
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    setup_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_defaults_to_info_for_unknown_level() -> None:
    setup_logging("nonexistent")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_quiets_noisy_libraries_at_debug() -> None:
    setup_logging("debug")
    assert logging.getLogger("uvicorn").level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_installs_request_filter_on_handler() -> None:
    setup_logging("info")
    (handler,) = logging.getLogger().handlers
    assert any(isinstance(f, RequestContextFilter) for f in handler.filters)


def test_formatter_excludes_location_for_info() -> None:
    output = _ContainerFormatter().format(_record(logging.INFO, "hello"))
    assert "hello" in output
    assert "[svc.py:" not in output


def test_formatter_includes_location_for_warning() -> None:
    output = _ContainerFormatter().format(_record(logging.WARNING, "bad thing"))
    assert "bad thing" in output
    assert "[svc.py:42]" in output


def test_filter_stamps_current_request_id() -> None:
    token = request_id_var.set("req-77")
    try:
        record = _record()
        assert RequestContextFilter().filter(record) is True
        assert record.request_id == "req-77"  # type: ignore[attr-defined]
    finally:
        request_id_var.reset(token)


def test_filter_defaults_outside_a_request() -> None:
    record = _record()
    RequestContextFilter().filter(record)
    assert record.request_id == "-"  # type: ignore[attr-defined]


def test_filter_keeps_explicit_request_id() -> None:
    record = _record()
    record.request_id = "from-extra"  # type: ignore[attr-defined]
    RequestContextFilter().filter(record)
    assert record.request_id == "from-extra"  # type: ignore[attr-defined]
