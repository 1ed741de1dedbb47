"""Unit tests for structured logging utilities in ``observability``.

Validates the null handler, trace binding, and event construction behaviour the
pipeline and loaders rely on.
"""

from __future__ import annotations

import logging

import pytest

from lib_ordered_collection import Collection, bind_trace_id, get_logger
from lib_ordered_collection.observability import TRACE_ID, log_error, log_info, make_event


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_ordered_collection")
    bind_trace_id("trace-123")
    try:
        log_info("query_complete", operation="query", source=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "operation": "query", "source": None}


def test_log_error_uses_error_level(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_ordered_collection")
    log_error("input_file_invalid", source="rows.json")
    assert caplog.records[-1].levelno == logging.ERROR


def test_bind_trace_id_clears_context() -> None:
    """Clearing the trace ID should reset the context variable to None."""

    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    """make_event should merge optional metadata after the base keys."""

    assert make_event("sort_by", None, {"count": 3}) == {"operation": "sort_by", "source": None, "count": 3}
    assert make_event("load", "rows.json") == {"operation": "load", "source": "rows.json"}


def test_collection_operations_do_not_log(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_ordered_collection")
    Collection([3, 1, 2]).sort().group_by(lambda value: value % 2).to_plain()
    assert caplog.records == []
