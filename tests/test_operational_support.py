from __future__ import annotations

import logging

from infra.logging_config import setup_logging
from infra.operational_support import (
    TraceIdLogFilter,
    bind_trace_id,
    create_trace_id,
    current_trace_id,
)


def test_bind_trace_id_sets_and_restores_context():
    assert current_trace_id() is None

    with bind_trace_id("inc-test-123") as trace_id:
        assert trace_id == "inc-test-123"
        assert current_trace_id() == "inc-test-123"
        with bind_trace_id("  ") as nested:
            assert nested.startswith("run-")
            assert current_trace_id() == nested
        assert current_trace_id() == "inc-test-123"

    assert current_trace_id() is None


def test_create_trace_id_is_unique():
    assert create_trace_id() != create_trace_id()


def test_trace_filter_tags_records():
    record = logging.LogRecord("siteplan", logging.INFO, __file__, 1, "hello", None, None)
    trace_filter = TraceIdLogFilter()

    assert trace_filter.filter(record)
    assert record.trace_id == "-"

    with bind_trace_id("inc-42"):
        trace_filter.filter(record)
    assert record.trace_id == "inc-42"


def test_setup_logging_writes_trace_tagged_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SP_APP_VERSION", "3.2.1")
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level

    try:
        log_file = setup_logging(level=logging.DEBUG, log_dir=tmp_path / "logs")
        with bind_trace_id("inc-log-1"):
            logging.getLogger("core.services.gantt").warning("schedule rebuilt")
        for handler in root.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert log_file == tmp_path / "logs" / "app.log"
        assert "Logging initialized (v3.2.1)" in text
        assert "trace=inc-log-1 core.services.gantt - schedule rebuilt" in text
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
