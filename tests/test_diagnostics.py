from __future__ import annotations

import logging

import pytest

from hoa_client_sdk.diagnostics import NullSink, RingBufferSink, sanitize
from hoa_client_sdk.logger import log_action


def test_ring_buffer_keeps_latest_events() -> None:
    sink = RingBufferSink(capacity=3)
    for index in range(5):
        sink.record("profile", f"event {index}")

    events = sink.snapshot()
    assert [event.message for event in events] == ["event 2", "event 3", "event 4"]
    assert sink.capacity == 3
    assert events[-1].as_line().endswith("[profile] event 4")

    sink.clear()
    assert sink.snapshot() == []


def test_ring_buffer_rejects_zero_capacity() -> None:
    with pytest.raises(ValueError):
        RingBufferSink(capacity=0)


def test_sanitize_drops_secrets() -> None:
    cleaned = sanitize(
        {
            "user_id": "user-1",
            "access_token": "eyJ...",
            "nested": {"password": "hunter2", "code": "PGRST116"},
            "items": [{"apikey": "anon", "stage": "roles"}],
        }
    )
    assert cleaned == {"user_id": "user-1", "nested": {"code": "PGRST116"}, "items": [{"stage": "roles"}]}


def test_record_mirrors_to_logging(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.diagnostics")
    sink = RingBufferSink(capacity=5, logger=logger)
    with caplog.at_level(logging.DEBUG, logger="tests.diagnostics"):
        sink.record("auth", "Signing in", refresh_token="secret", user_id="user-1")

    assert '"stage": "auth"' in caplog.text
    assert "secret" not in caplog.text
    assert sink.snapshot()[0].data == {"user_id": "user-1"}


def test_null_sink_records_nothing() -> None:
    sink = NullSink()
    sink.record("auth", "ignored")
    assert sink.snapshot() == []


def test_log_action_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.actions")
    with caplog.at_level(logging.INFO, logger="tests.actions"):
        log_action(logger, "tenant", "switch", "user-1", "assoc-a", "success")
        log_action(logger, "session", "resolve", "user-1", None, "error", category="timeout")

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.INFO, logging.WARNING]
    assert '"association_id": "assoc-a"' in caplog.records[0].getMessage()
    assert '"category": "timeout"' in caplog.records[1].getMessage()
