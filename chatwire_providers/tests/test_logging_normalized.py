from __future__ import annotations

import json
import logging

from chatwire_providers.base.log_support import JsonFormatter
from chatwire_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)
from chatwire_providers.base.models import Usage


def test_log_event_drops_none_and_merges_context(log_events):
    logger = get_logger("chatwire.tests")
    log_event(logger, "thing.happened", LogContext(provider="openai", model="gpt-4o"), count=2, skipped=None)
    event = log_events[-1]
    assert event == {"event": "thing.happened", "provider": "openai", "model": "gpt-4o", "count": 2}  # nosec B101 - asserts are appropriate in unit tests


def test_normalized_event_has_required_keys(log_events):
    logger = get_logger("chatwire.tests")
    normalized_log_event(
        logger,
        "chat.end",
        LogContext(provider="anthropic"),
        phase="finalize",
        attempt=1,
        error_code="network",
        emitted=True,
        tokens=Usage(3, 4),
        phase_override="ignored",
        structured="not allowed",
    )
    event = log_events[-1]
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in event  # nosec B101
    assert event["structured"] is True  # nosec B101
    assert event["tokens"] == {"input_tokens": 3, "output_tokens": 4}  # nosec B101
    assert event["phase_override"] == "ignored"  # nosec B101


def test_normalized_event_omits_missing_error_code(log_events):
    normalized_log_event(get_logger("chatwire.tests"), "stream.start", phase="start")
    event = log_events[-1]
    assert "error_code" not in event  # nosec B101
    assert event["attempt"] is None and event["tokens"] is None  # nosec B101


def test_json_formatter_hoists_event_keys():
    record = logging.LogRecord("chatwire.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    line = json.loads(JsonFormatter().format(record))
    assert line["event"] == "e" and line["n"] == 1  # nosec B101
    assert line["level"] == "INFO" and line["logger"] == "chatwire.x"  # nosec B101
    assert "msg" not in line  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    path = tmp_path / "logs" / "chatwire.log"
    logger = configure_logger(level="DEBUG", file_path=str(path))
    try:
        log_event(get_logger("chatwire.tests"), "to.file", value=1)
        for handler in logger.handlers:
            handler.flush()
        lines = [json.loads(x) for x in path.read_text(encoding="utf-8").splitlines()]
        assert any(x.get("event") == "to.file" for x in lines)  # nosec B101
    finally:
        configure_logger(level="INFO", file_path=None)
