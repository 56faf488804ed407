"""Tests for codeassist.core.logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from codeassist.core.logging import (
    SENSITIVE_PATTERNS,
    RequestContext,
    _sanitize_event_dict,
    _sanitize_value,
    configure_logging,
    get_current_context,
    get_logger,
    with_context,
)


def _flush() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


def _read_events(path: Path) -> list[dict]:
    _flush()
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestSanitization:
    """Tests for credential redaction."""

    def test_known_patterns(self) -> None:
        assert "api_key" in SENSITIVE_PATTERNS
        assert "authorization" in SENSITIVE_PATTERNS
        assert "token" in SENSITIVE_PATTERNS

    def test_redacts_api_key(self) -> None:
        assert _sanitize_value("api_key", "sk-123") == "[REDACTED]"
        assert _sanitize_value("DEEPSEEK_API_KEY", "sk-123") == "[REDACTED]"

    def test_token_counts_kept(self) -> None:
        assert _sanitize_value("max_tokens", 1024) == 1024
        assert _sanitize_value("total_tokens", 4) == 4

    def test_nested_headers(self) -> None:
        event = _sanitize_event_dict(
            None,
            "info",
            {"event": "api_request", "headers": {"Authorization": "Bearer sk", "Accept": "*/*"}},
        )
        assert event["headers"] == {"Authorization": "[REDACTED]", "Accept": "*/*"}
        assert event["event"] == "api_request"


class TestRequestContext:
    """Tests for RequestContext propagation."""

    def test_with_context_sets_and_resets(self) -> None:
        ctx = RequestContext(operation="complete")
        assert get_current_context() is None
        with with_context(ctx):
            assert get_current_context() is ctx
        assert get_current_context() is None

    def test_ids_unique(self) -> None:
        assert RequestContext("a").request_id != RequestContext("a").request_id

    def test_to_dict_omits_missing_model(self) -> None:
        ctx = RequestContext(operation="explain", request_id="r1")
        assert ctx.to_dict() == {"operation": "explain", "request_id": "r1"}


class TestConfigureLogging:
    """Tests for configure_logging output."""

    def test_json_file_output(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "codeassist.log"
        configure_logging(level="DEBUG", format="json", file_path=log_file)

        logger = get_logger("retry")
        with with_context(RequestContext(operation="complete", request_id="abc", model="m")):
            logger.warning("request_retrying", retry=1, api_key="sk-secret")

        events = _read_events(log_file)
        assert len(events) == 1
        event = events[0]
        assert event["event"] == "request_retrying"
        assert event["component"] == "retry"
        assert event["level"] == "warning"
        assert event["api_key"] == "[REDACTED]"
        assert event["operation"] == "complete"
        assert event["request_id"] == "abc"
        assert "timestamp" in event

    def test_level_filtering(self, tmp_path: Path) -> None:
        log_file = tmp_path / "codeassist.log"
        configure_logging(level="WARNING", format="json", file_path=log_file)

        logger = get_logger("throttle")
        logger.info("ignored")
        logger.error("kept")

        assert [e["event"] for e in _read_events(log_file)] == ["kept"]

    def test_bound_context(self, tmp_path: Path) -> None:
        log_file = tmp_path / "codeassist.log"
        configure_logging(level="INFO", format="json", file_path=log_file)

        get_logger("cli").bind(command="ping").info("started")

        event = _read_events(log_file)[0]
        assert event["command"] == "ping"
        assert event["component"] == "cli"

    def test_explicit_keys_win_over_context(self, tmp_path: Path) -> None:
        log_file = tmp_path / "codeassist.log"
        configure_logging(level="INFO", format="json", file_path=log_file)

        with with_context(RequestContext(operation="complete")):
            get_logger("x").info("evt", operation="override")

        assert _read_events(log_file)[0]["operation"] == "override"
