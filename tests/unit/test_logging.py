"""Unit tests for session-scoped logging utilities."""

import logging

import pytest

from booking_core.utils.logging import (
    NO_SESSION,
    SessionIdFormatter,
    bind_session_id,
    generate_session_id,
    get_logger,
    get_session_id,
    log_availability_fetch,
    log_pricing_operation,
)


class TestSessionIdContext:
    """Tests for the session ID context variable."""

    def test_generate_session_id_format(self) -> None:
        sid = generate_session_id()

        assert sid.startswith("form-")
        assert len(sid) == len("form-") + 12

    def test_unbound_outside_session(self) -> None:
        assert get_session_id() is None

    def test_bind_restores_previous(self) -> None:
        """Nested bindings restore the outer session ID on exit."""
        with bind_session_id("form-outer"):
            with bind_session_id("form-inner"):
                assert get_session_id() == "form-inner"

            assert get_session_id() == "form-outer"

        assert get_session_id() is None


class TestLoggerHelpers:
    """Tests for the logger wrapper, formatter and structured helpers."""

    def test_get_logger_adds_filter_once(self) -> None:
        first = get_logger("booking_core.tests.filter")
        second = get_logger("booking_core.tests.filter")

        assert first is second
        assert len(first.filters) == 1

    def test_formatter_prefixes_session_id(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        with bind_session_id("form-fmt"):
            output = SessionIdFormatter("%(message)s").format(record)

        assert output == "[form-fmt] hello"

    def test_formatter_without_session(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        assert SessionIdFormatter("%(message)s").format(record) == f"[{NO_SESSION}] hello"

    def test_pricing_error_logged_at_error_level(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("booking_core.tests.pricing")
        caplog.set_level(logging.INFO, logger="booking_core.tests.pricing")

        log_pricing_operation(logger, "compute", nights=3, total=30000)
        log_pricing_operation(logger, "compute_for_dates", error="no nights")

        assert [r.levelno for r in caplog.records] == [logging.INFO, logging.ERROR]
        assert "nights=3" in caplog.records[0].getMessage()
        assert caplog.records[1].error == "no nights"

    @pytest.mark.parametrize(
        ("result", "level"),
        [
            ("started", logging.INFO),
            ("applied", logging.INFO),
            ("coalesced", logging.DEBUG),
            ("failed", logging.WARNING),
        ],
    )
    def test_fetch_log_levels(
        self, caplog: pytest.LogCaptureFixture, result: str, level: int
    ) -> None:
        logger = get_logger("booking_core.tests.fetch")
        caplog.set_level(logging.DEBUG, logger="booking_core.tests.fetch")

        log_availability_fetch(logger, "2025-06-01:2025-06-30:all", result=result)

        assert caplog.records[-1].levelno == level
        assert caplog.records[-1].range_key == "2025-06-01:2025-06-30:all"
