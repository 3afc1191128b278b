"""Structured logging utilities with booking-form session ID support.

Provides:
- Session ID context management so logs from several booking forms
  on one page can be told apart
- Structured logging formatter for consistent log output
- Helper functions for pricing and availability logging

Usage:
    from booking_core.utils.logging import get_logger, bind_session_id

    # Around a booking-form operation:
    with bind_session_id(session.session_id):
        ...

    # In service code:
    logger = get_logger(__name__)
    logger.info("Pricing computed", extra={"nights": 3})
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

# Context variable for the active booking-form session
_session_id: ContextVar[str | None] = ContextVar("booking_session_id", default=None)

NO_SESSION = "no-session"


def generate_session_id() -> str:
    """Generate a new booking-form session ID.

    Returns:
        Short UUID-based session ID string
    """
    return f"form-{uuid.uuid4().hex[:12]}"


def get_session_id() -> str | None:
    """Get the current session ID.

    Returns:
        Current session ID or None if not set
    """
    return _session_id.get()


@contextmanager
def bind_session_id(session_id: str) -> Iterator[str]:
    """Bind a session ID for the duration of a block, restoring the previous one."""
    token = _session_id.set(session_id)
    try:
        yield session_id
    finally:
        _session_id.reset(token)


class SessionIdFilter(logging.Filter):
    """Logging filter that adds session_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add session_id to the log record.

        Args:
            record: Log record to modify

        Returns:
            True (always allows the record through)
        """
        record.session_id = get_session_id() or NO_SESSION
        return True


class SessionIdFormatter(logging.Formatter):
    """Formatter for structured log output with session ID."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured fields.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        if not hasattr(record, "session_id"):
            record.session_id = get_session_id() or NO_SESSION

        base = super().format(record)

        # Session prefix for easy grep/filtering
        return f"[{record.session_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with session ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())

    return logger


def log_pricing_operation(
    logger: logging.Logger,
    operation: str,
    *,
    nights: int | None = None,
    unit_count: int | None = None,
    total: int | None = None,
    whole_property: bool | None = None,
    source_counts: dict[str, int] | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a pricing pass with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "compute", "compute_for_dates")
        nights: Number of nights priced
        unit_count: Number of units priced
        total: Resulting total in cents
        whole_property: Whether the whole property was priced
        source_counts: Count of nightly prices per price source
        error: Error message if the pass degraded
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if nights is not None:
        context["nights"] = nights
    if unit_count is not None:
        context["unit_count"] = unit_count
    if total is not None:
        context["total"] = total
    if whole_property is not None:
        context["whole_property"] = whole_property
    if source_counts:
        context["source_counts"] = source_counts
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Pricing operation: {operation}"]
    for key, value in context.items():
        if key != "operation":
            msg_parts.append(f"{key}={value}")

    message = " | ".join(msg_parts)

    if error:
        logger.error(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_availability_fetch(
    logger: logging.Logger,
    range_key: str,
    *,
    result: str,
    entries: int | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log an availability fetch lifecycle event.

    Args:
        logger: Logger instance
        range_key: Coalescing key of the requested range
        result: One of started, coalesced, applied, stale, failed
        entries: Number of override entries received
        error: Error message if the fetch failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"range_key": range_key, "result": result}

    if entries is not None:
        context["entries"] = entries
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Availability fetch: {range_key}", f"result={result}"]
    if entries is not None:
        msg_parts.append(f"entries={entries}")
    if error:
        msg_parts.append(f"error={error}")

    message = " | ".join(msg_parts)

    if result == "failed":
        logger.warning(message, extra=context)
    elif result == "coalesced":
        logger.debug(message, extra=context)
    else:
        logger.info(message, extra=context)
