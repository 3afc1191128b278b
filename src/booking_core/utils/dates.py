"""Calendar-day helpers.

All comparisons in the booking core are by calendar day. Inputs may
arrive as ISO strings (from the calendar cells and the backend map),
``datetime`` objects or plain ``date`` objects; they are normalized here
to ``datetime.date`` with no time component.
"""

import datetime as dt
import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)


def to_date(value: Any) -> dt.date | None:
    """Normalize a calendar day to a ``date``.

    Args:
        value: ``date``, ``datetime`` or ``YYYY-MM-DD`` string (a trailing
               time component such as ``2025-06-01T00:00:00`` is ignored).

    Returns:
        The calendar day, or None if the value cannot be interpreted.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    # Drop a time component, keep the calendar day
    if "T" in text:
        text = text.split("T", 1)[0]
    elif " " in text:
        text = text.split(" ", 1)[0]

    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable date value: %r", value)
        return None


def date_key(day: dt.date) -> str:
    """Return the normalized ``YYYY-MM-DD`` key for a day."""
    return day.isoformat()


def iter_nights(checkin: dt.date, checkout: dt.date) -> Iterator[dt.date]:
    """Yield every night of a stay (checkout day excluded)."""
    for offset in range((checkout - checkin).days):
        yield checkin + dt.timedelta(days=offset)


def nights_between(checkin: dt.date, checkout: dt.date) -> int:
    """Number of whole nights between two days (may be zero or negative)."""
    return (checkout - checkin).days
