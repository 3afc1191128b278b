"""Enumeration types for booking core data models."""

from enum import Enum


class DayStatus(str, Enum):
    """Occupancy status of a calendar date as reported by the backend."""

    FREE = "free"
    BOOKED = "booked"
    PENDING = "pending"
    BLOCKED = "blocked"
    EXTERNAL = "external"  # Occupied by an imported external calendar


class PriceSource(str, Enum):
    """Which pricing tier produced a nightly price."""

    SPECIAL = "special"
    EARLY_BIRD = "early_bird"
    BASE = "base"


class SelectionPhase(str, Enum):
    """Phase of the two-click check-in/check-out selection."""

    EMPTY = "empty"
    CHECKIN_ONLY = "checkin_only"
    RANGE = "range"


class ClickRejection(str, Enum):
    """Reason a calendar click produced no transition."""

    INVALID_DATE = "invalid_date"
    PAST_DATE = "past_date"
    CHECKIN_UNAVAILABLE = "checkin_unavailable"
    MINIMUM_STAY = "minimum_stay"
