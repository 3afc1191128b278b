"""Pydantic models for booking core data entities."""

from .availability import FREE_DAY, DateOverride, DayBadges
from .booking import AccommodationData, SubmitResult
from .enums import ClickRejection, DayStatus, PriceSource, SelectionPhase
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BookingError,
    ErrorCode,
    ErrorResponse,
)
from .pricing import NightlyPrice, PricingBreakdown
from .selection import DateClickResult, SelectionState
from .stay import AccommodationUnit, DateRange

__all__ = [
    # Enums
    "ClickRejection",
    "DayStatus",
    "PriceSource",
    "SelectionPhase",
    # Stay
    "AccommodationUnit",
    "DateRange",
    # Availability
    "DateOverride",
    "DayBadges",
    "FREE_DAY",
    # Pricing
    "NightlyPrice",
    "PricingBreakdown",
    # Selection
    "DateClickResult",
    "SelectionState",
    # Booking
    "AccommodationData",
    "SubmitResult",
    # Errors
    "BookingError",
    "ErrorCode",
    "ErrorResponse",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
]
