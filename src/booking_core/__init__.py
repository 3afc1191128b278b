"""Stay pricing and check-in/check-out selection engine for booking forms."""

from .config import BookingSettings
from .services import (
    AvailabilityOverlay,
    BookingFormSession,
    CalendarSelectionMachine,
    StayPricingEngine,
    WordPressAjaxClient,
)

__version__ = "0.1.0"

__all__ = [
    "AvailabilityOverlay",
    "BookingFormSession",
    "BookingSettings",
    "CalendarSelectionMachine",
    "StayPricingEngine",
    "WordPressAjaxClient",
]
