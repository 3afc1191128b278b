"""Booking core services."""

from .ajax_client import AvailabilityBackend, WordPressAjaxClient
from .availability import AvailabilityOverlay, parse_override
from .pricing import StayPricingEngine
from .selection import CalendarSelectionMachine, UnitSelection
from .session import BookingFormSession

__all__ = [
    "AvailabilityBackend",
    "AvailabilityOverlay",
    "BookingFormSession",
    "CalendarSelectionMachine",
    "StayPricingEngine",
    "UnitSelection",
    "WordPressAjaxClient",
    "parse_override",
]
