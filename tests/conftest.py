"""Pytest configuration and fixtures for booking core tests.

This module provides reusable fixtures for testing:
- Sample accommodation units (cabins with and without early-bird rates)
- Availability overlays built from backend-shaped payloads
- Pricing engine, selection machine and booking session wiring
"""

import datetime as dt
from typing import Any

import pytest

from booking_core.config import BookingSettings
from booking_core.models import AccommodationUnit
from booking_core.services import (
    AvailabilityOverlay,
    BookingFormSession,
    CalendarSelectionMachine,
    StayPricingEngine,
    UnitSelection,
)

# === Clock ===

# 31 days before the June stays used throughout the tests, so the default
# 30-day early-bird window applies unless a unit overrides it.
TODAY = dt.date(2025, 5, 1)


def _day_entry(
    status: str = "free",
    price: Any = 0,
    is_private_event: bool = False,
    **badges: bool,
) -> dict[str, Any]:
    """Backend-shaped day data for an availability payload."""
    return {
        "status": status,
        "price": price,
        "is_private_event": is_private_event,
        "badges": {"private": is_private_event, "special": bool(price), **badges},
    }


@pytest.fixture
def day_entry() -> Any:
    """Factory for backend-shaped day data."""
    return _day_entry


# === Sample Data Fixtures ===


@pytest.fixture
def settings() -> BookingSettings:
    """50% deposit, early bird on with a 30-day window, 1 night minimum."""
    return BookingSettings(early_bird_enabled=True)


@pytest.fixture
def cabin() -> AccommodationUnit:
    """Unit with base price 100.00 and no early-bird rate."""
    return AccommodationUnit(id="cabin-1", name="Forest Cabin", base_price=10000)


@pytest.fixture
def early_bird_cabin() -> AccommodationUnit:
    """Unit with base price 100.00 and early-bird price 80.00."""
    return AccommodationUnit(
        id="cabin-2",
        name="Lake Cabin",
        base_price=10000,
        early_bird_price=8000,
    )


@pytest.fixture
def property_units(cabin: AccommodationUnit, early_bird_cabin: AccommodationUnit) -> list[AccommodationUnit]:
    """Every unit of the sample property."""
    return [
        cabin,
        early_bird_cabin,
        AccommodationUnit(id="tent-1", name="Meadow Tent", base_price=4500),
    ]


@pytest.fixture
def empty_overlay() -> AvailabilityOverlay:
    """Overlay with no overrides (every date free, base pricing)."""
    return AvailabilityOverlay()


@pytest.fixture
def private_event_overlay() -> AvailabilityOverlay:
    """Overlay with a private event on the night of June 2."""
    return AvailabilityOverlay.from_payload(
        {"2025-06-02": _day_entry(is_private_event=True)}
    )


# === Service Fixtures ===


@pytest.fixture
def engine(settings: BookingSettings) -> StayPricingEngine:
    """Pricing engine with default settings."""
    return StayPricingEngine(settings)


@pytest.fixture
def unit_selection() -> UnitSelection:
    """Empty unit selection."""
    return UnitSelection()


@pytest.fixture
def machine(
    engine: StayPricingEngine,
    property_units: list[AccommodationUnit],
    unit_selection: UnitSelection,
) -> CalendarSelectionMachine:
    """Selection machine over the sample property with no overrides."""
    return CalendarSelectionMachine(engine, property_units, unit_selection)


@pytest.fixture
def session(property_units: list[AccommodationUnit], settings: BookingSettings) -> BookingFormSession:
    """Booking form session pinned to TODAY."""
    return BookingFormSession(
        property_units,
        settings=settings,
        session_id="form-test",
        today=lambda: TODAY,
    )
