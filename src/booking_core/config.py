"""Booking form settings.

Values come from the plugin's pricing settings. ``BookingSettings.from_env``
reads them from environment variables with the plugin defaults.
"""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DEPOSIT_PERCENT = 50
DEFAULT_EARLY_BIRD_DAYS = 30


class BookingSettings(BaseModel):
    """Settings shared by the pricing engine, selection machine and AJAX client."""

    model_config = ConfigDict(frozen=True)

    deposit_percent: int = Field(default=DEFAULT_DEPOSIT_PERCENT, ge=0, le=100)
    early_bird_enabled: bool = Field(default=False, description="Apply early-bird pricing at all")
    early_bird_days: int = Field(
        default=DEFAULT_EARLY_BIRD_DAYS,
        ge=0,
        description="Days before check-in from which early bird applies",
    )
    early_bird_default_price: int = Field(
        default=0,
        ge=0,
        description="Early-bird nightly rate in cents for units without their own (0 = none)",
    )
    min_nights: int = Field(default=1, ge=1)
    tax_percent: float = Field(default=0.0, ge=0, le=100, description="Flat tax rate")
    currency: str = Field(default="EUR", min_length=1)
    strict_invariants: bool = Field(
        default=False,
        description="Raise on invariant violations instead of degrading (debug builds)",
    )
    ajax_url: str = ""
    ajax_timeout: float = Field(default=10.0, gt=0)
    ajax_nonce: str = ""

    @classmethod
    def from_env(cls) -> "BookingSettings":
        """Build settings from ``BOOKING_*`` environment variables.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        return cls(
            deposit_percent=os.getenv("BOOKING_DEPOSIT_PERCENT", str(DEFAULT_DEPOSIT_PERCENT)),
            early_bird_enabled=os.getenv("BOOKING_EARLY_BIRD_ENABLED", "false"),
            early_bird_days=os.getenv("BOOKING_EARLY_BIRD_DAYS", str(DEFAULT_EARLY_BIRD_DAYS)),
            early_bird_default_price=os.getenv("BOOKING_EARLY_BIRD_DEFAULT_PRICE", "0"),
            min_nights=os.getenv("BOOKING_MIN_NIGHTS", "1"),
            tax_percent=os.getenv("BOOKING_TAX_PERCENT", "0"),
            currency=os.getenv("BOOKING_CURRENCY", "EUR"),
            strict_invariants=os.getenv("BOOKING_STRICT_INVARIANTS", "false"),
            ajax_url=os.getenv("BOOKING_AJAX_URL", ""),
            ajax_timeout=os.getenv("BOOKING_AJAX_TIMEOUT", "10.0"),
            ajax_nonce=os.getenv("BOOKING_AJAX_NONCE", ""),
        )
