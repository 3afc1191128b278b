"""Stay models: the requested date range and the bookable units.

Amounts are in cents.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from booking_core.utils.dates import iter_nights


class DateRange(BaseModel):
    """A check-in/check-out pair.

    Check-out is exclusive: the guest departs that day and does not
    occupy it, so a stay has ``checkout - checkin`` nights.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    checkin: dt.date = Field(..., description="Arrival day")
    checkout: dt.date = Field(..., description="Departure day (exclusive)")

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        """Zero-night and reversed stays are invalid."""
        if self.checkin >= self.checkout:
            raise ValueError("checkin must be strictly before checkout")
        return self

    @property
    def nights(self) -> int:
        """Number of nights in the stay."""
        return (self.checkout - self.checkin).days

    def night_dates(self) -> list[dt.date]:
        """Every occupied night, checkout day excluded."""
        return list(iter_nights(self.checkin, self.checkout))

    def __str__(self) -> str:
        return f"{self.checkin.isoformat()}..{self.checkout.isoformat()}"


class AccommodationUnit(BaseModel):
    """A selectable accommodation unit (room, cabin, tent...)."""

    model_config = ConfigDict(strict=True, frozen=True)

    id: str = Field(..., min_length=1, description="Unit identifier")
    name: str = Field(default="", description="Display name")
    base_price: int = Field(..., ge=0, description="Regular nightly rate in cents")
    early_bird_price: int | None = Field(
        default=None,
        ge=0,
        description="Discounted nightly rate in cents for early bookings",
    )
    early_bird_days: int | None = Field(
        default=None,
        ge=0,
        description="Days before check-in needed for early bird; None uses the global setting",
    )

    @property
    def has_early_bird_rate(self) -> bool:
        """Whether the unit has an early-bird rate below its base rate."""
        return (
            self.early_bird_price is not None
            and 0 < self.early_bird_price < self.base_price
        )
