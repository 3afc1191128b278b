"""Per-date availability override models.

The backend availability endpoint returns a sparse map keyed by ISO
date. A date with no entry is free with no override.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import DayStatus


class DayBadges(BaseModel):
    """Calendar badges shown on a day cell (display only)."""

    model_config = ConfigDict(strict=True, frozen=True)

    private: bool = False
    special: bool = False


class DateOverride(BaseModel):
    """Date-level override: occupancy, special price and private-event lockout."""

    model_config = ConfigDict(strict=True, frozen=True)

    status: DayStatus = Field(default=DayStatus.FREE, description="Occupancy status")
    special_price: int | None = Field(
        default=None,
        ge=0,
        description="Special nightly price in cents; wins over early bird and base",
    )
    is_private_event: bool = Field(
        default=False,
        description="Date requires whole-property booking",
    )
    badges: DayBadges = Field(default_factory=DayBadges)

    @property
    def has_special_price(self) -> bool:
        """Whether a positive special price is set."""
        return self.special_price is not None and self.special_price > 0


FREE_DAY = DateOverride()
