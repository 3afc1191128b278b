"""Pricing result models.

Nightly prices and breakdowns are derived values: they are recomputed
from units, overrides and the date range on every pricing pass and are
never persisted. All amounts are in cents.
"""

import datetime as dt
from collections import Counter

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import PriceSource


class NightlyPrice(BaseModel):
    """Resolved price of one unit for one night."""

    model_config = ConfigDict(strict=True, frozen=True)

    unit_id: str
    date: dt.date
    price: int = Field(..., ge=0, description="Price charged for the night in cents")
    source: PriceSource
    regular_price: int = Field(..., ge=0, description="Unit base price for comparison")
    is_private_event: bool = False

    @property
    def saving(self) -> int:
        """Early-bird saving against the base price (0 for other sources)."""
        if self.source is PriceSource.EARLY_BIRD:
            return self.regular_price - self.price
        return 0


class PricingBreakdown(BaseModel):
    """Aggregate pricing for a stay.

    ``subtotal`` is already net of early-bird pricing; ``discount`` is
    the early-bird saving shown to the guest and is never subtracted a
    second time. ``deposit_amount + balance_amount == total`` always.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    checkin: dt.date | None = None
    checkout: dt.date | None = None
    nights: int = Field(default=0, ge=0)
    unit_count: int = Field(default=0, ge=0)
    whole_property: bool = False
    property_wide_rate: bool = Field(
        default=False,
        description="A single special price covered every night of the stay",
    )

    subtotal: int = Field(default=0, ge=0)
    discount: int = Field(default=0, ge=0, description="Informational early-bird saving")
    tax_amount: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    deposit_percent: int = Field(default=0, ge=0, le=100)
    deposit_amount: int = Field(default=0, ge=0)
    balance_amount: int = Field(default=0, ge=0)
    currency: str = "EUR"

    per_unit_nightly: dict[str, list[NightlyPrice]] = Field(default_factory=dict)
    is_submittable: bool = False

    @model_validator(mode="after")
    def validate_payment_split(self) -> "PricingBreakdown":
        """Deposit and balance must add up to the total to the cent."""
        if self.deposit_amount + self.balance_amount != self.total:
            raise ValueError("deposit_amount + balance_amount must equal total")
        return self

    @classmethod
    def zero(
        cls,
        *,
        deposit_percent: int = 0,
        currency: str = "EUR",
        checkin: dt.date | None = None,
        checkout: dt.date | None = None,
    ) -> "PricingBreakdown":
        """All-zero breakdown: valid for display, not submittable."""
        return cls(
            checkin=checkin,
            checkout=checkout,
            deposit_percent=deposit_percent,
            currency=currency,
        )

    @property
    def is_zero(self) -> bool:
        return self.total == 0 and not self.per_unit_nightly

    def unit_subtotal(self, unit_id: str) -> int:
        """Sum of nightly prices for one unit."""
        return sum(n.price for n in self.per_unit_nightly.get(unit_id, []))

    def source_counts(self) -> dict[str, int]:
        """Number of nightly prices per source, for logging and badges."""
        counts: Counter[str] = Counter()
        for nightly in self.per_unit_nightly.values():
            counts.update(n.source.value for n in nightly)
        return dict(counts)

    def has_source(self, source: PriceSource) -> bool:
        return any(
            n.source is source
            for nightly in self.per_unit_nightly.values()
            for n in nightly
        )
