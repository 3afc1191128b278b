"""Stay pricing engine.

Turns a date range, a unit selection and the availability overlay into
a per-night price series per unit plus aggregate totals:

- subtotal: sum of every (unit, night) price, already net of early bird
- discount: early-bird saving, shown to the guest but never subtracted
  again (subtracting it from the subtotal was a double discount)
- total: subtotal plus flat-rate tax, never below zero
- deposit/balance: deposit rounded half-up to the cent, balance is the
  remainder so the two always add up to the total

All amounts are in cents.
"""

import datetime as dt
from collections.abc import Iterable

from booking_core.config import BookingSettings
from booking_core.models import (
    AccommodationUnit,
    BookingError,
    DateRange,
    ErrorCode,
    NightlyPrice,
    PricingBreakdown,
)
from booking_core.utils.logging import get_logger, log_pricing_operation
from booking_core.utils.money import percent_of

from .availability import AvailabilityOverlay

logger = get_logger(__name__)


class StayPricingEngine:
    """Pure pricing service; holds settings only, no state across calls."""

    def __init__(self, settings: BookingSettings | None = None) -> None:
        """Initialize pricing engine.

        Args:
            settings: Booking settings. Defaults to BookingSettings().
        """
        self.settings = settings or BookingSettings()

    def is_early_bird_eligible(
        self,
        unit: AccommodationUnit,
        checkin: dt.date,
        today: dt.date,
    ) -> bool:
        """Check a unit's early-bird eligibility for a check-in date.

        Nothing is eligible while early bird is switched off. Each unit
        is evaluated against its own cutoff, falling back to the global
        ``early_bird_days``.
        """
        if not self.settings.early_bird_enabled:
            return False
        cutoff = (
            unit.early_bird_days
            if unit.early_bird_days is not None
            else self.settings.early_bird_days
        )
        return (checkin - today).days >= cutoff

    def early_bird_price_for(self, unit: AccommodationUnit) -> int | None:
        """The unit's own early-bird rate, else the configured default rate."""
        if unit.early_bird_price:
            return unit.early_bird_price
        return self.settings.early_bird_default_price or None

    def compute(
        self,
        date_range: DateRange,
        units: Iterable[AccommodationUnit],
        overlay: AvailabilityOverlay,
        *,
        whole_property: bool = False,
        all_units: Iterable[AccommodationUnit] | None = None,
        deposit_percent: int | None = None,
        today: dt.date | None = None,
    ) -> PricingBreakdown:
        """Price a stay.

        Args:
            date_range: Validated check-in/check-out pair
            units: Individually selected units
            overlay: Availability overlay for special prices and lockouts
            whole_property: Price every unit in ``all_units`` instead of ``units``
            all_units: Every known unit (required for whole-property pricing)
            deposit_percent: Deposit percentage; defaults to the settings value
            today: Reference day for early-bird eligibility

        Returns:
            PricingBreakdown for the stay
        """
        today = today or dt.date.today()
        percent = self.settings.deposit_percent if deposit_percent is None else deposit_percent

        priced_units = _unique(all_units or []) if whole_property else _unique(units)
        if not priced_units:
            logger.debug("No units selected for %s; returning zero breakdown", date_range)
            return PricingBreakdown.zero(
                deposit_percent=percent,
                currency=self.settings.currency,
                checkin=date_range.checkin,
                checkout=date_range.checkout,
            )

        nights = date_range.night_dates()
        per_unit: dict[str, list[NightlyPrice]] = {}
        for unit in priced_units:
            eligible = self.is_early_bird_eligible(unit, date_range.checkin, today)
            per_unit[unit.id] = [
                overlay.price_for(
                    unit.id,
                    night,
                    unit.base_price,
                    self.early_bird_price_for(unit),
                    eligible,
                )
                for night in nights
            ]

        subtotal = sum(n.price for nightly in per_unit.values() for n in nightly)
        discount = sum(n.saving for nightly in per_unit.values() for n in nightly)
        tax_amount = percent_of(subtotal, self.settings.tax_percent)
        total = max(0, subtotal + tax_amount)
        deposit_amount = percent_of(total, percent)

        breakdown = PricingBreakdown(
            checkin=date_range.checkin,
            checkout=date_range.checkout,
            nights=date_range.nights,
            unit_count=len(priced_units),
            whole_property=whole_property,
            property_wide_rate=(
                whole_property and overlay.flat_special_price(date_range) is not None
            ),
            subtotal=subtotal,
            discount=discount,
            tax_amount=tax_amount,
            total=total,
            deposit_percent=percent,
            deposit_amount=deposit_amount,
            balance_amount=total - deposit_amount,
            currency=self.settings.currency,
            per_unit_nightly=per_unit,
            is_submittable=True,
        )

        log_pricing_operation(
            logger,
            "compute",
            nights=breakdown.nights,
            unit_count=breakdown.unit_count,
            total=breakdown.total,
            whole_property=whole_property,
            source_counts=breakdown.source_counts(),
        )
        return breakdown

    def compute_for_dates(
        self,
        checkin: dt.date,
        checkout: dt.date,
        units: Iterable[AccommodationUnit],
        overlay: AvailabilityOverlay,
        **kwargs: object,
    ) -> PricingBreakdown:
        """Price a possibly-invalid date pair.

        A pair with ``checkout <= checkin`` is a programmer error: it
        raises in strict mode and degrades to the zero breakdown
        otherwise, so a stale UI call never breaks the form.

        Raises:
            BookingError: INVALID_DATE_RANGE, only with ``strict_invariants``
        """
        if checkout <= checkin:
            details = {"checkin": checkin.isoformat(), "checkout": checkout.isoformat()}
            if self.settings.strict_invariants:
                raise BookingError(ErrorCode.INVALID_DATE_RANGE, details)
            log_pricing_operation(
                logger,
                "compute_for_dates",
                nights=(checkout - checkin).days,
                error="pricing requested for a range without nights",
                **details,
            )
            percent = kwargs.get("deposit_percent")
            return PricingBreakdown.zero(
                deposit_percent=self.settings.deposit_percent if percent is None else percent,
                currency=self.settings.currency,
            )

        date_range = DateRange(checkin=checkin, checkout=checkout)
        return self.compute(date_range, units, overlay, **kwargs)


def _unique(units: Iterable[AccommodationUnit]) -> list[AccommodationUnit]:
    """Drop repeated unit ids, keeping first occurrence order."""
    seen: set[str] = set()
    result = []
    for unit in units:
        if unit.id not in seen:
            seen.add(unit.id)
            result.append(unit)
    return result
