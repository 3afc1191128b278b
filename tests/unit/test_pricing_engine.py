"""Unit tests for StayPricingEngine.

Tests verify:
- Per-night pricing over [checkin, checkout) for each selected unit
- Subtotal/discount/total aggregation without double discounting
- Deposit/balance split that never loses a cent
- Whole-property pricing and per-unit early-bird eligibility
- Zero breakdowns for empty selections and invalid ranges
"""

import datetime as dt

import pytest

from booking_core.config import BookingSettings
from booking_core.models import (
    AccommodationUnit,
    BookingError,
    DateRange,
    ErrorCode,
    PriceSource,
)
from booking_core.services import AvailabilityOverlay, StayPricingEngine


# === Test Configuration ===

TODAY = dt.date(2025, 5, 1)
JUNE_1 = dt.date(2025, 6, 1)
JUNE_2 = dt.date(2025, 6, 2)
JUNE_4 = dt.date(2025, 6, 4)

THREE_NIGHTS = DateRange(checkin=JUNE_1, checkout=JUNE_4)


class TestBasicPricing:
    """Tests for the reference pricing scenarios."""

    def test_three_nights_base_price(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """3 nights at 100 with 50% deposit: 300 total, 150/150 split."""
        breakdown = engine.compute(THREE_NIGHTS, [cabin], empty_overlay, today=TODAY)

        assert breakdown.nights == 3
        assert breakdown.subtotal == 30000
        assert breakdown.discount == 0
        assert breakdown.total == 30000
        assert breakdown.deposit_amount == 15000
        assert breakdown.balance_amount == 15000
        assert breakdown.is_submittable is True

    def test_special_price_night(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
        day_entry,
    ) -> None:
        """A special price of 80 on June 2 gives nightly [100, 80, 100]."""
        overlay = AvailabilityOverlay.from_payload({"2025-06-02": day_entry(price=80)})

        breakdown = engine.compute(THREE_NIGHTS, [cabin], overlay, today=TODAY)

        nightly = breakdown.per_unit_nightly["cabin-1"]
        assert [n.price for n in nightly] == [10000, 8000, 10000]
        assert [n.source for n in nightly] == [
            PriceSource.BASE,
            PriceSource.SPECIAL,
            PriceSource.BASE,
        ]
        assert breakdown.subtotal == 28000

    def test_checkout_night_is_not_priced(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
    ) -> None:
        """A special price on the checkout day does not affect the stay."""
        overlay = AvailabilityOverlay.from_payload({"2025-06-04": {"price": 500}})

        breakdown = engine.compute(THREE_NIGHTS, [cabin], overlay, today=TODAY)

        assert [n.date for n in breakdown.per_unit_nightly["cabin-1"]] == [
            JUNE_1,
            JUNE_2,
            dt.date(2025, 6, 3),
        ]
        assert breakdown.subtotal == 30000


class TestEarlyBird:
    """Tests for early-bird pricing and the informational discount."""

    def test_early_bird_discount_is_informational(
        self,
        engine: StayPricingEngine,
        early_bird_cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Nightly 80, subtotal 240, discount 60, total still equals subtotal."""
        breakdown = engine.compute(THREE_NIGHTS, [early_bird_cabin], empty_overlay, today=TODAY)

        assert all(n.price == 8000 for n in breakdown.per_unit_nightly["cabin-2"])
        assert breakdown.subtotal == 8000 * 3
        assert breakdown.discount == 2000 * 3
        assert breakdown.total == breakdown.subtotal

    def test_not_eligible_close_to_checkin(
        self,
        engine: StayPricingEngine,
        early_bird_cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Booking 10 days ahead with a 30 day window pays base price."""
        breakdown = engine.compute(
            THREE_NIGHTS,
            [early_bird_cabin],
            empty_overlay,
            today=JUNE_1 - dt.timedelta(days=10),
        )

        assert breakdown.subtotal == 30000
        assert breakdown.discount == 0
        assert not breakdown.has_source(PriceSource.EARLY_BIRD)

    def test_eligibility_boundary_is_inclusive(
        self,
        engine: StayPricingEngine,
        early_bird_cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Exactly early_bird_days before check-in qualifies."""
        assert engine.is_early_bird_eligible(
            early_bird_cabin, JUNE_1, JUNE_1 - dt.timedelta(days=30)
        )
        assert not engine.is_early_bird_eligible(
            early_bird_cabin, JUNE_1, JUNE_1 - dt.timedelta(days=29)
        )

    def test_mixed_eligibility_is_per_unit(
        self,
        engine: StayPricingEngine,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Units with different cutoffs are evaluated independently."""
        short_window = AccommodationUnit(
            id="a", base_price=10000, early_bird_price=9000, early_bird_days=14
        )
        long_window = AccommodationUnit(
            id="b", base_price=10000, early_bird_price=7000, early_bird_days=60
        )

        breakdown = engine.compute(
            THREE_NIGHTS, [short_window, long_window], empty_overlay, today=TODAY
        )

        assert {n.source for n in breakdown.per_unit_nightly["a"]} == {PriceSource.EARLY_BIRD}
        assert {n.source for n in breakdown.per_unit_nightly["b"]} == {PriceSource.BASE}
        assert breakdown.subtotal == 9000 * 3 + 10000 * 3
        assert breakdown.discount == 1000 * 3

    def test_switched_off_pays_base_price(
        self,
        early_bird_cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """With early bird disabled, even a long-ahead booking pays base price."""
        engine = StayPricingEngine(BookingSettings(early_bird_enabled=False))

        breakdown = engine.compute(THREE_NIGHTS, [early_bird_cabin], empty_overlay, today=TODAY)

        assert engine.is_early_bird_eligible(early_bird_cabin, JUNE_1, TODAY) is False
        assert breakdown.subtotal == 30000
        assert breakdown.discount == 0

    def test_default_price_for_units_without_rate(
        self,
        cabin: AccommodationUnit,
        early_bird_cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """The configured default rate applies only where a unit has none."""
        engine = StayPricingEngine(
            BookingSettings(early_bird_enabled=True, early_bird_default_price=9000)
        )

        breakdown = engine.compute(
            THREE_NIGHTS, [cabin, early_bird_cabin], empty_overlay, today=TODAY
        )

        assert {n.price for n in breakdown.per_unit_nightly["cabin-1"]} == {9000}
        assert {n.price for n in breakdown.per_unit_nightly["cabin-2"]} == {8000}
        assert breakdown.discount == 1000 * 3 + 2000 * 3

    def test_default_price_not_below_base_is_ignored(
        self,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """A default rate above a cheap unit's base price is never charged."""
        engine = StayPricingEngine(
            BookingSettings(early_bird_enabled=True, early_bird_default_price=9000)
        )
        tent = AccommodationUnit(id="tent-1", base_price=4500)

        breakdown = engine.compute(THREE_NIGHTS, [tent], empty_overlay, today=TODAY)

        assert breakdown.source_counts() == {"base": 3}
        assert breakdown.subtotal == 4500 * 3

    def test_special_night_inside_early_bird_stay(
        self,
        engine: StayPricingEngine,
        early_bird_cabin: AccommodationUnit,
        day_entry,
    ) -> None:
        """Special pricing wins on its night; discount only counts early-bird nights."""
        overlay = AvailabilityOverlay.from_payload({"2025-06-02": day_entry(price=150)})

        breakdown = engine.compute(THREE_NIGHTS, [early_bird_cabin], overlay, today=TODAY)

        nightly = breakdown.per_unit_nightly["cabin-2"]
        assert nightly[1].source is PriceSource.SPECIAL
        assert breakdown.subtotal == 8000 + 15000 + 8000
        assert breakdown.discount == 2000 * 2


class TestDepositSplit:
    """Tests for deposit and balance rounding."""

    @pytest.mark.parametrize(
        ("base_price", "deposit_percent", "expected_deposit"),
        [
            (3333, 50, 5000),  # 9999 * 0.5 rounds half-up
            (3333, 30, 3000),
            (1001, 33, 991),
            (10000, 0, 0),
            (10000, 100, 30000),
        ],
    )
    def test_deposit_plus_balance_equals_total(
        self,
        empty_overlay: AvailabilityOverlay,
        base_price: int,
        deposit_percent: int,
        expected_deposit: int,
    ) -> None:
        """Deposit is rounded half-up; the balance takes the remainder."""
        engine = StayPricingEngine(BookingSettings(deposit_percent=deposit_percent))
        unit = AccommodationUnit(id="u", base_price=base_price)

        breakdown = engine.compute(THREE_NIGHTS, [unit], empty_overlay, today=TODAY)

        assert breakdown.deposit_amount == expected_deposit
        assert breakdown.deposit_amount + breakdown.balance_amount == breakdown.total

    def test_deposit_percent_argument_overrides_settings(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """An explicit deposit percentage wins over the configured one."""
        breakdown = engine.compute(
            THREE_NIGHTS, [cabin], empty_overlay, deposit_percent=30, today=TODAY
        )

        assert breakdown.deposit_percent == 30
        assert breakdown.deposit_amount == 9000
        assert breakdown.balance_amount == 21000


class TestWholeProperty:
    """Tests for whole-property pricing."""

    def test_prices_every_unit(
        self,
        engine: StayPricingEngine,
        property_units: list[AccommodationUnit],
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Whole-property prices all known units, ignoring the individual list."""
        breakdown = engine.compute(
            THREE_NIGHTS,
            [],
            empty_overlay,
            whole_property=True,
            all_units=property_units,
            today=TODAY,
        )

        assert breakdown.unit_count == 3
        assert breakdown.whole_property is True
        assert set(breakdown.per_unit_nightly) == {"cabin-1", "cabin-2", "tent-1"}
        # 100 base + 80 early bird + 45 base, for 3 nights
        assert breakdown.subtotal == (10000 + 8000 + 4500) * 3
        assert breakdown.property_wide_rate is False

    def test_flat_special_price_supersedes_unit_prices(
        self,
        engine: StayPricingEngine,
        property_units: list[AccommodationUnit],
        day_entry,
    ) -> None:
        """A flat special price on every night applies per unit per night."""
        overlay = AvailabilityOverlay.from_payload(
            {
                "2025-06-01": day_entry(price=200, is_private_event=True),
                "2025-06-02": day_entry(price=200, is_private_event=True),
                "2025-06-03": day_entry(price=200, is_private_event=True),
            }
        )

        breakdown = engine.compute(
            THREE_NIGHTS,
            [],
            overlay,
            whole_property=True,
            all_units=property_units,
            today=TODAY,
        )

        assert breakdown.property_wide_rate is True
        assert breakdown.subtotal == 20000 * 3 * 3
        assert breakdown.discount == 0
        assert breakdown.source_counts() == {"special": 9}


class TestZeroBreakdown:
    """Tests for degraded and empty results."""

    def test_no_units_selected(
        self,
        engine: StayPricingEngine,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """No units and no whole-property flag: all zero, not submittable."""
        breakdown = engine.compute(THREE_NIGHTS, [], empty_overlay, today=TODAY)

        assert breakdown.total == 0
        assert breakdown.deposit_amount == 0
        assert breakdown.balance_amount == 0
        assert breakdown.per_unit_nightly == {}
        assert breakdown.is_submittable is False
        assert breakdown.checkin == JUNE_1

    def test_whole_property_without_known_units(
        self,
        engine: StayPricingEngine,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Whole-property with an empty catalogue degrades to zero."""
        breakdown = engine.compute(
            THREE_NIGHTS, [], empty_overlay, whole_property=True, all_units=[], today=TODAY
        )

        assert breakdown.is_zero
        assert breakdown.is_submittable is False

    @pytest.mark.parametrize("checkout", [JUNE_1, JUNE_1 - dt.timedelta(days=2)])
    def test_invalid_range_degrades_to_zero(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
        checkout: dt.date,
    ) -> None:
        """checkout <= checkin returns the zero breakdown instead of raising."""
        breakdown = engine.compute_for_dates(JUNE_1, checkout, [cabin], empty_overlay, today=TODAY)

        assert breakdown.is_zero
        assert breakdown.is_submittable is False

    def test_invalid_range_raises_in_strict_mode(
        self,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Strict mode surfaces the invariant violation."""
        engine = StayPricingEngine(BookingSettings(strict_invariants=True))

        with pytest.raises(BookingError) as exc_info:
            engine.compute_for_dates(JUNE_1, JUNE_1, [cabin], empty_overlay)

        assert exc_info.value.code is ErrorCode.INVALID_DATE_RANGE

    def test_valid_dates_are_priced(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """compute_for_dates delegates valid pairs to compute."""
        breakdown = engine.compute_for_dates(JUNE_1, JUNE_4, [cabin], empty_overlay, today=TODAY)

        assert breakdown.total == 30000


class TestTaxHook:
    """Tests for the flat tax rate hook."""

    def test_flat_tax_added_to_total(
        self,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """A 10% flat tax is added on top of the subtotal."""
        engine = StayPricingEngine(BookingSettings(tax_percent=10))

        breakdown = engine.compute(THREE_NIGHTS, [cabin], empty_overlay, today=TODAY)

        assert breakdown.subtotal == 30000
        assert breakdown.tax_amount == 3000
        assert breakdown.total == 33000
        assert breakdown.deposit_amount + breakdown.balance_amount == 33000

    def test_duplicate_units_priced_once(
        self,
        engine: StayPricingEngine,
        cabin: AccommodationUnit,
        empty_overlay: AvailabilityOverlay,
    ) -> None:
        """Selecting the same unit twice does not double the price."""
        breakdown = engine.compute(THREE_NIGHTS, [cabin, cabin], empty_overlay, today=TODAY)

        assert breakdown.unit_count == 1
        assert breakdown.subtotal == 30000
