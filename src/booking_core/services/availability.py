"""Availability overlay: per-night lookups over the sparse override map."""

import datetime as dt
from collections.abc import Mapping
from typing import Any

from booking_core.models import (
    FREE_DAY,
    DateOverride,
    DateRange,
    DayBadges,
    DayStatus,
    NightlyPrice,
    PriceSource,
)
from booking_core.utils.dates import date_key, to_date
from booking_core.utils.logging import get_logger
from booking_core.utils.money import to_cents

logger = get_logger(__name__)


class AvailabilityOverlay:
    """Read-only adapter over the backend's per-date override map.

    Dates without an entry are free with no special price. The overlay
    never changes after construction; fetch results produce a new one
    through ``merge``.
    """

    def __init__(self, overrides: Mapping[dt.date, DateOverride] | None = None) -> None:
        """Initialize the overlay.

        Args:
            overrides: Validated overrides keyed by calendar day
        """
        self._overrides: dict[dt.date, DateOverride] = dict(overrides or {})

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "AvailabilityOverlay":
        """Build an overlay from the backend availability response.

        Expected shape::

            {"2025-06-02": {"status": "free", "price": 80,
                            "is_private_event": false,
                            "badges": {"private": false, "special": true}}}

        Malformed entries are dropped with a warning so the affected
        date falls back to base pricing.

        Args:
            payload: Map of ISO date to day data

        Returns:
            New AvailabilityOverlay
        """
        overrides: dict[dt.date, DateOverride] = {}
        for raw_key, raw_entry in (payload or {}).items():
            day = to_date(raw_key)
            if day is None:
                logger.warning("Dropping override with invalid date key: %r", raw_key)
                continue
            entry = parse_override(raw_entry)
            if entry is None:
                logger.warning("Dropping malformed override for %s", date_key(day))
                continue
            overrides[day] = entry
        return cls(overrides)

    def merge(self, other: "AvailabilityOverlay") -> "AvailabilityOverlay":
        """Return a new overlay where ``other``'s entries replace ours per date."""
        merged = dict(self._overrides)
        merged.update(other._overrides)
        return AvailabilityOverlay(merged)

    def __len__(self) -> int:
        return len(self._overrides)

    def __contains__(self, day: object) -> bool:
        return day in self._overrides

    def override_for(self, day: dt.date) -> DateOverride:
        """Override for a day, or the free default."""
        return self._overrides.get(day, FREE_DAY)

    def status_for(self, day: dt.date) -> DayStatus:
        return self.override_for(day).status

    def is_checkin_blocked(self, day: dt.date) -> bool:
        """Booked/pending/blocked/external days cannot be arrival days."""
        return self.status_for(day) is not DayStatus.FREE

    def price_for(
        self,
        unit_id: str,
        day: dt.date,
        base_price: int,
        early_bird_price: int | None,
        is_eligible_for_early_bird: bool,
    ) -> NightlyPrice:
        """Resolve one unit's price for one night.

        Precedence, strictly in this order:
        1. positive special price for the date
        2. early-bird price, if eligible and below the base price
        3. base price

        Args:
            unit_id: Unit being priced
            day: Night being priced
            base_price: Unit base price in cents
            early_bird_price: Unit early-bird price in cents, if any
            is_eligible_for_early_bird: Whether the unit qualifies for early bird

        Returns:
            NightlyPrice with the winning tier
        """
        override = self.override_for(day)

        if override.has_special_price:
            price, source = override.special_price, PriceSource.SPECIAL
        elif (
            is_eligible_for_early_bird
            and early_bird_price is not None
            and 0 < early_bird_price < base_price
        ):
            price, source = early_bird_price, PriceSource.EARLY_BIRD
        else:
            price, source = base_price, PriceSource.BASE

        return NightlyPrice(
            unit_id=unit_id,
            date=day,
            price=price,
            source=source,
            regular_price=base_price,
            is_private_event=override.is_private_event,
        )

    def is_private_event_locked(self, day: dt.date) -> bool:
        """Whether a single date carries a private event."""
        return self.override_for(day).is_private_event

    def private_event_dates(self, date_range: DateRange) -> list[dt.date]:
        """Locked nights of a stay, checkout day excluded."""
        return [d for d in date_range.night_dates() if self.is_private_event_locked(d)]

    def requires_whole_property_booking(self, date_range: DateRange) -> bool:
        """True iff any night in ``[checkin, checkout)`` is a private event."""
        return any(self.is_private_event_locked(d) for d in date_range.night_dates())

    def flat_special_price(self, date_range: DateRange) -> int | None:
        """The single special price shared by every night, else None."""
        prices = {self.override_for(d).special_price for d in date_range.night_dates()}
        if len(prices) != 1:
            return None
        price = prices.pop()
        if price is None or price <= 0:
            return None
        return price


def parse_override(raw: Any) -> DateOverride | None:
    """Validate one backend day entry.

    Display-only statuses such as ``special`` or ``private`` (and any
    other value outside DayStatus) count as free for check-in; the
    price and private-event flag of the entry are kept.

    Args:
        raw: Day data from the availability payload

    Returns:
        DateOverride, or None when the entry is malformed (non-mapping
        body, negative or non-numeric price, non-boolean flags, private
        badge contradicting the private-event flag)
    """
    if not isinstance(raw, Mapping):
        return None

    raw_status = str(raw.get("status") or DayStatus.FREE.value).lower()
    try:
        status = DayStatus(raw_status)
    except ValueError:
        logger.debug("Treating status %r as free", raw_status)
        status = DayStatus.FREE

    special_price: int | None = None
    raw_price = raw.get("price")
    if raw_price not in (None, ""):
        special_price = to_cents(raw_price)
        if special_price is None or special_price < 0:
            return None

    is_private_event = _php_bool(raw.get("is_private_event", False))
    if is_private_event is None:
        return None

    raw_badges = raw.get("badges") or {}
    if not isinstance(raw_badges, Mapping):
        return None
    private_badge = _php_bool(raw_badges.get("private", False))
    special_badge = _php_bool(raw_badges.get("special", False))
    if private_badge is None or special_badge is None:
        return None
    if "private" in raw_badges and private_badge != is_private_event:
        return None

    return DateOverride(
        status=status,
        special_price=special_price,
        is_private_event=is_private_event,
        badges=DayBadges(private=private_badge, special=special_badge),
    )


def _php_bool(value: Any) -> bool | None:
    """Read a flag that PHP may send as bool, 0/1 or "0"/"1"."""
    if isinstance(value, bool):
        return value
    if value in (0, 1, "0", "1"):
        return str(value) == "1"
    return None
