"""Calendar selection state machine.

Two clicks establish a stay: the first picks a check-in, the second a
later check-out. Any click on an established range starts over.
Invalid clicks (past days, days unavailable for arrival, stays shorter
than the minimum) are ignored without an error.
"""

import datetime as dt
from collections.abc import Callable, Iterable
from typing import Any

from booking_core.config import BookingSettings
from booking_core.models import (
    AccommodationUnit,
    ClickRejection,
    DateClickResult,
    DateRange,
    PricingBreakdown,
    SelectionPhase,
    SelectionState,
)
from booking_core.utils.dates import nights_between, to_date
from booking_core.utils.logging import get_logger

from .availability import AvailabilityOverlay
from .pricing import StayPricingEngine

logger = get_logger(__name__)

TransitionListener = Callable[[DateClickResult], None]


class UnitSelection:
    """Which units the guest picked: individual ids or the whole property."""

    def __init__(self, unit_ids: Iterable[str] | None = None, whole_property: bool = False) -> None:
        self.unit_ids: list[str] = list(dict.fromkeys(unit_ids or []))
        self.whole_property = whole_property

    def __repr__(self) -> str:
        return f"UnitSelection(unit_ids={self.unit_ids!r}, whole_property={self.whole_property})"

    def toggle(self, unit_id: str, checked: bool) -> bool:
        """Check or uncheck one unit. Returns True if the selection changed."""
        if checked and unit_id not in self.unit_ids:
            self.unit_ids.append(unit_id)
            return True
        if not checked and unit_id in self.unit_ids:
            self.unit_ids.remove(unit_id)
            return True
        return False

    def force_whole_property(self) -> bool:
        """Replace individual picks by the whole-property flag.

        Returns:
            True if the selection was not already whole-property
        """
        changed = not self.whole_property
        self.unit_ids.clear()
        self.whole_property = True
        return changed


class CalendarSelectionMachine:
    """Finite-state machine over a single check-in/check-out pair.

    Owns the current SelectionState exclusively. On every committed
    range it applies the private-event lockout to the shared
    UnitSelection and recomputes pricing.
    """

    def __init__(
        self,
        engine: StayPricingEngine,
        units: Iterable[AccommodationUnit],
        selection: UnitSelection,
        overlay: AvailabilityOverlay | None = None,
        settings: BookingSettings | None = None,
    ) -> None:
        """Initialize the machine in the Empty state.

        Args:
            engine: Pricing engine invoked on committed ranges
            units: Every unit of the property
            selection: Unit selection shared with the booking form
            overlay: Current availability overlay
            settings: Booking settings. Defaults to the engine's settings.
        """
        self.engine = engine
        self.units = list(units)
        self.selection = selection
        self.overlay = overlay or AvailabilityOverlay()
        self.settings = settings or engine.settings
        self._state = SelectionState.empty()
        self._listeners: list[TransitionListener] = []

    @property
    def state(self) -> SelectionState:
        return self._state

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Register a callback for every accepted transition.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset(self) -> SelectionState:
        self._state = SelectionState.empty()
        return self._state

    def click(self, day: Any, today: dt.date | None = None) -> DateClickResult:
        """Handle a calendar day click.

        Args:
            day: Clicked day (date or ISO string)
            today: Reference day for past-date rejection

        Returns:
            DateClickResult; ``accepted`` is False when the click was ignored
        """
        clicked = to_date(day)
        if clicked is None:
            return self._reject(ClickRejection.INVALID_DATE, day)

        today = today or dt.date.today()
        if clicked < today:
            return self._reject(ClickRejection.PAST_DATE, clicked)

        state = self._state
        if state.phase is SelectionPhase.CHECKIN_ONLY and clicked > state.checkin:
            # Departure day occupancy never blocks a guest who is leaving
            if nights_between(state.checkin, clicked) < self.settings.min_nights:
                return self._reject(ClickRejection.MINIMUM_STAY, clicked)
            return self._commit_range(state.checkin, clicked, today)

        # Everything else is a (new) check-in
        if self.overlay.is_checkin_blocked(clicked):
            return self._reject(ClickRejection.CHECKIN_UNAVAILABLE, clicked)

        self._state = SelectionState.checkin_only(clicked)
        result = DateClickResult(state=self._state)
        self._notify(result)
        return result

    def extend_to(self, nights: int, today: dt.date | None = None) -> DateClickResult | None:
        """Set the checkout from the current check-in and a night count.

        Used by the duration field. ``nights`` below the minimum stay is
        clamped to it.

        Returns:
            The committed result, or None when no check-in is selected
        """
        if self._state.phase is SelectionPhase.EMPTY:
            return None
        nights = max(self.settings.min_nights, nights)
        checkin = self._state.checkin
        return self._commit_range(
            checkin,
            checkin + dt.timedelta(days=nights),
            today or dt.date.today(),
        )

    def restore(
        self,
        checkin: Any,
        checkout: Any,
        today: dt.date | None = None,
    ) -> DateClickResult | None:
        """Set a range directly, e.g. from a pre-filled form.

        Returns:
            The committed result, or None if the pair is not a valid range
        """
        start, end = to_date(checkin), to_date(checkout)
        if start is None or end is None or end <= start:
            logger.debug("Ignoring restore of %s..%s", checkin, checkout)
            return None
        return self._commit_range(start, end, today or dt.date.today())

    def recompute(self, today: dt.date | None = None) -> PricingBreakdown:
        """Pricing for the current state (zero until a range is selected)."""
        date_range = self._state.date_range
        if date_range is None:
            return PricingBreakdown.zero(
                deposit_percent=self.settings.deposit_percent,
                currency=self.settings.currency,
                checkin=self._state.checkin,
            )
        return self._price(date_range, today or dt.date.today())

    def is_whole_property_required(self) -> bool:
        """Whether the selected range contains a private-event night."""
        date_range = self._state.date_range
        return date_range is not None and self.overlay.requires_whole_property_booking(
            date_range
        )

    def _commit_range(
        self,
        checkin: dt.date,
        checkout: dt.date,
        today: dt.date,
    ) -> DateClickResult:
        date_range = DateRange(checkin=checkin, checkout=checkout)

        forced = False
        if self.overlay.requires_whole_property_booking(date_range):
            forced = self.selection.force_whole_property()
            if forced:
                logger.info(
                    "Private event in %s; individual units cleared for whole-property booking",
                    date_range,
                )

        self._state = SelectionState.range(checkin, checkout)
        result = DateClickResult(
            state=self._state,
            breakdown=self._price(date_range, today),
            forced_whole_property=forced,
        )
        self._notify(result)
        return result

    def _price(self, date_range: DateRange, today: dt.date) -> PricingBreakdown:
        by_id = {unit.id: unit for unit in self.units}
        selected = [by_id[uid] for uid in self.selection.unit_ids if uid in by_id]
        return self.engine.compute(
            date_range,
            selected,
            self.overlay,
            whole_property=self.selection.whole_property,
            all_units=self.units,
            today=today,
        )

    def _reject(self, reason: ClickRejection, day: Any) -> DateClickResult:
        logger.debug("Ignoring click on %s: %s", day, reason.value)
        return DateClickResult(state=self._state, accepted=False, reason=reason)

    def _notify(self, result: DateClickResult) -> None:
        for listener in list(self._listeners):
            listener(result)
