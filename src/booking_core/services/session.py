"""Booking form session.

One session per booking form on a page. It owns the selection machine,
the pricing engine, the current availability overlay and the unit
selection, and is handed by reference to the UI layer, which only
translates DOM events into the ``on_*`` calls and renders what they
return.
"""

import datetime as dt
import functools
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from booking_core.config import BookingSettings
from booking_core.models import (
    ERROR_MESSAGES,
    AccommodationData,
    AccommodationUnit,
    BookingError,
    DateClickResult,
    DateRange,
    ErrorCode,
    ErrorResponse,
    PricingBreakdown,
    SelectionState,
    SubmitResult,
)
from booking_core.utils.logging import (
    bind_session_id,
    generate_session_id,
    get_logger,
    log_availability_fetch,
)
from booking_core.utils.money import format_cents

from .ajax_client import AvailabilityBackend
from .availability import AvailabilityOverlay
from .pricing import StayPricingEngine
from .selection import CalendarSelectionMachine, UnitSelection

logger = get_logger(__name__)

R = TypeVar("R")


def _in_session(method: Callable[..., R]) -> Callable[..., R]:
    """Run a session method with its session ID bound for logging."""

    @functools.wraps(method)
    def wrapper(self: "BookingFormSession", *args: Any, **kwargs: Any) -> R:
        with bind_session_id(self.session_id):
            return method(self, *args, **kwargs)

    return wrapper


class BookingFormSession:
    """State owner for a single booking form."""

    def __init__(
        self,
        units: Iterable[AccommodationUnit],
        *,
        settings: BookingSettings | None = None,
        overlay: AvailabilityOverlay | None = None,
        session_id: str | None = None,
        today: Callable[[], dt.date] | None = None,
    ) -> None:
        """Initialize a booking form session.

        Args:
            units: Every selectable unit of the property
            settings: Booking settings. Defaults to BookingSettings().
            overlay: Initial availability overlay (e.g. server-rendered)
            session_id: Session ID for log correlation. Generated if omitted.
            today: Clock returning the current day (injectable for tests)
        """
        self.settings = settings or BookingSettings()
        self.session_id = session_id or generate_session_id()
        self.units = list(units)
        self._units_by_id = {unit.id: unit for unit in self.units}
        self._today = today or dt.date.today

        self.selection = UnitSelection()
        self.engine = StayPricingEngine(self.settings)
        self.machine = CalendarSelectionMachine(
            self.engine,
            self.units,
            self.selection,
            overlay=overlay,
            settings=self.settings,
        )

        self._breakdown = self._zero()
        self._in_flight: dict[str, SelectionState] = {}
        self._last_completed_key: str | None = None
        self.is_stale = False
        self.last_error: ErrorResponse | None = None

    # === State accessors ===

    @property
    def state(self) -> SelectionState:
        return self.machine.state

    @property
    def overlay(self) -> AvailabilityOverlay:
        return self.machine.overlay

    def get_breakdown(self) -> PricingBreakdown:
        """Latest pricing breakdown (zero until a range is selected)."""
        return self._breakdown

    def is_individual_selection_allowed(self) -> bool:
        """Individual units are disabled while the range has a private event."""
        return not self.machine.is_whole_property_required()

    # === UI events ===

    @_in_session
    def on_date_clicked(self, day: Any) -> DateClickResult:
        """Handle a calendar day click.

        Returns:
            The machine's result; ignored clicks leave everything unchanged
        """
        result = self.machine.click(day, today=self._today())
        if not result.accepted:
            return result

        if result.breakdown is not None:
            self._breakdown = result.breakdown
        else:
            self._breakdown = self.machine.recompute(today=self._today())
        return result

    @_in_session
    def on_unit_toggled(self, unit_id: str, checked: bool) -> PricingBreakdown:
        """Check or uncheck an individual unit.

        Unknown units and individual picks on a private-event range are
        refused; the current breakdown is returned unchanged.
        """
        if unit_id not in self._units_by_id:
            logger.warning("Ignoring toggle of unknown unit %s", unit_id)
            self.last_error = ErrorResponse.from_code(
                ErrorCode.UNKNOWN_UNIT, {"unit_id": unit_id}
            )
            return self._breakdown

        if checked and self.machine.is_whole_property_required():
            logger.info("Unit %s refused: range requires whole-property booking", unit_id)
            return self._breakdown

        changed = self.selection.toggle(unit_id, checked)
        if checked and self.selection.whole_property:
            # Individual picks and whole-property booking are exclusive
            self.selection.whole_property = False
            changed = True
        if changed:
            self._breakdown = self.machine.recompute(today=self._today())
        return self._breakdown

    @_in_session
    def on_whole_property_toggled(self, checked: bool) -> PricingBreakdown:
        """Switch whole-property booking on or off.

        It cannot be switched off while the range has a private event.
        """
        if checked:
            self.selection.force_whole_property()
        elif self.machine.is_whole_property_required():
            logger.info("Whole-property booking kept: range has a private event")
            return self._breakdown
        else:
            self.selection.whole_property = False

        self._breakdown = self.machine.recompute(today=self._today())
        return self._breakdown

    @_in_session
    def on_duration_changed(self, nights: int) -> DateRange | None:
        """Recompute the checkout from the check-in and a night count.

        Returns:
            The new range, or None when no check-in is selected yet
        """
        result = self.machine.extend_to(nights, today=self._today())
        if result is None:
            logger.debug("Duration changed without a check-in; ignored")
            return None
        self._breakdown = result.breakdown
        return result.state.date_range

    # === Availability fetch lifecycle ===

    @staticmethod
    def fetch_key(start_date: dt.date, end_date: dt.date, unit_id: str | None = None) -> str:
        """Coalescing key for an availability request."""
        return f"{start_date.isoformat()}:{end_date.isoformat()}:{unit_id or 'all'}"

    @_in_session
    def begin_fetch(
        self,
        start_date: dt.date,
        end_date: dt.date,
        unit_id: str | None = None,
        *,
        force: bool = False,
    ) -> str | None:
        """Register an availability request.

        Identical requests already in flight are suppressed, as are
        repeats of the last completed request unless ``force`` is set.

        Returns:
            The request key, or None if the request was coalesced
        """
        key = self.fetch_key(start_date, end_date, unit_id)
        if key in self._in_flight or (not force and key == self._last_completed_key):
            log_availability_fetch(logger, key, result="coalesced")
            return None

        self._in_flight[key] = self.state
        log_availability_fetch(logger, key, result="started")
        return key

    @_in_session
    def complete_fetch(self, key: str, payload: Mapping[str, Any] | None) -> PricingBreakdown:
        """Apply a fetch result and reprice the current selection.

        Results are always merged into the overlay, even when the user
        changed the selection while the request was in flight; pricing
        uses the current selection, not the one that started the fetch.
        """
        started_with = self._in_flight.pop(key, None)
        fresh = AvailabilityOverlay.from_payload(payload)
        self.machine.overlay = self.machine.overlay.merge(fresh)
        self._last_completed_key = key
        self.is_stale = False
        self.last_error = None

        if self.machine.is_whole_property_required() and self.selection.force_whole_property():
            logger.info("Refreshed availability locks the current range to whole-property")

        self._breakdown = self.machine.recompute(today=self._today())
        log_availability_fetch(
            logger,
            key,
            result="stale" if started_with not in (None, self.state) else "applied",
            entries=len(fresh),
        )
        return self._breakdown

    @_in_session
    def fail_fetch(self, key: str, error: BookingError) -> ErrorResponse:
        """Record a failed fetch; the last known overlay stays in place."""
        self._in_flight.pop(key, None)
        self.is_stale = True
        self.last_error = error.to_error_response()
        log_availability_fetch(logger, key, result="failed", error=error.message)
        return self.last_error

    def refresh_availability(
        self,
        backend: AvailabilityBackend,
        start_date: dt.date,
        end_date: dt.date,
        unit_id: str | None = None,
        *,
        force: bool = False,
    ) -> PricingBreakdown:
        """Fetch availability for a range and apply it.

        Backend failures keep the last known overlay and mark the
        session stale; they never raise.
        """
        key = self.begin_fetch(start_date, end_date, unit_id, force=force)
        if key is None:
            return self._breakdown
        try:
            payload = backend.fetch_availability(start_date, end_date, unit_id)
        except BookingError as e:
            self.fail_fetch(key, e)
            return self._breakdown
        return self.complete_fetch(key, payload)

    # === Submission ===

    @_in_session
    def build_accommodation_data(self, guest: Mapping[str, str] | None = None) -> AccommodationData | None:
        """Payload for the submit request, or None if not submittable."""
        date_range = self.state.date_range
        breakdown = self._breakdown
        if date_range is None or not breakdown.is_submittable:
            return None

        return AccommodationData(
            checkin_date=date_range.checkin,
            checkout_date=date_range.checkout,
            nights=date_range.nights,
            accommodation_ids=list(breakdown.per_unit_nightly),
            book_entire_property=self.selection.whole_property,
            total_amount=breakdown.total,
            deposit_amount=breakdown.deposit_amount,
            currency=breakdown.currency,
            guest=dict(guest or {}),
        )

    @_in_session
    def submit(
        self,
        backend: AvailabilityBackend,
        guest: Mapping[str, str] | None = None,
    ) -> SubmitResult:
        """Submit the current selection.

        Returns:
            SubmitResult; transport failures become an unsuccessful result
        """
        data = self.build_accommodation_data(guest)
        if data is None:
            self.last_error = ErrorResponse.from_code(ErrorCode.BOOKING_NOT_SUBMITTABLE)
            return SubmitResult(
                success=False,
                message=ERROR_MESSAGES[ErrorCode.BOOKING_NOT_SUBMITTABLE],
            )

        try:
            result = backend.submit_booking(data)
        except BookingError as e:
            self.last_error = e.to_error_response()
            return SubmitResult(success=False, message=e.message)

        if result.success:
            logger.info(
                "Booking submitted: %s (%s)",
                result.booking_id,
                format_cents(data.total_amount, data.currency),
            )
            self.last_error = None
        else:
            logger.warning("Booking rejected by backend: %s", result.message)
        return result

    def _zero(self) -> PricingBreakdown:
        return PricingBreakdown.zero(
            deposit_percent=self.settings.deposit_percent,
            currency=self.settings.currency,
        )
