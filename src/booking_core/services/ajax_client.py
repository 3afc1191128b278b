"""WordPress admin-ajax client for the booking backend.

Speaks the two logical contracts the booking core consumes:

- availability: ``{start_date, end_date, unit_id}`` -> map of ISO date
  to ``{status, price, is_private_event, badges}``
- submit: ``{accommodation_data}`` -> ``{success, booking_id}`` or
  ``{success: false, message}``

Responses use the WordPress JSON envelope ``{"success": bool, "data": ...}``.
The nonce is an opaque value forwarded as-is.
"""

import datetime as dt
import json
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from booking_core.config import BookingSettings
from booking_core.models import AccommodationData, BookingError, ErrorCode, SubmitResult
from booking_core.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_AJAX_PATH = "/wp-admin/admin-ajax.php"


class AvailabilityBackend(Protocol):
    """Anything that can fetch availability and submit bookings."""

    def fetch_availability(
        self,
        start_date: dt.date,
        end_date: dt.date,
        unit_id: str | None = None,
    ) -> Mapping[str, Any]: ...

    def submit_booking(self, data: AccommodationData) -> SubmitResult: ...


class WordPressAjaxClient:
    """httpx-based client for the plugin's admin-ajax actions.

    Usage:
        client = WordPressAjaxClient.from_settings(BookingSettings.from_env())
        payload = client.fetch_availability(dt.date(2025, 6, 1), dt.date(2025, 6, 30))
    """

    AVAILABILITY_ACTION = "aiohm_get_calendar_availability"
    SUBMIT_ACTION = "aiohm_booking_submit_accommodation"

    def __init__(
        self,
        ajax_url: str,
        *,
        nonce: str = "",
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            ajax_url: Full admin-ajax.php URL
            nonce: Opaque nonce forwarded with every request
            timeout: Request timeout in seconds
            http_client: Optional preconfigured httpx client (tests inject
                         one with a MockTransport)
        """
        self.ajax_url = ajax_url or DEFAULT_AJAX_PATH
        self.nonce = nonce
        self._client = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: BookingSettings,
        http_client: httpx.Client | None = None,
    ) -> "WordPressAjaxClient":
        return cls(
            settings.ajax_url,
            nonce=settings.ajax_nonce,
            timeout=settings.ajax_timeout,
            http_client=http_client,
        )

    def close(self) -> None:
        self._client.close()

    def fetch_availability(
        self,
        start_date: dt.date,
        end_date: dt.date,
        unit_id: str | None = None,
    ) -> Mapping[str, Any]:
        """Fetch the per-date override map for a range.

        Args:
            start_date: First day of the range
            end_date: Last day of the range
            unit_id: Unit to check; None checks all units

        Returns:
            Raw map of ISO date to day data

        Raises:
            BookingError: AVAILABILITY_UNAVAILABLE on transport or envelope failure
        """
        form = {
            "action": self.AVAILABILITY_ACTION,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "unit_id": unit_id or "0",
            "nonce": self.nonce,
        }
        envelope = self._post(form, ErrorCode.AVAILABILITY_UNAVAILABLE)

        if not envelope.get("success"):
            raise BookingError(
                ErrorCode.AVAILABILITY_UNAVAILABLE,
                {"reason": _envelope_message(envelope) or "backend reported failure"},
            )

        data = envelope.get("data")
        if data in (None, []):
            # PHP encodes an empty associative array as []
            return {}
        if not isinstance(data, Mapping):
            raise BookingError(
                ErrorCode.AVAILABILITY_UNAVAILABLE,
                {"reason": "availability data is not a map"},
            )
        return data

    def submit_booking(self, data: AccommodationData) -> SubmitResult:
        """Submit the accommodation booking.

        A ``{success: false}`` envelope is a normal outcome and is
        returned as an unsuccessful SubmitResult.

        Raises:
            BookingError: BOOKING_SUBMIT_FAILED on transport failure
        """
        form = {
            "action": self.SUBMIT_ACTION,
            "nonce": self.nonce,
            "accommodation_data": data.model_dump_json(),
        }
        envelope = self._post(form, ErrorCode.BOOKING_SUBMIT_FAILED)
        body = envelope.get("data")
        body = body if isinstance(body, Mapping) else {}

        if envelope.get("success"):
            booking_id = body.get("booking_id")
            return SubmitResult(
                success=True,
                booking_id=None if booking_id is None else str(booking_id),
                message=str(body.get("message") or ""),
            )

        return SubmitResult(
            success=False,
            message=_envelope_message(envelope) or "Booking was not accepted",
        )

    def _post(self, form: dict[str, str], error_code: ErrorCode) -> Mapping[str, Any]:
        action = form["action"]
        try:
            response = self._client.post(self.ajax_url, data=form)
            response.raise_for_status()
            envelope = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("AJAX %s failed with HTTP %s", action, e.response.status_code)
            raise BookingError(
                error_code, {"action": action, "status": str(e.response.status_code)}
            ) from e
        except httpx.HTTPError as e:
            logger.warning("AJAX %s transport error: %s", action, e)
            raise BookingError(error_code, {"action": action, "reason": str(e)}) from e
        except json.JSONDecodeError as e:
            logger.warning("AJAX %s returned invalid JSON", action)
            raise BookingError(error_code, {"action": action, "reason": "invalid JSON"}) from e

        if not isinstance(envelope, Mapping):
            raise BookingError(error_code, {"action": action, "reason": "unexpected response"})
        return envelope


def _envelope_message(envelope: Mapping[str, Any]) -> str:
    """Extract ``data.message`` (or a bare string ``data``) from an envelope."""
    data = envelope.get("data")
    if isinstance(data, Mapping):
        return str(data.get("message") or "")
    if isinstance(data, str):
        return data
    return ""
