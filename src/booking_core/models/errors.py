"""Standard error codes for the booking core.

Input rejections (bad clicks, malformed overrides) are never errors;
these codes cover backend failures and programmer errors that the UI
layer may want to surface.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    INVALID_DATE_RANGE = "ERR_001"
    UNKNOWN_UNIT = "ERR_002"
    BOOKING_NOT_SUBMITTABLE = "ERR_003"

    # Backend contract errors
    AVAILABILITY_UNAVAILABLE = "ERR_BACKEND_001"
    BOOKING_SUBMIT_FAILED = "ERR_BACKEND_002"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "Check-out must be after check-in",
    ErrorCode.UNKNOWN_UNIT: "Accommodation unit is not part of this booking form",
    ErrorCode.BOOKING_NOT_SUBMITTABLE: "Select dates and at least one accommodation before booking",
    ErrorCode.AVAILABILITY_UNAVAILABLE: "Availability could not be refreshed; showing last known data",
    ErrorCode.BOOKING_SUBMIT_FAILED: "The booking could not be submitted",
}

# Recovery suggestions for the UI layer
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "Select a check-out date after the check-in date",
    ErrorCode.UNKNOWN_UNIT: "Reload the booking form to refresh the accommodation list",
    ErrorCode.BOOKING_NOT_SUBMITTABLE: "Complete the date and accommodation selection",
    ErrorCode.AVAILABILITY_UNAVAILABLE: "Keep interacting; availability is retried on the next date change",
    ErrorCode.BOOKING_SUBMIT_FAILED: "Try again or contact the property",
}


class ErrorResponse(BaseModel):
    """Standard error payload handed to the UI layer.

    The UI shows the message as a non-fatal notice; nothing in the core
    blocks further interaction.
    """

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by booking operations.

    Can be caught and converted to an ErrorResponse for the UI layer.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)
