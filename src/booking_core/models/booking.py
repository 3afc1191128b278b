"""Booking submission models (the submit side of the backend contract)."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class AccommodationData(BaseModel):
    """The ``accommodation_data`` payload posted on submit."""

    model_config = ConfigDict(strict=True)

    checkin_date: dt.date
    checkout_date: dt.date
    nights: int = Field(..., ge=1)
    accommodation_ids: list[str] = Field(default_factory=list)
    book_entire_property: bool = False
    total_amount: int = Field(..., ge=0, description="Total in cents")
    deposit_amount: int = Field(..., ge=0, description="Deposit in cents")
    currency: str = "EUR"
    guest: dict[str, str] = Field(default_factory=dict)


class SubmitResult(BaseModel):
    """Submit response: ``{success, booking_id}`` or ``{success: false, message}``."""

    model_config = ConfigDict(strict=True)

    success: bool
    booking_id: str | None = None
    message: str = ""
