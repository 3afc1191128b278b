"""Calendar selection models."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, model_validator

from .enums import ClickRejection, SelectionPhase
from .pricing import PricingBreakdown
from .stay import DateRange


class SelectionState(BaseModel):
    """Current check-in/check-out selection.

    ``Empty`` has no dates, ``CheckinOnly`` has a check-in only, and
    ``Range`` has both with check-in strictly before check-out.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    phase: SelectionPhase = SelectionPhase.EMPTY
    checkin: dt.date | None = None
    checkout: dt.date | None = None

    @model_validator(mode="after")
    def validate_phase(self) -> "SelectionState":
        """Dates present must match the phase."""
        if self.phase is SelectionPhase.EMPTY:
            if self.checkin is not None or self.checkout is not None:
                raise ValueError("empty selection carries no dates")
        elif self.phase is SelectionPhase.CHECKIN_ONLY:
            if self.checkin is None or self.checkout is not None:
                raise ValueError("checkin-only selection needs exactly a check-in")
        elif self.checkin is None or self.checkout is None or self.checkin >= self.checkout:
            raise ValueError("range selection needs check-in before check-out")
        return self

    @classmethod
    def empty(cls) -> "SelectionState":
        return cls()

    @classmethod
    def checkin_only(cls, checkin: dt.date) -> "SelectionState":
        return cls(phase=SelectionPhase.CHECKIN_ONLY, checkin=checkin)

    @classmethod
    def range(cls, checkin: dt.date, checkout: dt.date) -> "SelectionState":
        return cls(phase=SelectionPhase.RANGE, checkin=checkin, checkout=checkout)

    @property
    def date_range(self) -> DateRange | None:
        """The selected range, once both dates are set."""
        if self.phase is not SelectionPhase.RANGE:
            return None
        return DateRange(checkin=self.checkin, checkout=self.checkout)

    @property
    def nights(self) -> int:
        if self.phase is not SelectionPhase.RANGE:
            return 0
        return (self.checkout - self.checkin).days


class DateClickResult(BaseModel):
    """Outcome of a calendar day click, rendered by the UI layer."""

    model_config = ConfigDict(strict=True, frozen=True)

    state: SelectionState
    breakdown: PricingBreakdown | None = None
    forced_whole_property: bool = False
    accepted: bool = True
    reason: ClickRejection | None = None
