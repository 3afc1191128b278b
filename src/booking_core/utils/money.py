"""Money helpers.

Amounts are integers in minor currency units (cents) to avoid
floating-point issues. Percentages are applied with Decimal arithmetic
and rounded half-up to the cent.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENTS_PER_UNIT = 100


def to_cents(value: Any) -> int | None:
    """Convert a backend price in major units to cents.

    Args:
        value: Number or numeric string such as ``"80.00"`` or ``80``.

    Returns:
        Amount in cents, or None for non-numeric input. Booleans are
        rejected even though they are ints.
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return int((amount * CENTS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(amount: int, percent: int | float | Decimal) -> int:
    """Return ``percent`` % of ``amount`` cents, rounded half-up to the cent."""
    share = Decimal(amount) * Decimal(str(percent)) / Decimal(100)
    return int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(amount: int, currency: str = "EUR") -> str:
    """Format cents for display, e.g. ``EUR 150.00``."""
    sign = "-" if amount < 0 else ""
    major, minor = divmod(abs(amount), CENTS_PER_UNIT)
    return f"{currency} {sign}{major}.{minor:02d}"
