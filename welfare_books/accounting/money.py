"""Exact money arithmetic and calendar-day helpers."""

from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any

from welfare_books.exceptions import InvalidInputError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Convert a number to ``Decimal`` without binary float artifacts.

    Parameters
    ----------
    value : Any
        ``Decimal``, ``int``, ``float`` or numeric string.

    Returns
    -------
    Decimal
        Exact decimal value.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Not a monetary amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidInputError(f"Not a monetary amount: {value!r}") from exc
    else:
        raise InvalidInputError(f"Not a monetary amount: {value!r}")

    if not result.is_finite():
        raise InvalidInputError(f"Not a monetary amount: {value!r}")
    return result


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round to the minor currency unit using round-half-to-even."""
    quantum = Decimal(1).scaleb(-places)
    return amount.quantize(quantum, rounding=ROUND_HALF_EVEN)


def parse_date(value: Any) -> date:
    """Coerce ``value`` to a calendar date.

    Accepts ``date``, ``datetime`` (date part only) and ISO ``YYYY-MM-DD``
    strings.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid calendar date: {value!r}") from exc
    raise InvalidInputError(f"Invalid calendar date: {value!r}")


def whole_calendar_days(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if reversed)."""
    return (parse_date(end) - parse_date(start)).days
