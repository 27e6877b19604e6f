"""Quarter and date-range helpers."""

import calendar
from dataclasses import dataclass
from datetime import date

from welfare_books.exceptions import InvalidInputError


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; ``None`` leaves that side open."""

    start: date | None = None
    end: date | None = None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    @classmethod
    def until(cls, end: date) -> "DateRange":
        return cls(start=None, end=end)


def quarter_of(day: date) -> int:
    """Calendar quarter (1-4) containing ``day``."""
    return (day.month - 1) // 3 + 1


def quarter_bounds(quarter: int, year: int) -> DateRange:
    """First and last day of a calendar quarter."""
    if quarter not in (1, 2, 3, 4):
        raise InvalidInputError(f"Quarter must be 1-4, got {quarter}")
    first_month = quarter * 3 - 2
    return DateRange(start=date(year, first_month, 1), end=quarter_end_date(quarter, year))


def quarter_end_date(quarter: int, year: int) -> date:
    """Last day of a calendar quarter."""
    if quarter not in (1, 2, 3, 4):
        raise InvalidInputError(f"Quarter must be 1-4, got {quarter}")
    last_month = quarter * 3
    return date(year, last_month, calendar.monthrange(year, last_month)[1])
