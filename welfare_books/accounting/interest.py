"""Interest accrual on member loans.

Interest is simple (non-compounding within a period) and accrues on the
outstanding balance from the loan's ``last_interest_paid_date``:

- daily policy:   ``balance * rate / 100 / 365 * days``
- monthly policy: ``balance * rate / 100 / 12 * days / 30``

The monthly policy uses a nominal 30-day month regardless of the actual
calendar. This drifts from ACT/360 or 30/360 conventions near month ends
and is kept for compatibility with existing books.

All functions are pure and return full-precision ``Decimal`` values;
round with ``round_money`` at presentation or booking time.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from welfare_books.accounting.money import ZERO, parse_date, whole_calendar_days
from welfare_books.exceptions import InvalidInputError
from welfare_books.models.financial import Loan

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12
DAYS_PER_NOMINAL_MONTH = 30


def _validate(loan: Loan, as_of: Any) -> date:
    if loan.interest_rate <= 0:
        raise InvalidInputError(
            f"Loan {loan.loan_id}: interest rate must be positive, got {loan.interest_rate}"
        )
    if loan.balance < 0:
        raise InvalidInputError(
            f"Loan {loan.loan_id}: balance must not be negative, got {loan.balance}"
        )
    return parse_date(as_of)


def newly_accrued_interest(loan: Loan, as_of: date) -> Decimal:
    """Interest accrued since ``last_interest_paid_date``, excluding carry-over.

    Parameters
    ----------
    loan : Loan
        Loan snapshot.
    as_of : date
        Reference date.

    Returns
    -------
    Decimal
        Newly accrued interest; zero when no whole day has elapsed.
    """
    as_of = _validate(loan, as_of)
    days = whole_calendar_days(loan.last_interest_paid_date, as_of)
    if days <= 0:
        return ZERO

    # Single division keeps the result exact up to the context precision.
    if loan.daily_interest:
        divisor = 100 * DAYS_PER_YEAR
    else:
        divisor = 100 * MONTHS_PER_YEAR * DAYS_PER_NOMINAL_MONTH
    accrued = loan.balance * loan.interest_rate * days / divisor

    logger.debug(
        "Loan %s: %d days at %s%% (%s) on %s -> %s",
        loan.loan_id,
        days,
        loan.interest_rate,
        "daily" if loan.daily_interest else "monthly",
        loan.balance,
        accrued,
    )
    return accrued


def accrued_interest(loan: Loan, as_of: date) -> Decimal:
    """Interest owed on ``loan`` as of ``as_of``.

    Carried-forward ``unpaid_interest`` plus interest newly accrued since
    the last interest-bearing payment. Calling it again with the same
    inputs returns the same value, and an ``as_of`` on or before the
    watermark returns ``unpaid_interest`` unchanged.

    Raises
    ------
    InvalidInputError
        If the rate is not positive, the balance is negative, or ``as_of``
        is not a valid calendar date.
    """
    return loan.unpaid_interest + newly_accrued_interest(loan, as_of)


def interest_overdue_days(loan: Loan, as_of: date) -> int:
    """Days since interest was last paid (zero if not yet elapsed)."""
    return max(whole_calendar_days(loan.last_interest_paid_date, parse_date(as_of)), 0)


def is_interest_overdue(loan: Loan, as_of: date, threshold_days: int = 90) -> bool:
    """Whether an active loan has gone longer than ``threshold_days`` without an interest payment."""
    if not loan.is_active:
        return False
    return interest_overdue_days(loan, as_of) > threshold_days
