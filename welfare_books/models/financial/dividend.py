"""Dividend models for quarterly profit distribution."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from welfare_books.models.financial.enums import DividendPaymentStatus


@dataclass(frozen=True)
class Dividend:
    """One quarterly distribution run.

    Immutable once recorded; corrections are recorded as a new run.
    """

    dividend_id: str
    quarter_end_date: date
    total_shares: int
    profit_amount: Decimal
    dividend_rate: Decimal  # Percentage of profit distributed
    dividend_pool: Decimal
    calculation_date: date
    total_organization_assets: Decimal


@dataclass(frozen=True)
class DividendPayment:
    """A member's allocation from one dividend run."""

    payment_id: str
    dividend_id: str
    member_id: str
    date: date  # Quarter end date of the run
    shares: int
    member_assets: Decimal
    proportion: Decimal
    amount: Decimal  # Gross allocation, rounded to the minor unit
    deductions: Decimal = Decimal("0")
    status: DividendPaymentStatus = DividendPaymentStatus.PENDING
    paid_date: date | None = None

    @property
    def net_amount(self) -> Decimal:
        return self.amount - self.deductions

    @property
    def is_paid(self) -> bool:
        return self.status == DividendPaymentStatus.PAID
