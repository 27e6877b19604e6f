"""Quarterly profit statement from the cash book."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from welfare_books.accounting.money import ZERO
from welfare_books.accounting.periods import DateRange
from welfare_books.models.financial import CashCategory, CashEntry

INCOME_CATEGORIES = frozenset(
    {
        CashCategory.LOAN_INTEREST,
        CashCategory.PENALTY,
        CashCategory.LATE_PAYMENT_FEE,
        CashCategory.SERVICE_FEE,
        CashCategory.FIXED_DEPOSIT_INTEREST,
        CashCategory.SAVINGS_INTEREST,
        CashCategory.OTHER_INCOME,
    }
)

EXPENSE_CATEGORIES = frozenset(
    {
        CashCategory.OPERATING_COST,
        CashCategory.BANK_FEE,
        CashCategory.OTHER_EXPENSE,
    }
)


@dataclass(frozen=True)
class ProfitStatement:
    """Income and expenses by category for a period."""

    period: DateRange
    income: dict[CashCategory, Decimal] = field(default_factory=dict)
    expenses: dict[CashCategory, Decimal] = field(default_factory=dict)

    @property
    def total_income(self) -> Decimal:
        return sum(self.income.values(), ZERO)

    @property
    def total_expenses(self) -> Decimal:
        return sum(self.expenses.values(), ZERO)

    @property
    def net_profit(self) -> Decimal:
        """Income minus expenses; may be negative."""
        return self.total_income - self.total_expenses


def quarterly_profit(entries: Iterable[CashEntry], period: DateRange) -> ProfitStatement:
    """Summarize profit-bearing cash entries dated within ``period``.

    Member contributions and membership fees are capital, not profit, and
    are left out.
    """
    income: dict[CashCategory, Decimal] = {}
    expenses: dict[CashCategory, Decimal] = {}

    for entry in entries:
        if not period.contains(entry.date):
            continue
        if entry.category in INCOME_CATEGORIES:
            income[entry.category] = income.get(entry.category, ZERO) + entry.amount
        elif entry.category in EXPENSE_CATEGORIES:
            expenses[entry.category] = expenses.get(entry.category, ZERO) + entry.amount

    return ProfitStatement(period=period, income=income, expenses=expenses)
