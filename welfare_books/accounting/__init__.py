"""Interest accrual, payment application, asset valuation and dividends."""

from welfare_books.accounting.assets import (
    AssetValuation,
    LedgerSource,
    MemberAssets,
    OrganizationAssets,
)
from welfare_books.accounting.dividends import (
    DividendDistribution,
    DividendEngine,
    apply_overdue_interest_deductions,
    dividend_pool,
    mark_paid,
)
from welfare_books.accounting.interest import (
    accrued_interest,
    interest_overdue_days,
    is_interest_overdue,
    newly_accrued_interest,
)
from welfare_books.accounting.money import parse_date, round_money, to_money, whole_calendar_days
from welfare_books.accounting.payments import (
    apply_payment,
    apply_payments,
    mark_defaulted,
    split_payment,
)
from welfare_books.accounting.periods import DateRange, quarter_bounds, quarter_end_date, quarter_of
from welfare_books.accounting.profit import ProfitStatement, quarterly_profit

__all__ = [
    "AssetValuation",
    "DateRange",
    "DividendDistribution",
    "DividendEngine",
    "LedgerSource",
    "MemberAssets",
    "OrganizationAssets",
    "ProfitStatement",
    "accrued_interest",
    "apply_overdue_interest_deductions",
    "apply_payment",
    "apply_payments",
    "dividend_pool",
    "interest_overdue_days",
    "is_interest_overdue",
    "mark_defaulted",
    "mark_paid",
    "newly_accrued_interest",
    "parse_date",
    "quarter_bounds",
    "quarter_end_date",
    "quarter_of",
    "quarterly_profit",
    "round_money",
    "split_payment",
    "to_money",
    "whole_calendar_days",
]
