"""Tests for quarterly profit statements."""

from datetime import date
from decimal import Decimal

from welfare_books.accounting.periods import quarter_bounds
from welfare_books.accounting.profit import EXPENSE_CATEGORIES, INCOME_CATEGORIES, quarterly_profit
from welfare_books.models.financial import CashCategory, EntryType


class TestQuarterlyProfit:
    """Tests for quarterly_profit."""

    def test_income_minus_expenses(self, make_entry) -> None:
        entries = [
            make_entry("e1", "mem-a", "1200", category=CashCategory.LOAN_INTEREST),
            make_entry("e2", None, "300", category=CashCategory.FIXED_DEPOSIT_INTEREST),
            make_entry("e3", "mem-a", "50", category=CashCategory.PENALTY),
            make_entry(
                "e4",
                None,
                "200",
                category=CashCategory.OPERATING_COST,
                entry_type=EntryType.EXPENSE,
            ),
        ]

        statement = quarterly_profit(entries, quarter_bounds(1, 2023))

        assert statement.income[CashCategory.LOAN_INTEREST] == Decimal("1200")
        assert statement.total_income == Decimal("1550")
        assert statement.total_expenses == Decimal("200")
        assert statement.net_profit == Decimal("1350")

    def test_contributions_are_capital(self, make_entry) -> None:
        entries = [
            make_entry("e1", "mem-a", "5000"),
            make_entry("e2", "mem-a", "100", category=CashCategory.MEMBERSHIP_FEE),
        ]

        statement = quarterly_profit(entries, quarter_bounds(1, 2023))

        assert statement.net_profit == 0
        assert statement.income == {}

    def test_only_entries_in_period(self, make_entry) -> None:
        entries = [
            make_entry("e1", None, "100", on=date(2022, 12, 31), category=CashCategory.OTHER_INCOME),
            make_entry("e2", None, "200", on=date(2023, 3, 31), category=CashCategory.OTHER_INCOME),
            make_entry("e3", None, "400", on=date(2023, 4, 1), category=CashCategory.OTHER_INCOME),
        ]

        assert quarterly_profit(entries, quarter_bounds(1, 2023)).net_profit == Decimal("200")

    def test_loss_is_negative(self, make_entry) -> None:
        entries = [
            make_entry(
                "e1",
                None,
                "75",
                category=CashCategory.BANK_FEE,
                entry_type=EntryType.EXPENSE,
            )
        ]

        assert quarterly_profit(entries, quarter_bounds(1, 2023)).net_profit == Decimal("-75")

    def test_category_sets_disjoint(self) -> None:
        assert not INCOME_CATEGORIES & EXPENSE_CATEGORIES
        assert CashCategory.CONTRIBUTION not in INCOME_CATEGORIES
