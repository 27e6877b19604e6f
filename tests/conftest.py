"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from welfare_books.models.financial import (
    CashCategory,
    CashEntry,
    EntryType,
    Loan,
    LoanType,
    Member,
    MemberStatus,
)
from welfare_books.store.financial import WelfareDataStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def store() -> WelfareDataStore:
    """Create a fresh store for each test."""
    return WelfareDataStore()


def make_member(member_id: str, shares: int = 5, status: MemberStatus = MemberStatus.ACTIVE) -> Member:
    return Member(
        member_id=member_id,
        name=f"Member {member_id}",
        shares=shares,
        status=status,
        joined_date=date(2020, 1, 1),
    )


def make_loan(
    loan_id: str = "loan-001",
    member_id: str = "mem-001",
    balance: str = "100000",
    rate: str = "5",
    daily: bool = True,
    start: date = date(2023, 1, 1),
    **kwargs,
) -> Loan:
    return Loan(
        loan_id=loan_id,
        member_id=member_id,
        loan_type=LoanType.MEMBER,
        amount_taken=Decimal(balance),
        balance=Decimal(balance),
        interest_rate=Decimal(rate),
        daily_interest=daily,
        start_date=start,
        **kwargs,
    )


def make_contribution(
    entry_id: str,
    member_id: str | None,
    amount: str,
    on: date = date(2023, 1, 15),
    category: CashCategory = CashCategory.CONTRIBUTION,
    entry_type: EntryType = EntryType.INCOME,
) -> CashEntry:
    return CashEntry(
        entry_id=entry_id,
        date=on,
        entry_type=entry_type,
        category=category,
        amount=Decimal(amount),
        member_id=member_id,
    )


@pytest.fixture
def sample_member() -> Member:
    """Sample active member."""
    return make_member("mem-001")


@pytest.fixture
def daily_loan() -> Loan:
    """100,000 at 5% daily interest issued 2023-01-01."""
    return make_loan(daily=True)


@pytest.fixture
def monthly_loan() -> Loan:
    """100,000 at 5% monthly interest issued 2023-01-01."""
    return make_loan(daily=False)


@pytest.fixture(name="make_member")
def make_member_fixture():
    """Factory for members."""
    return make_member


@pytest.fixture(name="make_loan")
def make_loan_fixture():
    """Factory for loans."""
    return make_loan


@pytest.fixture(name="make_entry")
def make_entry_fixture():
    """Factory for cash-book entries."""
    return make_contribution
