"""Tests for WelfareDataStore."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from welfare_books.accounting.periods import DateRange
from welfare_books.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidInputError,
    ReferentialIntegrityError,
)
from welfare_books.models.financial import (
    Dividend,
    DividendPayment,
    DividendPaymentStatus,
    Loan,
    Member,
    MemberStatus,
    Payment,
)
from welfare_books.store.financial import WelfareDataStore


def make_dividend(dividend_id: str = "div-001") -> Dividend:
    return Dividend(
        dividend_id=dividend_id,
        quarter_end_date=date(2023, 3, 31),
        total_shares=5,
        profit_amount=Decimal("10000"),
        dividend_rate=Decimal("10"),
        dividend_pool=Decimal("1000"),
        calculation_date=date(2023, 3, 31),
        total_organization_assets=Decimal("50000"),
    )


def make_dividend_payment(member_id: str = "mem-001", dividend_id: str = "div-001") -> DividendPayment:
    return DividendPayment(
        payment_id=f"dp-{member_id}",
        dividend_id=dividend_id,
        member_id=member_id,
        date=date(2023, 3, 31),
        shares=5,
        member_assets=Decimal("5000"),
        proportion=Decimal("0.1"),
        amount=Decimal("100.00"),
    )


class TestMembers:
    """Tests for member storage."""

    def test_add_and_load(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)

        assert store.load_member("mem-001") is sample_member
        assert store.load_member_loans("mem-001") == []

    def test_load_missing(self, store: WelfareDataStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.load_member("mem-404")

    def test_active_members(self, store: WelfareDataStore, make_member) -> None:
        store.add_member(make_member("mem-a"))
        store.add_member(make_member("mem-b", status=MemberStatus.INACTIVE))

        assert [m.member_id for m in store.load_active_members()] == ["mem-a"]


class TestLoans:
    """Tests for loan storage and payments."""

    def test_add_loan_requires_member(self, store: WelfareDataStore, daily_loan: Loan) -> None:
        with pytest.raises(ReferentialIntegrityError):
            store.add_loan(daily_loan)

    def test_duplicate_loan(self, store: WelfareDataStore, sample_member: Member, daily_loan: Loan) -> None:
        store.add_member(sample_member)
        store.add_loan(daily_loan)

        with pytest.raises(InvalidEntityStateError):
            store.add_loan(daily_loan)

    def test_load_missing_loan(self, store: WelfareDataStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.load_loan("loan-404")

    def test_save_loan_cannot_change_member(
        self, store: WelfareDataStore, sample_member: Member, daily_loan: Loan
    ) -> None:
        store.add_member(sample_member)
        store.add_loan(daily_loan)

        with pytest.raises(InvalidEntityStateError):
            store.save_loan(replace(daily_loan, member_id="mem-002"))

    def test_record_payment(self, store: WelfareDataStore, sample_member: Member, daily_loan: Loan) -> None:
        store.add_member(sample_member)
        store.add_loan(daily_loan)
        payment = Payment("pay-001", daily_loan.loan_id, date(2023, 2, 1), principal_amount=Decimal("100"))
        updated = replace(daily_loan, balance=Decimal("99900"))

        store.record_loan_payment(payment, updated)

        assert store.load_loan(daily_loan.loan_id).balance == Decimal("99900")
        assert store.load_loan_payments(daily_loan.loan_id) == [payment]
        assert store.load_member_loans("mem-001")[0].balance == Decimal("99900")

    def test_duplicate_payment_rejected(
        self, store: WelfareDataStore, sample_member: Member, daily_loan: Loan
    ) -> None:
        store.add_member(sample_member)
        store.add_loan(daily_loan)
        payment = Payment("pay-001", daily_loan.loan_id, date(2023, 2, 1), principal_amount=Decimal("100"))
        store.record_loan_payment(payment, replace(daily_loan, balance=Decimal("99900")))

        with pytest.raises(InvalidEntityStateError):
            store.record_loan_payment(payment, replace(daily_loan, balance=Decimal("99800")))

        assert store.load_loan(daily_loan.loan_id).balance == Decimal("99900")
        assert len(store.loan_payments) == 1

    def test_payment_for_other_loan(self, store: WelfareDataStore, sample_member: Member, daily_loan: Loan) -> None:
        store.add_member(sample_member)
        store.add_loan(daily_loan)
        payment = Payment("pay-001", "loan-999", date(2023, 2, 1), principal_amount=Decimal("100"))

        with pytest.raises(InvalidInputError):
            store.record_loan_payment(payment, daily_loan)


class TestCashBook:
    """Tests for cash-book storage."""

    def test_entry_requires_known_member(self, store: WelfareDataStore, make_entry) -> None:
        with pytest.raises(ReferentialIntegrityError):
            store.add_cash_entry(make_entry("e1", "mem-404", "100"))
        assert store.cash_entries == []

    def test_load_ledger_entries(self, store: WelfareDataStore, make_member, make_entry) -> None:
        store.add_member(make_member("mem-a"))
        store.add_cash_entry(make_entry("e1", "mem-a", "100", on=date(2023, 1, 1)))
        store.add_cash_entry(make_entry("e2", "mem-a", "100", on=date(2023, 5, 1)))
        store.add_cash_entry(make_entry("e3", None, "100", on=date(2023, 1, 1)))

        q1 = DateRange(date(2023, 1, 1), date(2023, 3, 31))

        assert [e.entry_id for e in store.load_ledger_entries("mem-a", q1)] == ["e1"]
        assert [e.entry_id for e in store.load_ledger_entries(None, q1)] == ["e1", "e3"]
        assert len(store.load_ledger_entries(None, DateRange())) == 3


class TestDividends:
    """Tests for dividend storage."""

    def test_save_and_load(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)
        payment = make_dividend_payment()

        store.save_dividend(make_dividend(), [payment])

        assert store.load_dividend("div-001").dividend_pool == Decimal("1000")
        assert store.load_payments_for_dividend("div-001") == [payment]
        assert store.load_dividend_payments("mem-001", DateRange()) == [payment]

    def test_duplicate_dividend(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)
        store.save_dividend(make_dividend(), [make_dividend_payment()])

        with pytest.raises(InvalidEntityStateError):
            store.save_dividend(make_dividend(), [])

    def test_unknown_member_rejects_whole_run(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)
        payments = [make_dividend_payment(), make_dividend_payment("mem-404")]

        with pytest.raises(ReferentialIntegrityError):
            store.save_dividend(make_dividend(), payments)

        assert store.dividends == {}
        assert store.dividend_payments == []

    def test_payment_of_other_run(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)

        with pytest.raises(InvalidInputError):
            store.save_dividend(make_dividend(), [make_dividend_payment(dividend_id="div-002")])

    def test_load_missing_dividend(self, store: WelfareDataStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.load_dividend("div-404")

    def test_update_payment_status(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)
        payment = make_dividend_payment()
        store.save_dividend(make_dividend(), [payment])

        paid = replace(payment, status=DividendPaymentStatus.PAID, paid_date=date(2023, 4, 5))
        store.update_dividend_payment(paid)

        assert store.load_payments_for_dividend("div-001")[0].is_paid

    def test_update_cannot_change_amount(self, store: WelfareDataStore, sample_member: Member) -> None:
        store.add_member(sample_member)
        payment = make_dividend_payment()
        store.save_dividend(make_dividend(), [payment])

        with pytest.raises(InvalidEntityStateError):
            store.update_dividend_payment(replace(payment, amount=Decimal("999")))

    def test_update_missing_payment(self, store: WelfareDataStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.update_dividend_payment(make_dividend_payment())


class TestSummary:
    """Tests for summary counts."""

    def test_summary(self, store: WelfareDataStore, sample_member: Member, daily_loan: Loan) -> None:
        store.add_member(sample_member)
        store.add_loan(daily_loan)

        summary = store.summary()

        assert summary["members"] == 1
        assert summary["loans"] == 1
        assert summary["cash_entries"] == 0
        assert summary["dividend_payments"] == 0
