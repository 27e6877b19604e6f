"""Tests for proportional dividend distribution."""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from welfare_books.accounting.assets import AssetValuation
from welfare_books.accounting.dividends import (
    DividendDistribution,
    DividendEngine,
    apply_overdue_interest_deductions,
    dividend_pool,
    mark_paid,
)
from welfare_books.exceptions import (
    InsufficientDataError,
    InvalidEntityStateError,
    InvalidInputError,
)
from welfare_books.models.financial import DividendPaymentStatus, MemberStatus
from welfare_books.store.financial import WelfareDataStore

QUARTER_END = date(2023, 6, 30)


def sequential_ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def two_member_store(store: WelfareDataStore, make_member, make_entry) -> WelfareDataStore:
    """Members holding 300,000 and 700,000 of a 1,000,000 organization."""
    store.add_member(make_member("mem-a", shares=3))
    store.add_member(make_member("mem-b", shares=7))
    store.add_cash_entry(make_entry("e1", "mem-a", "300000"))
    store.add_cash_entry(make_entry("e2", "mem-b", "700000"))
    return store


@pytest.fixture
def engine(two_member_store: WelfareDataStore) -> DividendEngine:
    return DividendEngine(AssetValuation(two_member_store), id_factory=sequential_ids())


@pytest.fixture
def distribution(engine: DividendEngine, two_member_store: WelfareDataStore) -> DividendDistribution:
    return engine.distribute(
        Decimal("100000"),
        Decimal("10"),
        QUARTER_END,
        two_member_store.load_active_members(),
    )


class TestDividendPool:
    """Tests for dividend_pool."""

    def test_percentage_of_profit(self) -> None:
        assert dividend_pool(Decimal("100000"), Decimal("10")) == Decimal("10000")

    def test_keeps_full_precision(self) -> None:
        assert dividend_pool(Decimal("333.33"), Decimal("8.5")) == Decimal("28.33305")

    def test_zero_profit(self) -> None:
        assert dividend_pool(Decimal("0"), Decimal("10")) == 0

    def test_full_rate_allowed(self) -> None:
        assert dividend_pool(Decimal("500"), Decimal("100")) == Decimal("500")

    @pytest.mark.parametrize("profit, rate", [("-1", "10"), ("100", "0"), ("100", "100.01"), ("100", "-5")])
    def test_rejects_out_of_range(self, profit: str, rate: str) -> None:
        with pytest.raises(InvalidInputError):
            dividend_pool(Decimal(profit), Decimal(rate))


class TestDistribute:
    """Tests for DividendEngine.distribute."""

    def test_allocates_by_asset_share(self, distribution: DividendDistribution) -> None:
        """Pool 10,000 split 30/70."""
        assert distribution.dividend_pool == Decimal("10000")
        assert distribution.allocation_for("mem-a").amount == Decimal("3000.00")
        assert distribution.allocation_for("mem-b").amount == Decimal("7000.00")
        assert distribution.residual == 0

    def test_dividend_record(self, distribution: DividendDistribution) -> None:
        dividend = distribution.dividend

        assert dividend.dividend_id == "id-1"
        assert dividend.quarter_end_date == QUARTER_END
        assert dividend.calculation_date == QUARTER_END
        assert dividend.total_shares == 10
        assert dividend.profit_amount == Decimal("100000")
        assert dividend.total_organization_assets == Decimal("1000000")

    def test_allocation_fields(self, distribution: DividendDistribution) -> None:
        allocation = distribution.allocation_for("mem-a")

        assert allocation.dividend_id == distribution.dividend.dividend_id
        assert allocation.date == QUARTER_END
        assert allocation.shares == 3
        assert allocation.member_assets == Decimal("300000")
        assert allocation.proportion == Decimal("0.3")
        assert allocation.status == DividendPaymentStatus.PENDING
        assert allocation.deductions == 0

    def test_zero_organization_assets(self, store: WelfareDataStore, make_member) -> None:
        store.add_member(make_member("mem-a"))
        store.add_member(make_member("mem-b"))
        engine = DividendEngine(AssetValuation(store))

        result = engine.distribute(Decimal("100000"), Decimal("10"), QUARTER_END, store.load_active_members())

        assert [a.amount for a in result.allocations] == [0, 0]
        assert all(a.proportion == 0 for a in result.allocations)
        assert result.total_allocated == 0

    def test_rounding_stays_within_pool(self, store: WelfareDataStore, make_member, make_entry) -> None:
        for i in range(3):
            store.add_member(make_member(f"mem-{i}"))
            store.add_cash_entry(make_entry(f"e{i}", f"mem-{i}", "1000"))
        engine = DividendEngine(AssetValuation(store))

        result = engine.distribute(Decimal("1000"), Decimal("10"), QUARTER_END, store.load_active_members())

        assert all(a.amount == Decimal("33.33") for a in result.allocations)
        assert abs(result.residual) <= Decimal("0.005") * len(result.allocations)
        assert sum(a.proportion for a in result.allocations) <= 1

    def test_skips_inactive_members(self, two_member_store: WelfareDataStore, engine, make_member) -> None:
        members = two_member_store.load_active_members() + [
            make_member("mem-c", status=MemberStatus.INACTIVE)
        ]

        result = engine.distribute(Decimal("100000"), Decimal("10"), QUARTER_END, members)

        assert result.allocation_for("mem-c") is None
        assert len(result.allocations) == 2

    def test_no_active_members(self, engine: DividendEngine, make_member) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            engine.distribute(
                Decimal("100000"),
                Decimal("10"),
                QUARTER_END,
                [make_member("mem-c", status=MemberStatus.INACTIVE)],
            )

        partial = exc_info.value.distribution
        assert partial.dividend_pool == Decimal("10000")
        assert partial.allocations == []

    def test_explicit_calculation_date(self, engine: DividendEngine, two_member_store) -> None:
        result = engine.distribute(
            Decimal("100000"),
            Decimal("10"),
            QUARTER_END,
            two_member_store.load_active_members(),
            calculation_date=date(2023, 7, 5),
        )

        assert result.dividend.calculation_date == date(2023, 7, 5)

    def test_rounding_places(self, two_member_store: WelfareDataStore) -> None:
        engine = DividendEngine(AssetValuation(two_member_store), rounding_places=0)

        result = engine.distribute(
            Decimal("1000.50"), Decimal("10"), QUARTER_END, two_member_store.load_active_members()
        )

        assert result.allocation_for("mem-a").amount == Decimal("30")


class TestOverdueInterestDeductions:
    """Tests for apply_overdue_interest_deductions."""

    def test_deducts_overdue_interest(self, distribution: DividendDistribution, make_loan) -> None:
        """10,000 at 9% daily, no interest paid for 180 days."""
        loan = make_loan(member_id="mem-a", balance="10000", rate="9")

        result = apply_overdue_interest_deductions(distribution, [loan], QUARTER_END)

        allocation = result.allocation_for("mem-a")
        assert allocation.amount == Decimal("3000.00")
        assert allocation.deductions == Decimal("443.84")
        assert allocation.net_amount == Decimal("2556.16")
        assert result.allocation_for("mem-b").deductions == 0
        assert result.total_deductions == Decimal("443.84")

    def test_deduction_capped_at_allocation(self, distribution: DividendDistribution, make_loan) -> None:
        loan = make_loan(member_id="mem-a", balance="1000000", rate="12")

        result = apply_overdue_interest_deductions(distribution, [loan], QUARTER_END)

        assert result.allocation_for("mem-a").deductions == Decimal("3000.00")
        assert result.allocation_for("mem-a").net_amount == 0

    def test_recent_interest_not_deducted(self, distribution: DividendDistribution, make_loan) -> None:
        loan = make_loan(member_id="mem-a", last_interest_paid_date=date(2023, 5, 1))

        result = apply_overdue_interest_deductions(distribution, [loan], QUARTER_END)

        assert result.total_deductions == 0

    def test_original_distribution_unchanged(self, distribution: DividendDistribution, make_loan) -> None:
        apply_overdue_interest_deductions(distribution, [make_loan(member_id="mem-a")], QUARTER_END)

        assert distribution.total_deductions == 0


class TestMarkPaid:
    """Tests for mark_paid."""

    def test_marks_pending_payment(self, distribution: DividendDistribution) -> None:
        paid = mark_paid(distribution.allocation_for("mem-a"), date(2023, 7, 10))

        assert paid.is_paid
        assert paid.paid_date == date(2023, 7, 10)
        assert paid.amount == Decimal("3000.00")

    def test_rejects_second_payment(self, distribution: DividendDistribution) -> None:
        paid = mark_paid(distribution.allocation_for("mem-a"), date(2023, 7, 10))

        with pytest.raises(InvalidEntityStateError):
            mark_paid(paid, date(2023, 7, 11))
