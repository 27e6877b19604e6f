"""Proportional quarterly dividend distribution."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable

from welfare_books.accounting.assets import AssetValuation
from welfare_books.accounting.interest import accrued_interest, is_interest_overdue
from welfare_books.accounting.money import ZERO, parse_date, round_money, to_money
from welfare_books.exceptions import (
    InsufficientDataError,
    InvalidEntityStateError,
    InvalidInputError,
)
from welfare_books.models.financial import (
    Dividend,
    DividendPayment,
    DividendPaymentStatus,
    Loan,
    Member,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class DividendDistribution:
    """Result of a dividend run: the run record and one allocation per member."""

    dividend: Dividend
    allocations: list[DividendPayment] = field(default_factory=list)

    @property
    def dividend_pool(self) -> Decimal:
        return self.dividend.dividend_pool

    @property
    def total_allocated(self) -> Decimal:
        return sum((a.amount for a in self.allocations), ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum((a.deductions for a in self.allocations), ZERO)

    @property
    def residual(self) -> Decimal:
        """Pool minus the sum of rounded allocations (rounding drift)."""
        return self.dividend.dividend_pool - self.total_allocated

    def allocation_for(self, member_id: str) -> DividendPayment | None:
        for allocation in self.allocations:
            if allocation.member_id == member_id:
                return allocation
        return None


def dividend_pool(profit_amount: Decimal, dividend_rate: Decimal) -> Decimal:
    """Portion of ``profit_amount`` distributed at ``dividend_rate`` percent.

    Raises
    ------
    InvalidInputError
        If profit is negative or the rate is outside (0, 100].
    """
    profit_amount = to_money(profit_amount)
    dividend_rate = to_money(dividend_rate)
    if profit_amount < 0:
        raise InvalidInputError(f"Profit must not be negative, got {profit_amount}")
    if not ZERO < dividend_rate <= HUNDRED:
        raise InvalidInputError(f"Dividend rate must be in (0, 100], got {dividend_rate}")
    return profit_amount * dividend_rate / HUNDRED


class DividendEngine:
    """Allocate a dividend pool across members by their share of assets.

    Each member's allocation depends only on that member's assets, the
    organization total and the pool, so allocations can be computed in
    any order or in parallel.

    Parameters
    ----------
    valuation : AssetValuation
        Asset valuation over the current ledger.
    rounding_places : int
        Decimal places allocations are rounded to (half-to-even).
    id_factory : Callable[[], str] | None
        Generator for dividend and payment IDs (default: UUID4).
    """

    def __init__(
        self,
        valuation: AssetValuation,
        rounding_places: int = 2,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.valuation = valuation
        self.rounding_places = rounding_places
        self._new_id = id_factory or _new_id

    def distribute(
        self,
        profit_amount: Decimal,
        dividend_rate: Decimal,
        as_of: date,
        active_members: Iterable[Member],
        calculation_date: date | None = None,
    ) -> DividendDistribution:
        """Compute the dividend pool and each active member's allocation.

        Parameters
        ----------
        profit_amount : Decimal
            Quarterly profit.
        dividend_rate : Decimal
            Percentage of profit distributed, in (0, 100].
        as_of : date
            Valuation cutoff (normally the quarter end date).
        active_members : Iterable[Member]
            Members to allocate to; inactive members are skipped.
        calculation_date : date | None
            Date the run was calculated (default: ``as_of``).

        Returns
        -------
        DividendDistribution
            Run record plus one pending payment per active member.

        Raises
        ------
        InvalidInputError
            On negative profit, out-of-range rate or invalid date.
        InsufficientDataError
            If there are no active members; the exception carries the
            distribution with its pool and no allocations.
        """
        profit_amount = to_money(profit_amount)
        dividend_rate = to_money(dividend_rate)
        pool = dividend_pool(profit_amount, dividend_rate)
        as_of = parse_date(as_of)
        calculation_date = parse_date(calculation_date) if calculation_date else as_of

        members = [m for m in active_members if m.is_active]
        org_total = self.valuation.organization_assets(as_of)

        dividend = Dividend(
            dividend_id=self._new_id(),
            quarter_end_date=as_of,
            total_shares=sum(m.shares for m in members),
            profit_amount=profit_amount,
            dividend_rate=dividend_rate,
            dividend_pool=pool,
            calculation_date=calculation_date,
            total_organization_assets=org_total,
        )

        if not members:
            logger.warning("Dividend run as of %s has no active members; pool %s unallocated", as_of, pool)
            raise InsufficientDataError(
                f"No active members to distribute dividend pool {pool} to",
                distribution=DividendDistribution(dividend=dividend, allocations=[]),
            )

        if org_total == 0:
            logger.warning("Organization assets are zero as of %s; all allocations are zero", as_of)

        allocations = [self.allocate_member(dividend, member) for member in members]
        distribution = DividendDistribution(dividend=dividend, allocations=allocations)

        logger.info(
            "Dividend %s as of %s: pool=%s allocated=%s across %d members (residual %s)",
            dividend.dividend_id,
            as_of,
            pool,
            distribution.total_allocated,
            len(allocations),
            distribution.residual,
            extra={
                "dividend_id": dividend.dividend_id,
                "quarter_end_date": as_of,
                "pool": pool,
                "allocated": distribution.total_allocated,
                "residual": distribution.residual,
            },
        )
        return distribution

    def allocate_member(self, dividend: Dividend, member: Member) -> DividendPayment:
        """Pending payment for one member of ``dividend``."""
        as_of = dividend.quarter_end_date
        org_total = dividend.total_organization_assets
        member_assets = self.valuation.member_assets(member.member_id, as_of)
        proportion = member_assets / org_total if org_total != 0 else ZERO
        amount = round_money(proportion * dividend.dividend_pool, self.rounding_places)

        return DividendPayment(
            payment_id=self._new_id(),
            dividend_id=dividend.dividend_id,
            member_id=member.member_id,
            date=as_of,
            shares=member.shares,
            member_assets=member_assets,
            proportion=proportion,
            amount=amount,
        )


def apply_overdue_interest_deductions(
    distribution: DividendDistribution,
    loans: Iterable[Loan],
    as_of: date,
    threshold_days: int = 90,
) -> DividendDistribution:
    """Deduct overdue loan interest from members' dividend payments.

    Interest on a loan is overdue when no interest payment has been made
    for more than ``threshold_days``. A member's deduction is the interest
    owed on all their overdue loans, capped at the allocation.

    Returns
    -------
    DividendDistribution
        New distribution; gross ``amount`` values are unchanged.
    """
    as_of = parse_date(as_of)
    overdue: dict[str, Decimal] = {}
    for loan in loans:
        if is_interest_overdue(loan, as_of, threshold_days):
            owed = round_money(accrued_interest(loan, as_of))
            overdue[loan.member_id] = overdue.get(loan.member_id, ZERO) + owed

    allocations = []
    for allocation in distribution.allocations:
        owed = overdue.get(allocation.member_id, ZERO)
        if owed > 0:
            deduction = min(owed, allocation.amount)
            logger.info(
                "Deducting %s overdue interest from member %s dividend %s",
                deduction,
                allocation.member_id,
                allocation.amount,
            )
            allocation = replace(allocation, deductions=deduction)
        allocations.append(allocation)

    return replace(distribution, allocations=allocations)


def mark_paid(payment: DividendPayment, paid_date: date) -> DividendPayment:
    """Return a copy of ``payment`` marked as paid on ``paid_date``."""
    if payment.is_paid:
        raise InvalidEntityStateError(f"Dividend payment {payment.payment_id} is already paid")
    return replace(payment, status=DividendPaymentStatus.PAID, paid_date=parse_date(paid_date))
