"""Point-in-time asset valuation for members and the organization."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from welfare_books.accounting.money import ZERO, parse_date
from welfare_books.accounting.periods import DateRange
from welfare_books.models.financial import (
    BankAccount,
    CashEntry,
    DividendPayment,
    Loan,
    LoanStatus,
    Payment,
)

logger = logging.getLogger(__name__)


class LedgerSource(Protocol):
    """Read side of the persistence store used for valuation."""

    def load_ledger_entries(
        self, member_id: str | None, date_range: DateRange
    ) -> list[CashEntry]: ...

    def load_dividend_payments(
        self, member_id: str | None, date_range: DateRange
    ) -> list[DividendPayment]: ...

    def load_bank_accounts(self) -> list[BankAccount]: ...

    def load_loans(self) -> list[Loan]: ...

    def load_loan_payments(self, loan_id: str) -> list[Payment]: ...


@dataclass(frozen=True)
class MemberAssets:
    """A member's assets as of a cutoff date."""

    member_id: str
    as_of: date
    cash_total: Decimal
    dividend_total: Decimal

    @property
    def total(self) -> Decimal:
        return self.cash_total + self.dividend_total


@dataclass(frozen=True)
class OrganizationAssets:
    """Organization-wide assets as of a cutoff date."""

    as_of: date
    cash_contributions: Decimal
    bank_balances: Decimal
    outstanding_loans: Decimal

    @property
    def total(self) -> Decimal:
        return self.cash_contributions + self.bank_balances + self.outstanding_loans


class AssetValuation:
    """Value member and organization assets from a ledger snapshot.

    Cash and dividend figures come from rows dated on or before the
    cutoff; loan principal is rolled back from the current balance by the
    repayments recorded after it. Re-running a valuation for an earlier
    date therefore reproduces the earlier result as long as rows dated on
    or before that date are unchanged.

    Parameters
    ----------
    source : LedgerSource
        Store providing cash entries, dividend payments, bank accounts,
        loans and loan payments.
    """

    def __init__(self, source: LedgerSource) -> None:
        self.source = source

    def member_breakdown(self, member_id: str, as_of: date) -> MemberAssets:
        """Cash contributions and booked dividends for one member."""
        as_of = parse_date(as_of)
        window = DateRange.until(as_of)

        cash_total = sum(
            (e.signed_amount for e in self.source.load_ledger_entries(member_id, window)),
            ZERO,
        )
        dividend_total = sum(
            (p.net_amount for p in self.source.load_dividend_payments(member_id, window)),
            ZERO,
        )
        return MemberAssets(
            member_id=member_id,
            as_of=as_of,
            cash_total=cash_total,
            dividend_total=dividend_total,
        )

    def member_assets(self, member_id: str, as_of: date) -> Decimal:
        """Total assets attributed to ``member_id`` as of ``as_of``."""
        return self.member_breakdown(member_id, as_of).total

    def organization_breakdown(self, as_of: date) -> OrganizationAssets:
        """Cash, bank and outstanding-loan components of organization assets."""
        as_of = parse_date(as_of)
        window = DateRange.until(as_of)

        cash = sum(
            (e.signed_amount for e in self.source.load_ledger_entries(None, window)),
            ZERO,
        )
        bank = sum(
            (a.balance for a in self.source.load_bank_accounts() if a.start_date <= as_of),
            ZERO,
        )
        loans = sum(
            (self.outstanding_principal(loan, as_of) for loan in self.source.load_loans()),
            ZERO,
        )

        breakdown = OrganizationAssets(
            as_of=as_of,
            cash_contributions=cash,
            bank_balances=bank,
            outstanding_loans=loans,
        )
        logger.debug(
            "Organization assets as of %s: cash=%s bank=%s loans=%s total=%s",
            as_of,
            cash,
            bank,
            loans,
            breakdown.total,
        )
        return breakdown

    def organization_assets(self, as_of: date) -> Decimal:
        """Total organization assets as of ``as_of``."""
        return self.organization_breakdown(as_of).total

    def outstanding_principal(self, loan: Loan, as_of: date) -> Decimal:
        """Principal still owed on ``loan`` at the end of ``as_of``.

        Starts from the stored ``balance`` and adds back principal repaid
        after ``as_of``. Defaulted loans are written off and count as zero.
        """
        if loan.start_date > as_of or loan.status == LoanStatus.DEFAULTED:
            return ZERO
        repaid_later = sum(
            (
                p.principal_amount
                for p in self.source.load_loan_payments(loan.loan_id)
                if p.date > as_of
            ),
            ZERO,
        )
        return loan.balance + repaid_later

    def member_proportion(self, member_id: str, as_of: date) -> Decimal:
        """Member's share of organization assets; zero when the organization has none."""
        org_total = self.organization_assets(as_of)
        if org_total == 0:
            return ZERO
        return self.member_assets(member_id, as_of) / org_total
