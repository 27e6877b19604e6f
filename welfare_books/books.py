"""Bookkeeping facade tying the store, the accounting core and notifications.

The accounting functions are pure; this layer loads snapshots from the
store, runs the computation, writes the result back as a single store
call and only then publishes a notification event. If the computation
raises, nothing is written and nothing is published.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Protocol

from welfare_books.accounting.assets import AssetValuation
from welfare_books.accounting.dividends import (
    DividendDistribution,
    DividendEngine,
    apply_overdue_interest_deductions,
    mark_paid,
)
from welfare_books.accounting.interest import accrued_interest
from welfare_books.accounting.money import parse_date, to_money
from welfare_books.accounting.payments import apply_payment, split_payment
from welfare_books.accounting.periods import quarter_bounds, quarter_end_date
from welfare_books.accounting.profit import ProfitStatement, quarterly_profit
from welfare_books.config import WelfareConfig
from welfare_books.exceptions import EntityNotFoundError, InvalidInputError, SinkError
from welfare_books.models.base import Event
from welfare_books.models.financial import CashEntry, DividendPayment, Loan, Payment
from welfare_books.otp import validate_cash_entry
from welfare_books.sinks.serialization import to_dict
from welfare_books.store.financial import WelfareDataStore

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def publish(self, event: Event) -> None: ...


class WelfareBooks:
    """Entry point for recording payments and running dividends.

    Parameters
    ----------
    store : WelfareDataStore
        Persistence store.
    sink : EventSink | None
        Receives an event after each successful write.
    config : WelfareConfig | None
        Rates, dividend and stream settings.
    """

    def __init__(
        self,
        store: WelfareDataStore,
        sink: EventSink | None = None,
        config: WelfareConfig | None = None,
    ) -> None:
        self.store = store
        self.sink = sink
        self.config = config or WelfareConfig()
        self.valuation = AssetValuation(store)
        self.engine = DividendEngine(
            self.valuation,
            rounding_places=self.config.dividend.rounding_places,
        )

    # Loans
    def issue_loan(self, loan: Loan) -> Loan:
        """Record a new loan."""
        if loan.interest_rate <= 0:
            raise InvalidInputError(f"Loan {loan.loan_id}: interest rate must be positive")
        if loan.balance < 0 or loan.amount_taken <= 0:
            raise InvalidInputError(f"Loan {loan.loan_id}: amount must be positive")
        self.store.add_loan(loan)
        logger.info("Issued loan %s of %s to member %s", loan.loan_id, loan.amount_taken, loan.member_id)
        self._publish("loan.issued", loan.loan_id, loan)
        return loan

    def interest_due(self, loan_id: str, as_of: date) -> Decimal:
        """Interest owed on a stored loan as of ``as_of``."""
        return accrued_interest(self.store.load_loan(loan_id), as_of)

    def pay_loan(self, payment: Payment) -> Loan:
        """Apply ``payment`` to its loan and store both together."""
        loan = self.store.load_loan(payment.loan_id)
        updated = apply_payment(loan, payment)
        self.store.record_loan_payment(payment, updated)

        logger.info(
            "Loan %s payment %s: principal=%s interest=%s balance=%s status=%s",
            loan.loan_id,
            payment.payment_id,
            payment.principal_amount,
            payment.interest_amount,
            updated.balance,
            updated.status.value,
            extra={
                "loan_id": loan.loan_id,
                "payment_id": payment.payment_id,
                "principal": payment.principal_amount,
                "interest": payment.interest_amount,
                "balance": updated.balance,
            },
        )
        self._publish("loan.payment_applied", loan.loan_id, {"payment": payment, "loan": updated})
        return updated

    def pay_loan_amount(
        self, loan_id: str, amount: Decimal, on: date, payment_id: str | None = None
    ) -> Loan:
        """Pay a single amount, interest first, against a stored loan."""
        loan = self.store.load_loan(loan_id)
        payment = split_payment(loan, amount, on, payment_id or str(uuid.uuid4()))
        return self.pay_loan(payment)

    # Cash book
    def record_cash_entry(self, entry: CashEntry) -> CashEntry:
        """Validate a cash-book row against its category policy and store it."""
        validate_cash_entry(entry)
        self.store.add_cash_entry(entry)
        return entry

    # Valuation
    def member_assets(self, member_id: str, as_of: date) -> Decimal:
        self.store.load_member(member_id)
        return self.valuation.member_assets(member_id, as_of)

    def organization_assets(self, as_of: date) -> Decimal:
        return self.valuation.organization_assets(as_of)

    # Dividends
    def quarterly_profit(self, quarter: int, year: int) -> ProfitStatement:
        """Profit statement for a calendar quarter."""
        period = quarter_bounds(quarter, year)
        return quarterly_profit(self.store.load_ledger_entries(None, period), period)

    def run_dividend(
        self,
        profit_amount: Decimal,
        as_of: date,
        dividend_rate: Decimal | None = None,
        calculation_date: date | None = None,
        deduct_overdue_interest: bool = True,
    ) -> DividendDistribution:
        """Distribute a share of ``profit_amount`` to active members and record it.

        Raises
        ------
        InsufficientDataError
            If there are no active members; nothing is recorded.
        """
        as_of = parse_date(as_of)
        rate = to_money(dividend_rate) if dividend_rate is not None else self.config.dividend.default_rate

        distribution = self.engine.distribute(
            profit_amount,
            rate,
            as_of,
            self.store.load_active_members(),
            calculation_date=calculation_date,
        )
        if deduct_overdue_interest:
            distribution = apply_overdue_interest_deductions(
                distribution,
                self.store.load_loans(),
                as_of,
                threshold_days=self.config.dividend.overdue_interest_days,
            )

        self.store.save_dividend(distribution.dividend, distribution.allocations)
        self._publish(
            "dividend.distributed",
            distribution.dividend.dividend_id,
            {
                "dividend": distribution.dividend,
                "total_allocated": distribution.total_allocated,
                "total_deductions": distribution.total_deductions,
                "members": len(distribution.allocations),
            },
        )
        return distribution

    def run_quarterly_dividend(
        self, quarter: int, year: int, dividend_rate: Decimal | None = None
    ) -> DividendDistribution:
        """Run the dividend for a quarter using its profit statement."""
        statement = self.quarterly_profit(quarter, year)
        logger.info(
            "Q%d %d profit: income=%s expenses=%s net=%s",
            quarter,
            year,
            statement.total_income,
            statement.total_expenses,
            statement.net_profit,
        )
        return self.run_dividend(
            statement.net_profit,
            quarter_end_date(quarter, year),
            dividend_rate=dividend_rate,
        )

    def mark_dividend_paid(self, dividend_id: str, member_id: str, paid_date: date) -> DividendPayment:
        """Mark a member's payment from a dividend run as paid."""
        for payment in self.store.load_payments_for_dividend(dividend_id):
            if payment.member_id == member_id:
                paid = mark_paid(payment, paid_date)
                self.store.update_dividend_payment(paid)
                self._publish("dividend.payment_paid", paid.payment_id, paid)
                return paid
        raise EntityNotFoundError(f"No payment for member {member_id} in dividend {dividend_id}")

    def _publish(self, event_type: str, subject: str, data: Any) -> None:
        if self.sink is None:
            return
        event = Event(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            event_time=datetime.now(timezone.utc),
            source=self.config.stream.source,
            subject=subject,
            data=to_dict(data),
        )
        # The write already succeeded; a failed notification must not undo it.
        try:
            self.sink.publish(event)
        except SinkError:
            logger.exception("Failed to publish %s for %s", event_type, subject)
