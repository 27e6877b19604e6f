"""Loan payment application."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from welfare_books.accounting.interest import accrued_interest
from welfare_books.accounting.money import ZERO, parse_date, round_money, to_money
from welfare_books.exceptions import (
    InvalidDateError,
    InvalidEntityStateError,
    InvalidInputError,
    OverpaymentError,
)
from welfare_books.models.financial import Loan, LoanStatus, Payment

logger = logging.getLogger(__name__)


def apply_payment(loan: Loan, payment: Payment) -> Loan:
    """Apply ``payment`` to ``loan`` and return the updated loan.

    The input loan is left untouched; every field of the returned snapshot
    reflects the payment, or an error is raised and nothing changes.

    Principal reduces the balance. An interest component retires the
    interest owed as of the payment date (carry-over plus new accrual on
    the pre-payment balance): a shortfall stays in ``unpaid_interest``,
    an excess is ignored, and the interest watermark moves to the payment
    date. A principal-only payment leaves both the carry-over and the
    watermark as they were.

    Parameters
    ----------
    loan : Loan
        Current loan snapshot.
    payment : Payment
        Payment to apply.

    Returns
    -------
    Loan
        New loan snapshot.

    Raises
    ------
    OverpaymentError
        If the principal component exceeds the outstanding balance.
    InvalidDateError
        If the payment predates ``last_interest_paid_date``.
    InvalidInputError
        If the payment belongs to another loan.
    """
    if payment.loan_id != loan.loan_id:
        raise InvalidInputError(
            f"Payment {payment.payment_id} is for loan {payment.loan_id}, not {loan.loan_id}"
        )
    if payment.principal_amount > loan.balance:
        logger.warning(
            "Rejected payment %s: principal %s exceeds balance %s of loan %s",
            payment.payment_id,
            payment.principal_amount,
            loan.balance,
            loan.loan_id,
        )
        raise OverpaymentError(
            f"Principal {payment.principal_amount} exceeds balance {loan.balance} "
            f"of loan {loan.loan_id}"
        )
    if payment.date < loan.last_interest_paid_date:
        logger.warning(
            "Rejected payment %s: dated %s before last interest payment %s",
            payment.payment_id,
            payment.date,
            loan.last_interest_paid_date,
        )
        raise InvalidDateError(
            f"Payment date {payment.date} precedes last interest payment "
            f"{loan.last_interest_paid_date} of loan {loan.loan_id}"
        )

    unpaid_interest = loan.unpaid_interest
    last_interest_paid_date = loan.last_interest_paid_date

    if payment.interest_amount > 0:
        owed = round_money(accrued_interest(loan, payment.date))
        unpaid_interest = max(owed - payment.interest_amount, ZERO)
        excess = payment.interest_amount - owed
        if excess > 0:
            logger.info(
                "Payment %s overpays interest on loan %s by %s; excess not carried",
                payment.payment_id,
                loan.loan_id,
                excess,
            )
        last_interest_paid_date = payment.date

    balance = loan.balance - payment.principal_amount
    status = LoanStatus.COMPLETED if balance == 0 else loan.status

    updated = replace(
        loan,
        balance=balance,
        unpaid_interest=unpaid_interest,
        last_interest_paid_date=last_interest_paid_date,
        principal_paid=loan.principal_paid + payment.principal_amount,
        interest_paid=loan.interest_paid + payment.interest_amount,
        status=status,
    )

    logger.debug(
        "Applied payment %s to loan %s: balance %s -> %s, unpaid interest %s",
        payment.payment_id,
        loan.loan_id,
        loan.balance,
        updated.balance,
        updated.unpaid_interest,
    )
    return updated


def apply_payments(loan: Loan, payments: Iterable[Payment]) -> Loan:
    """Apply payments in date order; the first failure aborts the sequence."""
    for payment in sorted(payments, key=lambda p: p.date):
        loan = apply_payment(loan, payment)
    return loan


def split_payment(loan: Loan, amount: Decimal, on: date, payment_id: str) -> Payment:
    """Split a single amount into interest first, then principal.

    Parameters
    ----------
    loan : Loan
        Loan the amount is paid against.
    amount : Decimal
        Amount received.
    on : date
        Payment date.
    payment_id : str
        Identifier for the created payment.

    Returns
    -------
    Payment
        Payment with interest capped at the interest owed on ``on``.
    """
    amount = to_money(amount)
    on = parse_date(on)
    if amount <= 0:
        raise InvalidInputError(f"Payment amount must be positive, got {amount}")

    owed = round_money(accrued_interest(loan, on))
    interest_part = min(amount, owed)
    principal_part = amount - interest_part
    if principal_part > loan.balance:
        raise OverpaymentError(
            f"Amount {amount} exceeds interest {owed} plus balance {loan.balance} "
            f"of loan {loan.loan_id}"
        )

    return Payment(
        payment_id=payment_id,
        loan_id=loan.loan_id,
        date=on,
        principal_amount=principal_part,
        interest_amount=interest_part,
    )


def mark_defaulted(loan: Loan) -> Loan:
    """Return a copy of ``loan`` flagged as defaulted."""
    if loan.status == LoanStatus.COMPLETED:
        raise InvalidEntityStateError(f"Loan {loan.loan_id} is already completed")
    return replace(loan, status=LoanStatus.DEFAULTED)
