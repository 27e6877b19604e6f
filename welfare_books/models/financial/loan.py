"""Loan models for the welfare organization."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from welfare_books.exceptions import InvalidInputError
from welfare_books.models.financial.enums import LoanStatus, LoanType

ZERO = Decimal("0")

_LOAN_AMOUNTS = (
    "amount_taken",
    "balance",
    "interest_rate",
    "unpaid_interest",
    "principal_paid",
    "interest_paid",
)


@dataclass
class Loan:
    """Member loan snapshot.

    ``last_interest_paid_date`` is the watermark interest accrues from; it
    defaults to ``start_date`` until a payment with an interest component
    is applied.
    """

    loan_id: str
    member_id: str
    loan_type: LoanType
    amount_taken: Decimal
    balance: Decimal  # Outstanding principal
    interest_rate: Decimal  # Nominal annual percentage (e.g. 9 for 9%)
    daily_interest: bool
    start_date: date
    last_interest_paid_date: date | None = None
    unpaid_interest: Decimal = ZERO
    principal_paid: Decimal = ZERO
    interest_paid: Decimal = ZERO
    status: LoanStatus = LoanStatus.ACTIVE

    def __post_init__(self) -> None:
        from welfare_books.accounting.money import parse_date, to_money

        for name in _LOAN_AMOUNTS:
            setattr(self, name, to_money(getattr(self, name)))
        self.start_date = parse_date(self.start_date)
        if self.last_interest_paid_date is None:
            self.last_interest_paid_date = self.start_date
        else:
            self.last_interest_paid_date = parse_date(self.last_interest_paid_date)

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE


@dataclass(frozen=True)
class Payment:
    """Loan payment, split into principal and interest.

    Created once when submitted and applied exactly once to its loan.
    """

    payment_id: str
    loan_id: str
    date: date
    principal_amount: Decimal = ZERO
    interest_amount: Decimal = ZERO
    note: str = ""

    def __post_init__(self) -> None:
        from welfare_books.accounting.money import parse_date, to_money

        # Frozen: coerce through object.__setattr__
        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "principal_amount", to_money(self.principal_amount))
        object.__setattr__(self, "interest_amount", to_money(self.interest_amount))
        if self.principal_amount < 0 or self.interest_amount < 0:
            raise InvalidInputError(
                f"Payment {self.payment_id}: amounts must not be negative"
            )
        if self.principal_amount == 0 and self.interest_amount == 0:
            raise InvalidInputError(
                f"Payment {self.payment_id}: principal or interest must be positive"
            )

    @property
    def total_amount(self) -> Decimal:
        return self.principal_amount + self.interest_amount
