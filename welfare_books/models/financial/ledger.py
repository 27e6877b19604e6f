"""Cash book and bank account models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from welfare_books.models.financial.enums import BankAccountType, CashCategory, EntryType


@dataclass(frozen=True)
class CashEntry:
    """Cash-book row.

    ``member_id`` is set for contributions attributed to a member and
    ``None`` for organization-level income and expenses.
    """

    entry_id: str
    date: date
    entry_type: EntryType
    category: CashCategory
    amount: Decimal
    member_id: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        from welfare_books.accounting.money import parse_date, to_money

        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "amount", to_money(self.amount))

    @property
    def signed_amount(self) -> Decimal:
        """Amount as it affects the cash balance (expenses negative)."""
        if self.entry_type == EntryType.EXPENSE:
            return -self.amount
        return self.amount


@dataclass
class BankAccount:
    """Organization bank account or fixed deposit."""

    account_id: str
    account_name: str
    bank_name: str
    account_type: BankAccountType
    balance: Decimal
    start_date: date
    interest_rate: Decimal | None = None
    maturity_date: date | None = None
