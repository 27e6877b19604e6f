"""Financial domain models."""

from welfare_books.models.financial.dividend import Dividend, DividendPayment
from welfare_books.models.financial.enums import (
    BankAccountType,
    CashCategory,
    DividendPaymentStatus,
    EntryType,
    LoanStatus,
    LoanType,
    MemberStatus,
)
from welfare_books.models.financial.ledger import BankAccount, CashEntry
from welfare_books.models.financial.loan import Loan, Payment
from welfare_books.models.financial.member import Member

__all__ = [
    "BankAccount",
    "BankAccountType",
    "CashCategory",
    "CashEntry",
    "Dividend",
    "DividendPayment",
    "DividendPaymentStatus",
    "EntryType",
    "Loan",
    "LoanStatus",
    "LoanType",
    "Member",
    "MemberStatus",
    "Payment",
]
