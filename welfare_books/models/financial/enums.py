"""Enumeration types for welfare-organization entities."""

from enum import Enum


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class LoanType(str, Enum):
    MEMBER = "MEMBER"
    SPECIAL = "SPECIAL"
    BUSINESS = "BUSINESS"


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DEFAULTED = "DEFAULTED"


class EntryType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class CashCategory(str, Enum):
    """Cash-book categories.

    Income categories attributed to a member count toward that member's
    assets; organization-level categories feed the quarterly profit.
    """

    MEMBERSHIP_FEE = "MEMBERSHIP_FEE"
    CONTRIBUTION = "CONTRIBUTION"
    LOAN_INTEREST = "LOAN_INTEREST"
    LATE_PAYMENT_FEE = "LATE_PAYMENT_FEE"
    PENALTY = "PENALTY"
    SERVICE_FEE = "SERVICE_FEE"
    FIXED_DEPOSIT_INTEREST = "FIXED_DEPOSIT_INTEREST"
    SAVINGS_INTEREST = "SAVINGS_INTEREST"
    OTHER_INCOME = "OTHER_INCOME"
    OPERATING_COST = "OPERATING_COST"
    BANK_FEE = "BANK_FEE"
    OTHER_EXPENSE = "OTHER_EXPENSE"


class BankAccountType(str, Enum):
    SAVINGS = "SAVINGS"
    CURRENT = "CURRENT"
    FIXED_DEPOSIT = "FIXED_DEPOSIT"


class DividendPaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
