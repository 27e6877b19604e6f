"""In-memory persistence store with referential integrity."""

from dataclasses import dataclass, field

from welfare_books.accounting.periods import DateRange
from welfare_books.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidInputError,
    ReferentialIntegrityError,
)
from welfare_books.models.financial import (
    BankAccount,
    CashEntry,
    Dividend,
    DividendPayment,
    Loan,
    Member,
    Payment,
)


@dataclass
class WelfareDataStore:
    """In-memory store for members, loans, the cash book and dividends.

    Each write method performs all of its checks before touching any
    collection, so a rejected write leaves the store unchanged.
    """

    # Primary entities
    members: dict[str, Member] = field(default_factory=dict)
    loans: dict[str, Loan] = field(default_factory=dict)
    bank_accounts: dict[str, BankAccount] = field(default_factory=dict)
    dividends: dict[str, Dividend] = field(default_factory=dict)

    # Ledger rows
    cash_entries: list[CashEntry] = field(default_factory=list)
    loan_payments: list[Payment] = field(default_factory=list)
    dividend_payments: list[DividendPayment] = field(default_factory=list)

    # Relationship indexes
    _member_loans: dict[str, list[str]] = field(default_factory=dict)
    _member_entries: dict[str, list[int]] = field(default_factory=dict)
    _member_dividend_payments: dict[str, list[int]] = field(default_factory=dict)
    _loan_payments: dict[str, list[int]] = field(default_factory=dict)
    _dividend_payments: dict[str, list[int]] = field(default_factory=dict)
    _payment_ids: set[str] = field(default_factory=set)

    def add_member(self, member: Member) -> None:
        """Add or replace a member."""
        self.members[member.member_id] = member
        self._member_loans.setdefault(member.member_id, [])
        self._member_entries.setdefault(member.member_id, [])
        self._member_dividend_payments.setdefault(member.member_id, [])

    def add_loan(self, loan: Loan) -> None:
        """Add a new loan for an existing member."""
        if loan.member_id not in self.members:
            raise ReferentialIntegrityError(f"Member {loan.member_id} not found")
        if loan.loan_id in self.loans:
            raise InvalidEntityStateError(f"Loan {loan.loan_id} already exists")

        self.loans[loan.loan_id] = loan
        self._member_loans[loan.member_id].append(loan.loan_id)
        self._loan_payments[loan.loan_id] = []

    def add_bank_account(self, account: BankAccount) -> None:
        """Add or replace an organization bank account."""
        self.bank_accounts[account.account_id] = account

    def add_cash_entry(self, entry: CashEntry) -> None:
        """Append a cash-book row."""
        if entry.member_id is not None and entry.member_id not in self.members:
            raise ReferentialIntegrityError(f"Member {entry.member_id} not found")

        idx = len(self.cash_entries)
        self.cash_entries.append(entry)
        if entry.member_id is not None:
            self._member_entries[entry.member_id].append(idx)

    # Persistence interface
    def load_loan(self, loan_id: str) -> Loan:
        """Get a loan by ID."""
        try:
            return self.loans[loan_id]
        except KeyError:
            raise EntityNotFoundError(f"Loan {loan_id} not found") from None

    def save_loan(self, loan: Loan) -> None:
        """Replace the stored state of an existing loan."""
        current = self.load_loan(loan.loan_id)
        if current.member_id != loan.member_id:
            raise InvalidEntityStateError(f"Loan {loan.loan_id} cannot change member")
        self.loans[loan.loan_id] = loan

    def record_loan_payment(self, payment: Payment, loan: Loan) -> None:
        """Store a payment together with the loan state it produced."""
        if payment.loan_id != loan.loan_id:
            raise InvalidInputError(
                f"Payment {payment.payment_id} is for loan {payment.loan_id}, not {loan.loan_id}"
            )
        if payment.payment_id in self._payment_ids:
            raise InvalidEntityStateError(f"Payment {payment.payment_id} already applied")
        self.save_loan(loan)

        idx = len(self.loan_payments)
        self.loan_payments.append(payment)
        self._loan_payments[loan.loan_id].append(idx)
        self._payment_ids.add(payment.payment_id)

    def load_ledger_entries(
        self, member_id: str | None, date_range: DateRange
    ) -> list[CashEntry]:
        """Cash entries for a member (or all entries when ``None``) within ``date_range``."""
        if member_id is None:
            entries = self.cash_entries
        else:
            entries = [self.cash_entries[i] for i in self._member_entries.get(member_id, [])]
        return [e for e in entries if date_range.contains(e.date)]

    def load_dividend_payments(
        self, member_id: str | None, date_range: DateRange
    ) -> list[DividendPayment]:
        """Dividend payments for a member (or all when ``None``) within ``date_range``."""
        if member_id is None:
            payments = self.dividend_payments
        else:
            indices = self._member_dividend_payments.get(member_id, [])
            payments = [self.dividend_payments[i] for i in indices]
        return [p for p in payments if date_range.contains(p.date)]

    def load_bank_accounts(self) -> list[BankAccount]:
        return list(self.bank_accounts.values())

    def load_loans(self) -> list[Loan]:
        return list(self.loans.values())

    def load_loan_payments(self, loan_id: str) -> list[Payment]:
        """Payments applied to a loan, in the order they were recorded."""
        indices = self._loan_payments.get(loan_id, [])
        return [self.loan_payments[i] for i in indices]

    def load_member(self, member_id: str) -> Member:
        try:
            return self.members[member_id]
        except KeyError:
            raise EntityNotFoundError(f"Member {member_id} not found") from None

    def load_active_members(self) -> list[Member]:
        return [m for m in self.members.values() if m.is_active]

    def load_member_loans(self, member_id: str) -> list[Loan]:
        """Get all loans for a member."""
        loan_ids = self._member_loans.get(member_id, [])
        return [self.loans[lid] for lid in loan_ids]

    def save_dividend(self, dividend: Dividend, payments: list[DividendPayment]) -> None:
        """Store a dividend run and its member payments together."""
        if dividend.dividend_id in self.dividends:
            raise InvalidEntityStateError(f"Dividend {dividend.dividend_id} already recorded")
        for payment in payments:
            if payment.dividend_id != dividend.dividend_id:
                raise InvalidInputError(
                    f"Dividend payment {payment.payment_id} belongs to {payment.dividend_id}"
                )
            if payment.member_id not in self.members:
                raise ReferentialIntegrityError(f"Member {payment.member_id} not found")

        self.dividends[dividend.dividend_id] = dividend
        self._dividend_payments[dividend.dividend_id] = []
        for payment in payments:
            idx = len(self.dividend_payments)
            self.dividend_payments.append(payment)
            self._dividend_payments[dividend.dividend_id].append(idx)
            self._member_dividend_payments[payment.member_id].append(idx)

    def load_dividend(self, dividend_id: str) -> Dividend:
        try:
            return self.dividends[dividend_id]
        except KeyError:
            raise EntityNotFoundError(f"Dividend {dividend_id} not found") from None

    def load_payments_for_dividend(self, dividend_id: str) -> list[DividendPayment]:
        """Member payments of one dividend run."""
        indices = self._dividend_payments.get(dividend_id, [])
        return [self.dividend_payments[i] for i in indices]

    def update_dividend_payment(self, payment: DividendPayment) -> None:
        """Replace a stored dividend payment (status changes only)."""
        for idx in self._dividend_payments.get(payment.dividend_id, []):
            current = self.dividend_payments[idx]
            if current.payment_id == payment.payment_id:
                if current.member_id != payment.member_id or current.amount != payment.amount:
                    raise InvalidEntityStateError(
                        f"Dividend payment {payment.payment_id} amounts are immutable"
                    )
                self.dividend_payments[idx] = payment
                return
        raise EntityNotFoundError(f"Dividend payment {payment.payment_id} not found")

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "members": len(self.members),
            "loans": len(self.loans),
            "bank_accounts": len(self.bank_accounts),
            "dividends": len(self.dividends),
            "cash_entries": len(self.cash_entries),
            "loan_payments": len(self.loan_payments),
            "dividend_payments": len(self.dividend_payments),
        }
