"""Loan and bank account generators."""

import random
from datetime import date, timedelta
from decimal import Decimal

from welfare_books.config import LoanRateConfig
from welfare_books.generators.base import BaseGenerator
from welfare_books.models.financial import BankAccount, BankAccountType, Loan, LoanType


class LoanGenerator(BaseGenerator):
    """Generate synthetic member loans at the configured default rates."""

    # Principal ranges in thousands of rupees
    AMOUNT_RANGES = {
        LoanType.MEMBER: (10, 100),
        LoanType.SPECIAL: (50, 250),
        LoanType.BUSINESS: (100, 500),
    }

    def __init__(self, seed: int | None = None, rates: LoanRateConfig | None = None) -> None:
        super().__init__(seed)
        self.rates = rates or LoanRateConfig()

    def generate(
        self,
        member_id: str,
        start_date: date,
        loan_type: LoanType = LoanType.MEMBER,
        daily_interest: bool | None = None,
    ) -> Loan:
        """Generate an active loan issued on ``start_date``."""
        low, high = self.AMOUNT_RANGES[loan_type]
        amount = Decimal(random.randint(low, high) * 1000)

        return Loan(
            loan_id=self.fake.uuid4(),
            member_id=member_id,
            loan_type=loan_type,
            amount_taken=amount,
            balance=amount,
            interest_rate=self.rates.rate_for(loan_type),
            daily_interest=random.random() < 0.5 if daily_interest is None else daily_interest,
            start_date=start_date,
        )


class BankAccountGenerator(BaseGenerator):
    """Generate organization bank accounts."""

    BANKS = ["Bank of Ceylon", "People's Bank", "Sampath Bank", "Commercial Bank"]

    def generate(self, start_date: date) -> BankAccount:
        account_type = random.choice(list(BankAccountType))
        balance = Decimal(random.randint(50, 1000) * 1000)
        is_deposit = account_type == BankAccountType.FIXED_DEPOSIT

        return BankAccount(
            account_id=self.fake.uuid4(),
            account_name=f"{account_type.value.replace('_', ' ').title()} {self.fake.numerify('####')}",
            bank_name=random.choice(self.BANKS),
            account_type=account_type,
            balance=balance,
            start_date=start_date,
            interest_rate=Decimal(str(round(random.uniform(3, 11), 2))),
            maturity_date=start_date + timedelta(days=365) if is_deposit else None,
        )
