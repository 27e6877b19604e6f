#!/usr/bin/env python3
"""Build a sample set of books and run one quarterly dividend.

Generates members with monthly contributions, a few loans with
interest-bearing repayments, organization bank accounts, and then
distributes the quarter's profit. Events and the resulting allocations
are printed to the console.
"""

import argparse
import random
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from welfare_books.accounting.money import round_money
from welfare_books.books import WelfareBooks
from welfare_books.config import WelfareConfig
from welfare_books.generators.financial import (
    BankAccountGenerator,
    ContributionGenerator,
    LoanGenerator,
    MemberGenerator,
)
from welfare_books.logging import setup_logging
from welfare_books.models.financial import CashCategory, CashEntry, EntryType, Member
from welfare_books.sinks.console import ConsoleSink
from welfare_books.store.financial import WelfareDataStore


def generate_members(
    books: WelfareBooks,
    member_gen: MemberGenerator,
    contribution_gen: ContributionGenerator,
    num_members: int,
    start: date,
    months: int,
) -> list[Member]:
    """Create members and their monthly contributions."""
    print("\n1. Generating members and contributions...")
    members = []
    for _ in range(num_members):
        member = member_gen.generate(joined_before=start)
        books.store.add_member(member)
        for entry in contribution_gen.generate_for_member(member, start, months):
            books.record_cash_entry(entry)
        members.append(member)
    print(f"   {len(members)} members, {len(books.store.cash_entries)} contributions")
    return members


def generate_loans(
    books: WelfareBooks,
    loan_gen: LoanGenerator,
    members: list[Member],
    start: date,
    months: int,
) -> None:
    """Issue loans to some members and pay interest on them monthly."""
    print("\n2. Issuing loans and recording repayments...")
    borrowers = random.sample(members, k=max(1, len(members) // 3))
    for member in borrowers:
        loan = books.issue_loan(loan_gen.generate(member.member_id, start))

        for month in range(1, months):
            # Some borrowers skip payments and fall behind on interest
            if random.random() < 0.2:
                continue
            pay_date = start + timedelta(days=30 * month)
            interest = round_money(books.interest_due(loan.loan_id, pay_date))
            principal = min(round_money(loan.amount_taken / 10), books.store.load_loan(loan.loan_id).balance)
            loan = books.pay_loan_amount(loan.loan_id, interest + principal, pay_date)
            books.record_cash_entry(
                CashEntry(
                    entry_id=loan_gen.fake.uuid4(),
                    date=pay_date,
                    entry_type=EntryType.INCOME,
                    category=CashCategory.LOAN_INTEREST,
                    amount=interest,
                    member_id=member.member_id,
                    description=f"Interest on loan {loan.loan_id[:8]}",
                )
            )
    print(f"   {len(borrowers)} loans, {len(books.store.loan_payments)} payments")


def main() -> None:
    """Generate sample books and distribute one quarter's dividend."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--members", type=int, default=10, help="Number of members")
    parser.add_argument("--year", type=int, default=2024, help="Year of the quarter")
    parser.add_argument("--quarter", type=int, default=1, choices=[1, 2, 3, 4])
    parser.add_argument("--rate", type=Decimal, default=None, help="Dividend rate (percent)")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    setup_logging(args.log_level)
    config = WelfareConfig(seed=args.seed)

    start = date(args.year, args.quarter * 3 - 2, 1)
    months = 3

    print("=" * 60)
    print(f"Sample books for Q{args.quarter} {args.year}")
    print("=" * 60)

    books = WelfareBooks(WelfareDataStore(), sink=ConsoleSink(pretty=False), config=config)
    member_gen = MemberGenerator(seed=args.seed)
    contribution_gen = ContributionGenerator(seed=args.seed)
    loan_gen = LoanGenerator(seed=args.seed, rates=config.loan_rates)
    bank_gen = BankAccountGenerator(seed=args.seed)

    members = generate_members(books, member_gen, contribution_gen, args.members, start, months)
    for _ in range(2):
        books.store.add_bank_account(bank_gen.generate(start))
    generate_loans(books, loan_gen, members, start, months)

    print("\n3. Running quarterly dividend...")
    distribution = books.run_quarterly_dividend(args.quarter, args.year, dividend_rate=args.rate)

    sink = ConsoleSink(pretty=False)
    sink.write_batch("dividend_payments", distribution.allocations)

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    for name, count in books.store.summary().items():
        print(f"{name + ':':20}{count}")
    print(f"{'pool:':20}{round_money(distribution.dividend_pool)}")
    print(f"{'allocated:':20}{distribution.total_allocated}")
    print(f"{'deductions:':20}{distribution.total_deductions}")
    print("=" * 60)


if __name__ == "__main__":
    main()
