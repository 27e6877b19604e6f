"""Member and contribution generators."""

import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

from welfare_books.generators.base import BaseGenerator
from welfare_books.models.financial import CashCategory, CashEntry, EntryType, Member, MemberStatus


class MemberGenerator(BaseGenerator):
    """Generate synthetic members."""

    def generate(
        self,
        status: MemberStatus = MemberStatus.ACTIVE,
        joined_before: date | None = None,
    ) -> Member:
        """Generate a member.

        Parameters
        ----------
        status : MemberStatus
            Membership status.
        joined_before : date | None
            Latest possible joining date (default: today).

        Returns
        -------
        Member
            Generated member.
        """
        latest = joined_before or date.today()
        joined = latest - timedelta(days=random.randint(0, 365 * 5))

        return Member(
            member_id=self.fake.uuid4(),
            name=self.fake.name(),
            shares=random.randint(1, 20),
            status=status,
            joined_date=joined,
            phone=self.fake.numerify("07########"),
            address=self.fake.address().replace("\n", ", "),
        )


class ContributionGenerator(BaseGenerator):
    """Generate monthly cash-book contributions for members."""

    def generate_for_member(
        self,
        member: Member,
        start: date,
        months: int,
        base_amount: Decimal | None = None,
    ) -> Iterator[CashEntry]:
        """Yield one contribution per month starting at ``start``.

        Amounts vary around ``base_amount`` (default: 500 Rs. per share).
        """
        base = base_amount if base_amount is not None else Decimal(500 * member.shares)

        for i in range(months):
            # Roughly monthly; exact day is irrelevant for valuation
            entry_date = start + timedelta(days=30 * i + random.randint(0, 5))
            variation = Decimal(random.randint(-2, 2) * 50)

            yield CashEntry(
                entry_id=self.fake.uuid4(),
                date=entry_date,
                entry_type=EntryType.INCOME,
                category=CashCategory.CONTRIBUTION,
                amount=max(base + variation, Decimal("50")),
                member_id=member.member_id,
                description=f"Monthly contribution {entry_date:%Y-%m}",
            )
