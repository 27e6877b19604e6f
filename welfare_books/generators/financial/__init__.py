"""Financial domain generators."""

from welfare_books.generators.financial.loan import BankAccountGenerator, LoanGenerator
from welfare_books.generators.financial.member import ContributionGenerator, MemberGenerator

__all__ = [
    "BankAccountGenerator",
    "ContributionGenerator",
    "LoanGenerator",
    "MemberGenerator",
]
