"""Member model for the welfare organization."""

from dataclasses import dataclass
from datetime import date

from welfare_books.models.financial.enums import MemberStatus


@dataclass
class Member:
    """Organization member.

    Asset value is not stored; it is derived from the cash book and the
    dividend history as of a given date (see ``AssetValuation``).
    """

    member_id: str
    name: str
    shares: int
    status: MemberStatus
    joined_date: date
    phone: str = ""
    address: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE
