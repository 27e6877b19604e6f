"""One-time password verification for sensitive operations.

``OtpStore`` is an instance-scoped, time-bounded store of issued
challenges. It is handed to whatever layer handles requests; expiry and
cleanup are explicit calls rather than background timers. Delivering the
code (SMS) is the caller's job: ``render_otp_message`` only builds the text.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from welfare_books.config import OtpConfig
from welfare_books.exceptions import (
    InvalidInputError,
    OtpExpiredError,
    OtpMismatchError,
    OtpNotFoundError,
)
from welfare_books.models.financial import CashCategory, CashEntry, EntryType

logger = logging.getLogger(__name__)


class OtpOperation(str, Enum):
    USER_EDIT = "USER_EDIT"
    LOAN_EDIT = "LOAN_EDIT"
    LOAN_PAYMENT = "LOAN_PAYMENT"
    MEMBER_FEE_EDIT = "MEMBER_FEE_EDIT"
    LOAN_INTEREST_EDIT = "LOAN_INTEREST_EDIT"
    CONTRIBUTION_EDIT = "CONTRIBUTION_EDIT"
    TRANSACTION_EDIT = "TRANSACTION_EDIT"

    @property
    def description(self) -> str:
        return _OPERATION_DESCRIPTIONS[self]


_OPERATION_DESCRIPTIONS = {
    OtpOperation.USER_EDIT: "user account update",
    OtpOperation.LOAN_EDIT: "loan modification",
    OtpOperation.LOAN_PAYMENT: "loan payment",
    OtpOperation.MEMBER_FEE_EDIT: "member fee edit",
    OtpOperation.LOAN_INTEREST_EDIT: "loan interest edit",
    OtpOperation.CONTRIBUTION_EDIT: "contribution edit",
    OtpOperation.TRANSACTION_EDIT: "transaction edit",
}

OTP_TEMPLATES = {
    "ENGLISH": (
        "Your verification code for {operation} is: {code}. "
        "Valid for {validity_minutes} minutes."
    ),
    "SINHALA": (
        "ඔබගේ {operation} සඳහා තහවුරු කිරීමේ කේතය: {code}. "
        "මිනිත්තු {validity_minutes} සඳහා වලංගු වේ."
    ),
}


@dataclass(frozen=True)
class CategoryPolicy:
    """Rules attached to a cash-book category."""

    requires_member: bool = False
    otp_operation: OtpOperation | None = None

    @property
    def requires_otp(self) -> bool:
        return self.otp_operation is not None


CATEGORY_POLICIES: dict[CashCategory, CategoryPolicy] = {
    CashCategory.MEMBERSHIP_FEE: CategoryPolicy(True, OtpOperation.MEMBER_FEE_EDIT),
    CashCategory.CONTRIBUTION: CategoryPolicy(True, OtpOperation.CONTRIBUTION_EDIT),
    CashCategory.LOAN_INTEREST: CategoryPolicy(True, OtpOperation.LOAN_INTEREST_EDIT),
    CashCategory.LATE_PAYMENT_FEE: CategoryPolicy(True, OtpOperation.TRANSACTION_EDIT),
    CashCategory.PENALTY: CategoryPolicy(False, OtpOperation.TRANSACTION_EDIT),
    CashCategory.SERVICE_FEE: CategoryPolicy(),
    CashCategory.FIXED_DEPOSIT_INTEREST: CategoryPolicy(),
    CashCategory.SAVINGS_INTEREST: CategoryPolicy(),
    CashCategory.OTHER_INCOME: CategoryPolicy(),
    CashCategory.OPERATING_COST: CategoryPolicy(),
    CashCategory.BANK_FEE: CategoryPolicy(),
    CashCategory.OTHER_EXPENSE: CategoryPolicy(),
}


def policy_for(category: CashCategory) -> CategoryPolicy:
    """Policy for ``category``; every category has an explicit entry."""
    return CATEGORY_POLICIES[category]


def validate_cash_entry(entry: CashEntry) -> None:
    """Reject entries that break their category's policy.

    Raises
    ------
    InvalidInputError
        If the amount is not positive, or a member-attributed income
        category has no member.
    """
    if entry.amount <= 0:
        raise InvalidInputError(f"Cash entry {entry.entry_id}: amount must be positive")
    policy = policy_for(entry.category)
    if entry.entry_type == EntryType.INCOME and policy.requires_member and not entry.member_id:
        raise InvalidInputError(
            f"Cash entry {entry.entry_id}: category {entry.category.value} requires a member"
        )


@dataclass(frozen=True)
class OtpChallenge:
    """An issued one-time password awaiting verification."""

    token: str
    code: str
    phone_number: str
    operation: OtpOperation
    expires_at: datetime
    verified: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class OtpStore:
    """Keyed store of OTP challenges with explicit expiry.

    Parameters
    ----------
    config : OtpConfig | None
        Validity window and code length.
    clock : Callable[[], datetime] | None
        Time source (default: ``datetime.now``).
    """

    def __init__(
        self,
        config: OtpConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or OtpConfig()
        self._clock = clock or datetime.now
        self._challenges: dict[str, OtpChallenge] = {}

    def __len__(self) -> int:
        return len(self._challenges)

    def __contains__(self, token: object) -> bool:
        return token in self._challenges

    def issue(self, phone_number: str, operation: OtpOperation) -> OtpChallenge:
        """Create a challenge for ``operation`` addressed to ``phone_number``."""
        if not phone_number:
            raise InvalidInputError("Phone number is required")

        low = 10 ** (self.config.code_length - 1)
        code = str(low + secrets.randbelow(9 * low))

        challenge = OtpChallenge(
            token=str(uuid.uuid4()),
            code=code,
            phone_number=phone_number,
            operation=operation,
            expires_at=self._clock() + timedelta(minutes=self.config.validity_minutes),
        )
        self._challenges[challenge.token] = challenge
        logger.info("Issued OTP %s for %s", challenge.token, operation.description)
        return challenge

    def verify(self, token: str, code: str) -> OtpChallenge:
        """Check ``code`` against the challenge and mark it verified.

        Raises
        ------
        OtpNotFoundError
            Unknown token.
        OtpExpiredError
            Token past its expiry (the challenge is removed).
        OtpMismatchError
            Wrong code (the challenge stays open).
        """
        challenge = self._get_live(token)
        if not secrets.compare_digest(challenge.code, code):
            logger.warning("OTP %s: code mismatch", token)
            raise OtpMismatchError("Invalid OTP code")

        verified = replace(challenge, verified=True)
        self._challenges[token] = verified
        logger.info("OTP %s verified for %s", token, challenge.operation.description)
        return verified

    def is_verified(self, token: str, operation: OtpOperation | None = None) -> bool:
        """Whether ``token`` is verified and live, optionally for ``operation``."""
        try:
            challenge = self._get_live(token)
        except (OtpNotFoundError, OtpExpiredError):
            return False
        if operation is not None and challenge.operation != operation:
            return False
        return challenge.verified

    def discard(self, token: str) -> None:
        """Remove a challenge (e.g. after its SMS failed to send)."""
        self._challenges.pop(token, None)

    def cleanup(self) -> int:
        """Drop verified and expired challenges; returns how many were removed."""
        now = self._clock()
        stale = [
            token
            for token, challenge in self._challenges.items()
            if challenge.verified or challenge.is_expired(now)
        ]
        for token in stale:
            del self._challenges[token]
        if stale:
            logger.debug("Cleaned up %d OTP challenges", len(stale))
        return len(stale)

    def _get_live(self, token: str) -> OtpChallenge:
        challenge = self._challenges.get(token)
        if challenge is None:
            raise OtpNotFoundError("Invalid OTP token")
        if challenge.is_expired(self._clock()):
            del self._challenges[token]
            raise OtpExpiredError("OTP has expired")
        return challenge


def render_otp_message(
    challenge: OtpChallenge,
    language: str = "ENGLISH",
    validity_minutes: int = 10,
) -> str:
    """SMS text for ``challenge`` in ``language``."""
    try:
        template = OTP_TEMPLATES[language.upper()]
    except KeyError as exc:
        raise InvalidInputError(f"Unsupported OTP language: {language}") from exc
    return template.format(
        operation=challenge.operation.description,
        code=challenge.code,
        validity_minutes=validity_minutes,
    )
