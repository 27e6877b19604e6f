"""Custom exception hierarchy for welfare-books."""

from __future__ import annotations

from typing import Any


class WelfareBooksError(Exception):
    """Base exception for all welfare-books errors."""


class InvalidInputError(WelfareBooksError):
    """Raised when an argument is malformed or out of range."""


class PaymentError(WelfareBooksError):
    """Raised when a loan payment violates a precondition."""


class OverpaymentError(PaymentError):
    """Raised when a principal payment exceeds the outstanding balance."""


class InvalidDateError(PaymentError):
    """Raised when a payment is dated before the last interest payment."""


class InsufficientDataError(WelfareBooksError):
    """Raised when a dividend run has no active members to allocate to.

    The computed distribution (pool included, no allocations) is attached
    as ``distribution`` so callers can still report the pool.
    """

    def __init__(self, message: str, distribution: Any = None) -> None:
        super().__init__(message)
        self.distribution = distribution


class EntityNotFoundError(WelfareBooksError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(WelfareBooksError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(WelfareBooksError):
    """Raised when configuration is invalid or missing."""


class SinkError(WelfareBooksError):
    """Raised when a sink operation fails."""


class OtpError(WelfareBooksError):
    """Base exception for OTP verification failures."""


class OtpNotFoundError(OtpError):
    """Raised when an OTP token is unknown or already discarded."""


class OtpExpiredError(OtpError):
    """Raised when an OTP token is past its expiry time."""


class OtpMismatchError(OtpError):
    """Raised when a submitted OTP code does not match."""
