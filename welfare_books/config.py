"""Configuration management for welfare-books."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from welfare_books.exceptions import ConfigurationError
from welfare_books.models.financial.enums import LoanType


@dataclass
class LoanRateConfig:
    """Default annual interest rates (percent) per loan type."""

    member_loan_rate: Decimal = Decimal("9")
    special_loan_rate: Decimal = Decimal("12")
    business_loan_rate: Decimal = Decimal("12")

    def rate_for(self, loan_type: LoanType) -> Decimal:
        """Return the default rate for a loan type."""
        return {
            LoanType.MEMBER: self.member_loan_rate,
            LoanType.SPECIAL: self.special_loan_rate,
            LoanType.BUSINESS: self.business_loan_rate,
        }[loan_type]


@dataclass
class DividendConfig:
    """Dividend run configuration."""

    default_rate: Decimal = Decimal("8.5")
    overdue_interest_days: int = 90  # Unpaid interest older than 3 months is deducted
    rounding_places: int = 2


@dataclass
class OtpConfig:
    """One-time password configuration."""

    validity_minutes: int = 10
    code_length: int = 6
    language: str = "ENGLISH"


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class StreamConfig:
    """Event notification configuration."""

    topic_prefix: str = "welfare"
    source: str = "welfare-books"


@dataclass
class WelfareConfig:
    """Main configuration for welfare-books."""

    loan_rates: LoanRateConfig = field(default_factory=LoanRateConfig)
    dividend: DividendConfig = field(default_factory=DividendConfig)
    otp: OtpConfig = field(default_factory=OtpConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "WelfareConfig":
        """Create config from environment variables."""
        import os

        loan_rates = LoanRateConfig(
            member_loan_rate=_decimal_env("MEMBER_LOAN_RATE", "9"),
            special_loan_rate=_decimal_env("SPECIAL_LOAN_RATE", "12"),
            business_loan_rate=_decimal_env("BUSINESS_LOAN_RATE", "12"),
        )

        dividend = DividendConfig(
            default_rate=_decimal_env("DEFAULT_DIVIDEND_RATE", "8.5"),
            overdue_interest_days=_int_env("OVERDUE_INTEREST_DAYS", "90"),
        )

        otp = OtpConfig(
            validity_minutes=_int_env("OTP_VALIDITY_MINUTES", "10"),
            language=os.getenv("OTP_LANGUAGE", "ENGLISH").upper(),
        )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        stream = StreamConfig(
            topic_prefix=os.getenv("TOPIC_PREFIX", "welfare"),
        )

        seed = os.getenv("SEED")

        return cls(
            loan_rates=loan_rates,
            dividend=dividend,
            otp=otp,
            kafka=kafka,
            stream=stream,
            seed=_int_env("SEED", seed) if seed else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


def _decimal_env(name: str, default: str) -> Decimal:
    import os

    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _int_env(name: str, default: str) -> int:
    import os

    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
