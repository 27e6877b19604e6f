"""Output sinks for notification events."""

from welfare_books.sinks.console import ConsoleSink
from welfare_books.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "KafkaSink"]
