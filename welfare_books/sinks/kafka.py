"""Kafka sink for publishing bookkeeping notification events."""

import json
import logging
from dataclasses import dataclass, is_dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from welfare_books.config import KafkaConfig
from welfare_books.exceptions import SinkError
from welfare_books.models.base import Event
from welfare_books.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Publish events and records to Kafka topics as JSON.

    Events go to ``<topic_prefix>.<entity>`` where ``entity`` is the part
    of the event type before the dot (``loan.payment_applied`` ->
    ``welfare.loan``), keyed by the event subject so every event for one
    loan or dividend lands on the same partition.
    """

    # Topic to key field mapping for plain records
    KEY_FIELDS = {
        "loans": "loan_id",
        "loan_payments": "loan_id",
        "dividend_payments": "member_id",
        "cash_entries": "entry_id",
    }

    def __init__(self, config: KafkaConfig | str, topic_prefix: str = "welfare") -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        topic_prefix : str
            Prefix for event topics.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.topic_prefix = topic_prefix
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_key(self, topic: str, record: Any) -> str | None:
        """Extract message key from record based on topic."""
        key_field = self.KEY_FIELDS.get(topic.split(".")[-1])
        if not key_field:
            return None

        if is_dataclass(record):
            return getattr(record, key_field, None)
        elif isinstance(record, dict):
            return record.get(key_field)
        return None

    def topic_for(self, event: Event) -> str:
        entity = event.event_type.split(".", 1)[0]
        return f"{self.topic_prefix}.{entity}"

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record to Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None:
            key = self._get_key(topic, record)

        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as exc:
            raise SinkError(f"Failed to produce to {topic}: {exc}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def publish(self, event: Event) -> None:
        """Publish a notification event."""
        self.send(self.topic_for(event), event, key=event.subject)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to a Kafka topic."""
        logger.info("Writing batch to %s: %d records", topic, len(records))

        for record in records:
            self.send(topic, record)

        self.flush()
        logger.info("Batch complete: sent=%d, delivered=%d, failed=%d",
                    self.stats.sent, self.stats.delivered, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
