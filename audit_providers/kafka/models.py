"""
Kafka Models
============
Destination and delivery types for the Kafka provider.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

DEFAULT_TOPIC = "audit-topic"

# librdkafka's "unassigned" partition: the partitioner chooses
PARTITION_ANY = -1

Headers = Union[Dict[str, Any], List[Tuple[str, Any]]]


@dataclass(frozen=True)
class TopicPartition:
    """Where a message goes. ``partition=None`` means any partition."""
    topic: str
    partition: Optional[int] = None

    @property
    def is_any_partition(self) -> bool:
        return self.partition is None

    def partition_or_any(self) -> int:
        return PARTITION_ANY if self.partition is None else self.partition


@dataclass
class KafkaMessage:
    """Message built from an audit event before it is produced."""
    key: Any
    value: Any
    headers: Optional[Headers] = None


@dataclass
class DeliveryResult:
    """Broker acknowledgement for one produced message."""
    topic: str
    partition: int
    offset: int
    key: Any
    value: Any
    headers: Optional[Headers] = None
