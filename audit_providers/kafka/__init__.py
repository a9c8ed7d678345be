"""
Kafka Provider
==============
Audit data provider backed by a Kafka topic.
"""

from .models import (
    DEFAULT_TOPIC,
    PARTITION_ANY,
    TopicPartition,
    KafkaMessage,
    DeliveryResult,
)
from .serializers import JsonEventSerializer
from .builder import ProducerBuilder
from .configurator import KafkaProviderConfigurator
from .provider import KafkaDataProvider

__all__ = [
    # Models
    "DEFAULT_TOPIC",
    "PARTITION_ANY",
    "TopicPartition",
    "KafkaMessage",
    "DeliveryResult",
    # Serialization
    "JsonEventSerializer",
    # Producer
    "ProducerBuilder",
    # Provider
    "KafkaProviderConfigurator",
    "KafkaDataProvider",
]
