"""
Producer Builder
================
Accumulates producer configuration and serializers before the producer
is built.
"""

from typing import Any, Dict, Optional

import structlog
from confluent_kafka import SerializingProducer
from confluent_kafka.serialization import Serializer

from ..exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


class ProducerBuilder:
    """
    Mutable producer recipe handed to ``producer_builder_action``.

    Example:
        def tune(builder):
            builder.set_config("linger.ms", 5).set_config("acks", "all")
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config: Dict[str, Any] = dict(config or {})
        self.key_serializer: Optional[Serializer] = None
        self.value_serializer: Optional[Serializer] = None

    def set_config(self, key: str, value: Any) -> "ProducerBuilder":
        self.config[key] = value
        return self

    def set_key_serializer(self, serializer: Serializer) -> "ProducerBuilder":
        self.key_serializer = serializer
        return self

    def set_value_serializer(self, serializer: Serializer) -> "ProducerBuilder":
        self.value_serializer = serializer
        return self

    def build(self) -> SerializingProducer:
        """Construct the producer from the accumulated settings."""
        if not self.config.get("bootstrap.servers"):
            raise ConfigurationError("bootstrap.servers is not configured", provider="kafka")

        conf = dict(self.config)
        if self.key_serializer is not None:
            conf["key.serializer"] = self.key_serializer
        if self.value_serializer is not None:
            conf["value.serializer"] = self.value_serializer

        producer = SerializingProducer(conf)
        logger.info(
            "kafka_producer_built",
            bootstrap_servers=self.config["bootstrap.servers"],
            keyed=self.key_serializer is not None,
        )
        return producer
