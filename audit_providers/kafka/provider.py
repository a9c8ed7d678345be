"""
Kafka Data Provider
===================
Publishes audit events as messages to a Kafka topic.

The broker is append-only: replacing an event produces another message,
and events cannot be read back through this provider.
"""

import asyncio
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional, Tuple, Type

import structlog
from confluent_kafka import KafkaException, SerializingProducer

from ..config import KafkaSettings
from ..core import AuditDataProvider, LazyHandle, Setting, run_cancellable
from ..events import AuditEvent
from ..exceptions import DeliveryTimeoutError, UnsupportedOperationError
from .builder import ProducerBuilder
from .configurator import KafkaProviderConfigurator
from .models import DEFAULT_TOPIC, DeliveryResult, Headers, KafkaMessage, TopicPartition
from .serializers import JsonEventSerializer

logger = structlog.get_logger(__name__)


class KafkaDataProvider(AuditDataProvider):
    """
    Apache Kafka data provider.

    Example:
        provider = KafkaDataProvider(
            {"bootstrap.servers": "localhost:9092"},
            topic="audit-topic",
            key_selector=lambda ev: ev.event_type,
        )
        key = provider.insert_event(event)
    """

    name = "kafka"

    def __init__(
        self,
        producer_config: Optional[Dict[str, Any]] = None,
        *,
        settings: Optional[KafkaSettings] = None,
        topic: Any = None,
        partition: Any = None,
        key_selector: Optional[Callable[[AuditEvent], Any]] = None,
        headers_selector: Optional[Callable[[AuditEvent], Optional[Headers]]] = None,
        key_serializer: Any = None,
        audit_event_serializer: Any = None,
        result_handler: Optional[Callable[[DeliveryResult], None]] = None,
        producer_builder_action: Optional[Callable[[ProducerBuilder], None]] = None,
    ):
        self.settings = settings or KafkaSettings()
        self.producer_config: Dict[str, Any] = dict(producer_config or {})
        self.topic = topic
        self.partition = partition
        self.key_selector = key_selector
        self.headers_selector = headers_selector
        self.key_serializer = key_serializer
        self.audit_event_serializer = audit_event_serializer
        self.result_handler = result_handler
        self.producer_builder_action = producer_builder_action
        self._producer: LazyHandle[SerializingProducer] = LazyHandle(
            self._build_producer, name="kafka-producer"
        )

    @classmethod
    def configure(
        cls, config: Callable[[KafkaProviderConfigurator], Any]
    ) -> "KafkaDataProvider":
        """Create a provider from the fluent configurator."""
        configurator = KafkaProviderConfigurator()
        config(configurator)
        return cls(**configurator.options())

    @property
    def topic(self) -> Setting[str]:
        """Topic selector. Default is "audit-topic"."""
        return self._topic

    @topic.setter
    def topic(self, value: Any) -> None:
        self._topic = Setting.of(value, default=DEFAULT_TOPIC)

    @property
    def partition(self) -> Setting[int]:
        """Partition selector. Unset or None means any partition."""
        return self._partition

    @partition.setter
    def partition(self, value: Any) -> None:
        self._partition = Setting.of(value)

    # Destination

    def get_topic_partition(self, audit_event: AuditEvent) -> TopicPartition:
        """Topic and partition for an event. Override to customize."""
        topic = self.topic.resolve(audit_event) or DEFAULT_TOPIC
        return TopicPartition(topic=topic, partition=self.partition.resolve(audit_event))

    def create_message(self, audit_event: AuditEvent) -> KafkaMessage:
        """Message for an event. Override to customize."""
        key = self.key_selector(audit_event) if self.key_selector is not None else None
        headers = self.headers_selector(audit_event) if self.headers_selector is not None else None
        return KafkaMessage(key=key, value=audit_event, headers=headers)

    # Producer

    def _build_producer(self) -> SerializingProducer:
        config = self.settings.to_producer_config()
        config.update(self.producer_config)
        builder = ProducerBuilder(config)
        if self.key_serializer is not None:
            builder.set_key_serializer(self.key_serializer)
        builder.set_value_serializer(self.audit_event_serializer or JsonEventSerializer())
        # Extra configuration from the caller runs last
        if self.producer_builder_action is not None:
            self.producer_builder_action(builder)
        return builder.build()

    def get_producer(self) -> SerializingProducer:
        """The shared producer, built on first use."""
        return self._producer.get()

    def _produce(
        self, audit_event: AuditEvent
    ) -> Tuple[SerializingProducer, TopicPartition, "Future[DeliveryResult]"]:
        producer = self._producer.get()
        message = self.create_message(audit_event)
        destination = self.get_topic_partition(audit_event)
        future: "Future[DeliveryResult]" = Future()

        def on_delivery(err, msg):
            if err is not None:
                future.set_exception(KafkaException(err))
                return
            future.set_result(DeliveryResult(
                topic=msg.topic(),
                partition=msg.partition(),
                offset=msg.offset(),
                key=message.key,
                value=message.value,
                headers=message.headers,
            ))

        producer.produce(
            destination.topic,
            key=message.key,
            value=message.value,
            partition=destination.partition_or_any(),
            on_delivery=on_delivery,
            headers=message.headers,
        )
        return producer, destination, future

    def _flush(self, producer: SerializingProducer) -> int:
        # The producer that took the message, even if the handle was reset since
        return producer.flush(self.settings.flush_timeout)

    def _complete(self, destination: TopicPartition, future: "Future[DeliveryResult]") -> Any:
        if not future.done():
            logger.warning(
                "kafka_delivery_timeout",
                topic=destination.topic,
                timeout=self.settings.flush_timeout,
            )
            raise DeliveryTimeoutError(destination.topic, self.settings.flush_timeout)

        try:
            result = future.result()
        except KafkaException as e:
            logger.warning("kafka_delivery_failed", topic=destination.topic, error=str(e))
            raise

        logger.debug(
            "kafka_event_delivered",
            topic=result.topic,
            partition=result.partition,
            offset=result.offset,
        )
        if self.result_handler is not None:
            self.result_handler(result)
        return result.key

    def _send(self, audit_event: AuditEvent) -> Any:
        producer, destination, future = self._produce(audit_event)
        self._flush(producer)
        return self._complete(destination, future)

    async def _send_async(self, audit_event: AuditEvent) -> Any:
        producer, destination, future = self._produce(audit_event)
        loop = asyncio.get_running_loop()
        # Delivery callbacks are served by flush, off the event loop
        await loop.run_in_executor(None, self._flush, producer)
        return self._complete(destination, future)

    # AuditDataProvider

    def insert_event(self, audit_event: AuditEvent) -> Any:
        """Produce the event and return the message key."""
        return self._send(audit_event)

    async def insert_event_async(
        self,
        audit_event: AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        return await run_cancellable(self._send_async(audit_event), cancel_event, provider=self.name)

    def replace_event(self, event_id: Any, audit_event: AuditEvent) -> None:
        """Produce another message for the event; ``event_id`` is not used."""
        self._send(audit_event)

    async def replace_event_async(
        self,
        event_id: Any,
        audit_event: AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        await run_cancellable(self._send_async(audit_event), cancel_event, provider=self.name)

    def get_event(self, event_id: Any, event_class: Type[AuditEvent] = AuditEvent) -> Optional[AuditEvent]:
        raise UnsupportedOperationError("get_event", provider=self.name)

    async def get_event_async(
        self,
        event_id: Any,
        event_class: Type[AuditEvent] = AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[AuditEvent]:
        raise UnsupportedOperationError("get_event_async", provider=self.name)

    def close(self, timeout: Optional[float] = None) -> None:
        """Flush pending messages and drop the producer."""
        producer = self._producer.reset()
        if producer is None:
            return
        remaining = producer.flush(self.settings.flush_timeout if timeout is None else timeout)
        logger.info("kafka_producer_closed", undelivered=remaining)
