"""
Kafka Provider Configurator
===========================
Fluent configuration for ``KafkaDataProvider``.
"""

from typing import Any, Callable, Dict, Optional

from ..config import KafkaSettings


class KafkaProviderConfigurator:
    """
    Example:
        provider = KafkaDataProvider.configure(lambda c: c
            .producer_config({"bootstrap.servers": "localhost:9092"})
            .topic(lambda ev: f"audit-{ev.event_type}")
            .key_selector(lambda ev: ev.event_type))
    """

    def __init__(self):
        self._options: Dict[str, Any] = {}

    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    def _set(self, name: str, value: Any) -> "KafkaProviderConfigurator":
        self._options[name] = value
        return self

    def producer_config(self, config: Dict[str, Any]) -> "KafkaProviderConfigurator":
        return self._set("producer_config", config)

    def settings(self, settings: KafkaSettings) -> "KafkaProviderConfigurator":
        return self._set("settings", settings)

    def topic(self, topic: Any) -> "KafkaProviderConfigurator":
        """Constant topic name or a function of the event."""
        return self._set("topic", topic)

    def partition(self, partition: Any) -> "KafkaProviderConfigurator":
        """Constant partition or a function of the event; None means any."""
        return self._set("partition", partition)

    def key_selector(self, selector: Callable) -> "KafkaProviderConfigurator":
        return self._set("key_selector", selector)

    def headers_selector(self, selector: Callable) -> "KafkaProviderConfigurator":
        return self._set("headers_selector", selector)

    def key_serializer(self, serializer: Any) -> "KafkaProviderConfigurator":
        return self._set("key_serializer", serializer)

    def audit_event_serializer(self, serializer: Any) -> "KafkaProviderConfigurator":
        return self._set("audit_event_serializer", serializer)

    def result_handler(self, handler: Optional[Callable]) -> "KafkaProviderConfigurator":
        return self._set("result_handler", handler)

    def producer_builder_action(self, action: Callable) -> "KafkaProviderConfigurator":
        return self._set("producer_builder_action", action)
