"""
Provider Exceptions
===================
Exception classes raised by the audit data providers.

Errors reported by the underlying clients (``confluent_kafka.KafkaException``,
``opensearchpy.exceptions.TransportError``) and exceptions raised by
user-supplied selectors are propagated unmodified and are not wrapped here.
"""

from typing import Optional


class AuditProviderError(Exception):
    """Base exception for all audit data provider errors."""

    def __init__(self, message: str, provider: str = "unknown"):
        self.message = message
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class ConfigurationError(AuditProviderError):
    """Raised when a handle cannot be built from the accumulated settings."""
    pass


class OperationCancelledError(AuditProviderError):
    """Raised when the cancellation signal fires during an async call."""
    pass


class UnsupportedOperationError(AuditProviderError, NotImplementedError):
    """Raised for operations a provider structurally does not offer."""

    def __init__(self, operation: str, provider: str = "unknown"):
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not supported", provider=provider)


class DeliveryTimeoutError(AuditProviderError):
    """Raised when a produced message was not acknowledged before the flush timeout."""

    def __init__(self, topic: str, timeout: Optional[float], provider: str = "kafka"):
        self.topic = topic
        self.timeout = timeout
        super().__init__(
            f"Message to '{topic}' not delivered within {timeout}s",
            provider=provider,
        )


class EventSerializationError(AuditProviderError):
    """Raised when an audit event cannot be (de)serialized."""

    def __init__(self, message: str, provider: str = "events"):
        super().__init__(message, provider=provider)
