"""
Audit Providers
===============
Kafka and OpenSearch data providers for audit events.
"""

__version__ = "0.1.0"

# Events
from audit_providers.events import (
    AuditEvent,
    AuditEventEnvironment,
    AuditTarget,
    register_event_type,
)

# Core
from audit_providers.core import (
    AuditDataProvider,
    LazyHandle,
    Setting,
    run_cancellable,
)

# Configuration
from audit_providers.config import KafkaSettings, OpenSearchSettings

# Exceptions
from audit_providers.exceptions import (
    AuditProviderError,
    ConfigurationError,
    OperationCancelledError,
    UnsupportedOperationError,
    DeliveryTimeoutError,
    EventSerializationError,
)

# Kafka
from audit_providers.kafka import (
    KafkaDataProvider,
    KafkaProviderConfigurator,
    ProducerBuilder,
    JsonEventSerializer,
    DeliveryResult,
    TopicPartition,
)

# OpenSearch
from audit_providers.opensearch import (
    OpenSearchDataProvider,
    OpenSearchProviderConfigurator,
    OpenSearchAuditEventId,
)

__all__ = [
    # Events
    "AuditEvent",
    "AuditEventEnvironment",
    "AuditTarget",
    "register_event_type",
    # Core
    "AuditDataProvider",
    "LazyHandle",
    "Setting",
    "run_cancellable",
    # Configuration
    "KafkaSettings",
    "OpenSearchSettings",
    # Exceptions
    "AuditProviderError",
    "ConfigurationError",
    "OperationCancelledError",
    "UnsupportedOperationError",
    "DeliveryTimeoutError",
    "EventSerializationError",
    # Kafka
    "KafkaDataProvider",
    "KafkaProviderConfigurator",
    "ProducerBuilder",
    "JsonEventSerializer",
    "DeliveryResult",
    "TopicPartition",
    # OpenSearch
    "OpenSearchDataProvider",
    "OpenSearchProviderConfigurator",
    "OpenSearchAuditEventId",
]
