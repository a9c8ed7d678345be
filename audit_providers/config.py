"""
Provider Configuration
======================
Connection settings for the Kafka and OpenSearch providers.

Defaults are read from the environment when the settings object is created.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


@dataclass
class KafkaSettings:
    """Connection settings for the Kafka producer."""
    bootstrap_servers: str = field(
        default_factory=lambda: os.environ.get("AUDIT_KAFKA_BOOTSTRAP_SERVERS", "")
    )
    client_id: str = field(
        default_factory=lambda: os.environ.get("AUDIT_KAFKA_CLIENT_ID", "audit-providers")
    )
    flush_timeout: float = field(
        default_factory=lambda: _env_float("AUDIT_KAFKA_FLUSH_TIMEOUT", 30.0)
    )

    def to_producer_config(self) -> Dict[str, Any]:
        """Raw librdkafka settings derived from these fields."""
        config: Dict[str, Any] = {}
        if self.bootstrap_servers:
            config["bootstrap.servers"] = self.bootstrap_servers
        if self.client_id:
            config["client.id"] = self.client_id
        return config


@dataclass
class OpenSearchSettings:
    """Connection settings for the OpenSearch clients."""
    hosts: List[str] = field(
        default_factory=lambda: [
            h.strip()
            for h in os.environ.get("AUDIT_OPENSEARCH_URL", "").split(",")
            if h.strip()
        ]
    )
    username: Optional[str] = field(
        default_factory=lambda: os.environ.get("AUDIT_OPENSEARCH_USERNAME") or None
    )
    password: Optional[str] = field(
        default_factory=lambda: os.environ.get("AUDIT_OPENSEARCH_PASSWORD") or None
    )
    verify_certs: bool = field(
        default_factory=lambda: _env_bool("AUDIT_OPENSEARCH_VERIFY_CERTS", True)
    )
    timeout: float = field(
        default_factory=lambda: _env_float("AUDIT_OPENSEARCH_TIMEOUT", 10.0)
    )

    def to_client_kwargs(self) -> Dict[str, Any]:
        """Constructor kwargs shared by ``OpenSearch`` and ``AsyncOpenSearch``."""
        kwargs: Dict[str, Any] = {
            "hosts": list(self.hosts),
            "verify_certs": self.verify_certs,
            "timeout": self.timeout,
        }
        if self.username:
            kwargs["http_auth"] = (self.username, self.password or "")
        return kwargs
