"""
OpenSearch Provider Configurator
================================
Fluent configuration for ``OpenSearchDataProvider``.
"""

from typing import Any, Callable, Dict, Optional


class OpenSearchProviderConfigurator:
    """
    Example:
        provider = OpenSearchDataProvider.configure(lambda c: c
            .client("http://localhost:9200")
            .index("auditevents")
            .id(lambda ev: str(uuid.uuid4())))
    """

    def __init__(self):
        self._options: Dict[str, Any] = {}

    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    def _set(self, name: str, value: Any) -> "OpenSearchProviderConfigurator":
        self._options[name] = value
        return self

    def client(self, client: Any) -> "OpenSearchProviderConfigurator":
        """URL, list of hosts, ``OpenSearchSettings`` or a prebuilt ``OpenSearch``."""
        return self._set("client", client)

    def async_client(self, client: Any) -> "OpenSearchProviderConfigurator":
        """Prebuilt ``AsyncOpenSearch`` used by the async operations."""
        return self._set("async_client", client)

    def index(self, index: Any) -> "OpenSearchProviderConfigurator":
        """Constant index name or a function of the event."""
        return self._set("index", index)

    def id(self, id_builder: Callable) -> "OpenSearchProviderConfigurator":
        """Document id builder. Returning None lets OpenSearch assign the id."""
        return self._set("id_builder", id_builder)

    def result_handler(self, handler: Optional[Callable]) -> "OpenSearchProviderConfigurator":
        return self._set("result_handler", handler)

    def client_options_action(self, action: Callable) -> "OpenSearchProviderConfigurator":
        return self._set("client_options_action", action)
