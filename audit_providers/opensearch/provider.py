"""
OpenSearch Data Provider
========================
Indexes audit events into OpenSearch and loads them back by identifier.
"""

import asyncio
import dataclasses
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

import structlog
from opensearchpy import AsyncOpenSearch, OpenSearch
from opensearchpy.exceptions import NotFoundError

from ..config import OpenSearchSettings
from ..core import AuditDataProvider, LazyHandle, Setting, run_cancellable
from ..events import AuditEvent, ensure_event_class
from ..exceptions import ConfigurationError
from .configurator import OpenSearchProviderConfigurator
from .models import DEFAULT_INDEX, OpenSearchAuditEventId

logger = structlog.get_logger(__name__)

E = TypeVar("E", bound=AuditEvent)


class OpenSearchDataProvider(AuditDataProvider):
    """
    OpenSearch data provider.

    ``client`` accepts a URL, a list of hosts, an ``OpenSearchSettings`` or a
    prebuilt client. Clients built by the provider are closed by ``close()``
    and ``aclose()``; prebuilt ones are left to their owner.

    Example:
        provider = OpenSearchDataProvider(
            "http://localhost:9200",
            index="auditevents",
            id_builder=lambda ev: str(uuid.uuid4()),
        )
        event_id = provider.insert_event(event)
        loaded = provider.get_event(event_id)
    """

    name = "opensearch"

    def __init__(
        self,
        client: Any = None,
        *,
        async_client: Any = None,
        settings: Optional[OpenSearchSettings] = None,
        index: Any = None,
        id_builder: Optional[Callable[[AuditEvent], Optional[str]]] = None,
        result_handler: Optional[Callable[[Dict[str, Any]], None]] = None,
        client_options_action: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.settings = settings or OpenSearchSettings()
        self._prebuilt_client: Any = None
        self._prebuilt_async_client: Any = async_client

        if isinstance(client, OpenSearchSettings):
            self.settings = client
        elif isinstance(client, str):
            self.settings = dataclasses.replace(self.settings, hosts=[client])
        elif isinstance(client, (list, tuple)):
            self.settings = dataclasses.replace(self.settings, hosts=list(client))
        elif client is not None:
            self._prebuilt_client = client

        self.index = index
        self.id_builder = id_builder
        self.result_handler = result_handler
        self.client_options_action = client_options_action
        self._client: LazyHandle[OpenSearch] = LazyHandle(
            self._build_client, name="opensearch-client"
        )
        self._async_client: LazyHandle[AsyncOpenSearch] = LazyHandle(
            self._build_async_client, name="opensearch-async-client"
        )

    @classmethod
    def configure(
        cls, config: Callable[[OpenSearchProviderConfigurator], Any]
    ) -> "OpenSearchDataProvider":
        """Create a provider from the fluent configurator."""
        configurator = OpenSearchProviderConfigurator()
        config(configurator)
        return cls(**configurator.options())

    @property
    def index(self) -> Setting[str]:
        """Index selector. Default is "auditevent"."""
        return self._index

    @index.setter
    def index(self, value: Any) -> None:
        self._index = Setting.of(value, default=DEFAULT_INDEX)

    # Clients

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs = self.settings.to_client_kwargs()
        if not kwargs["hosts"]:
            raise ConfigurationError("No OpenSearch hosts configured", provider=self.name)
        # Extra configuration from the caller runs last
        if self.client_options_action is not None:
            self.client_options_action(kwargs)
        return kwargs

    def _build_client(self) -> OpenSearch:
        if self._prebuilt_client is not None:
            return self._prebuilt_client
        kwargs = self._client_kwargs()
        logger.info("opensearch_client_built", hosts=len(kwargs["hosts"]))
        return OpenSearch(**kwargs)

    def _build_async_client(self) -> AsyncOpenSearch:
        if self._prebuilt_async_client is not None:
            return self._prebuilt_async_client
        kwargs = self._client_kwargs()
        logger.info("opensearch_async_client_built", hosts=len(kwargs["hosts"]))
        return AsyncOpenSearch(**kwargs)

    def get_client(self) -> OpenSearch:
        """The shared blocking client, built on first use."""
        return self._client.get()

    def get_async_client(self) -> AsyncOpenSearch:
        """The shared asyncio client, built on first use."""
        return self._async_client.get()

    # Destination

    def _event_id(self, event_id: Any) -> OpenSearchAuditEventId:
        if isinstance(event_id, OpenSearchAuditEventId):
            return event_id
        if isinstance(event_id, Mapping):
            doc_id = event_id.get("id")
            if doc_id is None or doc_id == "":
                raise TypeError("Event id mapping requires a non-empty 'id'")
            return OpenSearchAuditEventId(
                id=str(doc_id),
                index=event_id.get("index") or self.index.default_value or DEFAULT_INDEX,
            )
        if isinstance(event_id, str):
            return OpenSearchAuditEventId(
                id=event_id,
                index=self.index.default_value or DEFAULT_INDEX,
            )
        raise TypeError(f"Unsupported event id type: {type(event_id).__name__}")

    def _index_request(
        self,
        audit_event: AuditEvent,
        event_id: Optional[OpenSearchAuditEventId] = None,
    ) -> Dict[str, Any]:
        """Arguments for ``client.index``, shared by the blocking and async paths."""
        if event_id is None:
            index = self.index.resolve(audit_event) or DEFAULT_INDEX
            doc_id = self.id_builder(audit_event) if self.id_builder is not None else None
        else:
            index, doc_id = event_id.index, event_id.id

        request: Dict[str, Any] = {"index": index, "body": audit_event.to_dict()}
        if doc_id:
            request["id"] = str(doc_id)
        return request

    def _indexed(self, response: Dict[str, Any]) -> OpenSearchAuditEventId:
        event_id = OpenSearchAuditEventId(id=response["_id"], index=response["_index"])
        logger.debug(
            "opensearch_event_indexed",
            index=event_id.index,
            doc_id=event_id.id,
            result=response.get("result"),
        )
        if self.result_handler is not None:
            self.result_handler(response)
        return event_id

    def _loaded(
        self,
        response: Dict[str, Any],
        event_id: OpenSearchAuditEventId,
        event_class: Type[E],
    ) -> Optional[E]:
        if not response.get("found", True) or "_source" not in response:
            logger.debug("opensearch_event_not_found", index=event_id.index, doc_id=event_id.id)
            return None
        return event_class.from_dict(response["_source"])

    # Blocking operations

    def insert_event(self, audit_event: AuditEvent) -> OpenSearchAuditEventId:
        """Index a new document and return its address."""
        client = self.get_client()
        response = client.index(**self._index_request(audit_event))
        return self._indexed(response)

    def replace_event(self, event_id: Any, audit_event: AuditEvent) -> None:
        """Overwrite the document at ``event_id``."""
        client = self.get_client()
        response = client.index(**self._index_request(audit_event, self._event_id(event_id)))
        self._indexed(response)

    def get_event(self, event_id: Any, event_class: Type[E] = AuditEvent) -> Optional[E]:
        """Load an event, or None when no document exists at ``event_id``."""
        event_class = ensure_event_class(event_class)
        client = self.get_client()
        target = self._event_id(event_id)
        try:
            response = client.get(index=target.index, id=target.id)
        except NotFoundError:
            logger.debug("opensearch_event_not_found", index=target.index, doc_id=target.id)
            return None
        return self._loaded(response, target, event_class)

    # Async operations

    async def _insert_async(self, audit_event: AuditEvent) -> OpenSearchAuditEventId:
        client = self.get_async_client()
        response = await client.index(**self._index_request(audit_event))
        return self._indexed(response)

    async def _replace_async(self, event_id: OpenSearchAuditEventId, audit_event: AuditEvent) -> None:
        client = self.get_async_client()
        response = await client.index(**self._index_request(audit_event, event_id))
        self._indexed(response)

    async def _get_async(self, event_id: OpenSearchAuditEventId, event_class: Type[E]) -> Optional[E]:
        client = self.get_async_client()
        try:
            response = await client.get(index=event_id.index, id=event_id.id)
        except NotFoundError:
            logger.debug("opensearch_event_not_found", index=event_id.index, doc_id=event_id.id)
            return None
        return self._loaded(response, event_id, event_class)

    async def insert_event_async(
        self,
        audit_event: AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> OpenSearchAuditEventId:
        return await run_cancellable(self._insert_async(audit_event), cancel_event, provider=self.name)

    async def replace_event_async(
        self,
        event_id: Any,
        audit_event: AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        target = self._event_id(event_id)
        await run_cancellable(self._replace_async(target, audit_event), cancel_event, provider=self.name)

    async def get_event_async(
        self,
        event_id: Any,
        event_class: Type[E] = AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[E]:
        event_class = ensure_event_class(event_class)
        target = self._event_id(event_id)
        return await run_cancellable(self._get_async(target, event_class), cancel_event, provider=self.name)

    # Teardown

    def close(self) -> None:
        """Close the blocking client if the provider built it."""
        client = self._client.reset()
        if client is not None and client is not self._prebuilt_client:
            client.close()
            logger.info("opensearch_client_closed")

    async def aclose(self) -> None:
        """Close both clients if the provider built them."""
        client = self._async_client.reset()
        if client is not None and client is not self._prebuilt_async_client:
            await client.close()
            logger.info("opensearch_async_client_closed")
        self.close()
