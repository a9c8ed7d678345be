"""
Audit Data Provider
===================
Abstract interface shared by every audit data provider.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional, Type, TypeVar

from ..events import AuditEvent

E = TypeVar("E", bound=AuditEvent)


class AuditDataProvider(ABC):
    """
    Storage backend for audit events.

    Every mutating operation comes in a blocking and an async flavour. The
    async flavours accept an optional ``asyncio.Event`` used as a
    cancellation signal.
    """

    name = "provider"

    @abstractmethod
    def insert_event(self, audit_event: AuditEvent) -> Any:
        """Store a new event and return its identifier."""

    @abstractmethod
    async def insert_event_async(
        self,
        audit_event: AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        """Async twin of ``insert_event``."""

    @abstractmethod
    def replace_event(self, event_id: Any, audit_event: AuditEvent) -> None:
        """Overwrite the event stored under ``event_id``."""

    @abstractmethod
    async def replace_event_async(
        self,
        event_id: Any,
        audit_event: AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Async twin of ``replace_event``."""

    @abstractmethod
    def get_event(self, event_id: Any, event_class: Type[E] = AuditEvent) -> Optional[E]:
        """Load a stored event, or None when it does not exist."""

    @abstractmethod
    async def get_event_async(
        self,
        event_id: Any,
        event_class: Type[E] = AuditEvent,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[E]:
        """Async twin of ``get_event``."""

    def close(self) -> None:
        """Release the provider's handle."""

    async def aclose(self) -> None:
        """Release the provider's async handle."""
        self.close()
