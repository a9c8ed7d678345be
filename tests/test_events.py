"""
Unit Tests for Audit Events
===========================
Tagged serialization and polymorphic round-trips.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional, Set
from uuid import UUID

import pytest

from audit_providers.events import (
    TYPE_KEY,
    AuditEvent,
    AuditEventEnvironment,
    AuditTarget,
    get_event_type,
)
from audit_providers.exceptions import EventSerializationError


@dataclass
class OrderAuditEvent(AuditEvent, type_name="order"):
    order_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class RefundAuditEvent(OrderAuditEvent):
    amount: float = 0.0


class Channel(str, Enum):
    SMS = "sms"
    EMAIL = "email"


@dataclass
class DeliveryAuditEvent(AuditEvent, type_name="delivery"):
    channel: Optional[Channel] = None
    message_id: Optional[UUID] = None
    send_day: Optional[date] = None
    recipients: Set[str] = field(default_factory=set)


class TestSerialization:
    """Tests for the document form of events."""

    def test_base_event_document(self):
        """Should tag the document and flatten custom fields."""
        event = AuditEvent(
            event_type="login",
            environment=AuditEventEnvironment(user_name="alice"),
            target=AuditTarget(type="str", old="init"),
            start_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        event.set_custom_field("MyCustomField", "value")

        doc = event.to_dict()

        assert doc[TYPE_KEY] == "AuditEvent"
        assert doc["event_type"] == "login"
        assert doc["environment"]["user_name"] == "alice"
        assert doc["target"] == {"type": "str", "old": "init", "new": None}
        assert doc["start_date"] == "2024-05-01T12:00:00Z"
        assert doc["MyCustomField"] == "value"
        assert "custom_fields" not in doc

    def test_custom_field_colliding_with_field_is_rejected(self):
        """A custom field named like a real field should fail to serialize."""
        event = AuditEvent(event_type="real", custom_fields={"event_type": "fake"})
        with pytest.raises(EventSerializationError):
            event.to_dict()

    def test_set_custom_field_rejects_reserved_names(self):
        """Should refuse names of event fields, subclass fields and the tag."""
        event = OrderAuditEvent()
        for name in ("duration", "custom_fields", "order_id", TYPE_KEY):
            with pytest.raises(EventSerializationError):
                event.set_custom_field(name, 5)
        assert event.custom_fields == {}

    def test_subclass_field_name_is_free_on_base_event(self):
        """A base event may use a name that only a subclass declares."""
        event = AuditEvent()
        event.set_custom_field("order_id", 5)
        assert event.to_dict()["order_id"] == 5

    def test_to_json_is_valid_json(self):
        """Should produce parseable JSON."""
        event = OrderAuditEvent(event_type="order", order_id=7)
        assert json.loads(event.to_json())["order_id"] == 7

    def test_subclass_registration(self):
        """Subclasses register under their type name."""
        assert get_event_type("order") is OrderAuditEvent
        assert get_event_type(f"{__name__}.RefundAuditEvent") is RefundAuditEvent


class TestDeserialization:
    """Tests for reading events back."""

    def test_round_trip_base(self):
        """Should restore fields, datetimes, nested objects and custom fields."""
        event = AuditEvent(
            event_type="login",
            environment=AuditEventEnvironment(machine_name="host-1"),
            target=AuditTarget(old="init", new="init-end"),
            comments=["first"],
            start_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            duration=15,
            custom_fields={"MyCustomField": "value"},
        )

        loaded = AuditEvent.from_json(event.to_json())

        assert loaded == event
        assert isinstance(loaded.target, AuditTarget)
        assert isinstance(loaded.start_date, datetime)

    def test_polymorphic_from_base(self):
        """Reading as the base type should still build the stored subtype."""
        event = RefundAuditEvent(
            event_type="refund",
            order_id=3,
            amount=9.5,
            approved_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )
        event.set_custom_field("CustomField", "value")

        loaded = AuditEvent.from_dict(event.to_dict())

        assert type(loaded) is RefundAuditEvent
        assert loaded.amount == 9.5
        assert loaded.approved_at == event.approved_at
        assert loaded.custom_fields == {"CustomField": "value"}

    def test_unrelated_requested_type_keeps_data(self):
        """Fields unknown to the requested class land in custom fields."""
        event = OrderAuditEvent(event_type="order", order_id=11)

        loaded = AuditEvent.from_dict(dict(event.to_dict(), **{TYPE_KEY: "missing.Type"}))

        assert type(loaded) is AuditEvent
        assert loaded.custom_fields["order_id"] == 11

    def test_zulu_timestamps(self):
        """Should accept a trailing Z in timestamps."""
        loaded = AuditEvent.from_dict({"start_date": "2024-05-01T12:00:00Z"})
        assert loaded.start_date == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_invalid_document(self):
        """Should reject non-object documents."""
        with pytest.raises(EventSerializationError):
            AuditEvent.from_dict(["not", "an", "object"])
        with pytest.raises(EventSerializationError):
            AuditEvent.from_json("{not json")

    def test_round_trip_rich_field_types(self):
        """Should restore enum, UUID, date and set fields to their declared types."""
        event = DeliveryAuditEvent(
            event_type="delivery",
            channel=Channel.EMAIL,
            message_id=UUID(int=1),
            send_day=date(2024, 1, 2),
            recipients={"a@example.com", "b@example.com"},
        )

        doc = json.loads(event.to_json())
        loaded = AuditEvent.from_dict(doc)

        assert doc["channel"] == "email"
        assert doc["message_id"] == "00000000-0000-0000-0000-000000000001"
        assert doc["send_day"] == "2024-01-02"
        assert type(loaded) is DeliveryAuditEvent
        assert loaded.channel is Channel.EMAIL
        assert loaded.message_id == UUID(int=1)
        assert loaded.send_day == date(2024, 1, 2)
        assert loaded.recipients == {"a@example.com", "b@example.com"}
        assert loaded == event

    def test_invalid_field_value(self):
        """Should wrap validation failures in EventSerializationError."""
        with pytest.raises(EventSerializationError):
            DeliveryAuditEvent.from_dict({"channel": "pigeon"})
        with pytest.raises(EventSerializationError):
            AuditEvent.from_dict({"duration": "soon"})
