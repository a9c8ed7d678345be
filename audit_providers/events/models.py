"""
Audit Event Models
==================
Data models for audit events handled by the providers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from ..exceptions import EventSerializationError
from . import serialization

E = TypeVar("E", bound="AuditEvent")


@dataclass
class AuditEventEnvironment:
    """Where the audited operation ran."""
    user_name: Optional[str] = None
    machine_name: Optional[str] = None
    domain_name: Optional[str] = None
    calling_method_name: Optional[str] = None
    exception: Optional[str] = None
    culture: Optional[str] = None


@dataclass
class AuditTarget:
    """The audited object before and after the operation."""
    type: Optional[str] = None
    old: Any = None
    new: Any = None


@dataclass
class AuditEvent:
    """
    One audited operation.

    Subclass it (as a dataclass) to add typed fields. Subclasses register
    under ``module.QualName`` unless a ``type_name`` class keyword is given:

        @dataclass
        class OrderAuditEvent(AuditEvent, type_name="order"):
            order_id: Optional[int] = None
    """
    event_type: str = ""
    environment: Optional[AuditEventEnvironment] = None
    target: Optional[AuditTarget] = None
    comments: List[str] = field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[int] = None  # milliseconds
    custom_fields: Dict[str, Any] = field(default_factory=dict)

    def __init_subclass__(cls, type_name: Optional[str] = None, **kwargs):
        super().__init_subclass__(**kwargs)
        serialization.register_event_type(cls, type_name)

    def set_custom_field(self, name: str, value: Any) -> None:
        """Set a custom field. Names of event fields and ``$type`` are rejected."""
        serialization.check_custom_field(type(self), name)
        self.custom_fields[name] = value

    def to_dict(self) -> Dict[str, Any]:
        """Tagged document form, ready for JSON encoding."""
        return serialization.event_to_dict(self)

    def to_json(self) -> str:
        return serialization.event_to_json(self)

    @classmethod
    def from_dict(cls: Type[E], data: Any) -> E:
        return serialization.event_from_dict(data, cls)

    @classmethod
    def from_json(cls: Type[E], text: Any) -> E:
        return serialization.event_from_json(text, cls)


serialization.register_event_type(AuditEvent, "AuditEvent")


def ensure_event_class(event_class: Any) -> type:
    """Validate a requested event class."""
    if not (isinstance(event_class, type) and issubclass(event_class, AuditEvent)):
        raise EventSerializationError(f"{event_class!r} is not an AuditEvent type")
    return event_class
