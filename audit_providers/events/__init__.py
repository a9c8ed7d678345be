"""
Audit Events
============
Polymorphic audit event model and its tagged JSON form.
"""

from .models import AuditEvent, AuditEventEnvironment, AuditTarget, ensure_event_class
from .serialization import (
    TYPE_KEY,
    register_event_type,
    get_event_type,
    reserved_keys,
)

__all__ = [
    # Models
    "AuditEvent",
    "AuditEventEnvironment",
    "AuditTarget",
    "ensure_event_class",
    # Serialization
    "TYPE_KEY",
    "register_event_type",
    "get_event_type",
    "reserved_keys",
]
