"""
Event Serialization
===================
Tagged JSON form of audit events.

Every document carries a ``$type`` discriminator next to the event fields.
Custom fields are flattened at the document root, and any key that is not a
field of the class being built goes back into ``custom_fields`` on read, so
subtype data survives a round-trip even when read as a base type.
"""

import dataclasses
import json
from functools import lru_cache
from typing import Any, Dict, FrozenSet, Mapping, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from ..exceptions import EventSerializationError

logger = structlog.get_logger(__name__)

TYPE_KEY = "$type"
CUSTOM_FIELDS = "custom_fields"

_registry: Dict[str, type] = {}


def register_event_type(cls: type, type_name: Optional[str] = None) -> str:
    """Register an event class under its discriminator name."""
    name = type_name or f"{cls.__module__}.{cls.__qualname__}"
    previous = _registry.get(name)
    if previous is not None and previous is not cls:
        logger.debug("event_type_replaced", type_name=name)
    _registry[name] = cls
    cls._type_name = name
    return name


def get_event_type(type_name: str) -> Optional[type]:
    return _registry.get(type_name)


def type_name_of(cls: type) -> str:
    return cls.__dict__.get("_type_name") or register_event_type(cls)


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


def reserved_keys(cls: type) -> FrozenSet[str]:
    """Document keys a custom field may not use."""
    return frozenset(f.name for f in dataclasses.fields(cls)) | {TYPE_KEY}


def check_custom_field(cls: type, name: str) -> None:
    if name in reserved_keys(cls):
        raise EventSerializationError(
            f"Custom field '{name}' collides with a field of {cls.__name__}"
        )


def event_to_dict(event: Any) -> Dict[str, Any]:
    """Serialize an event dataclass to its tagged document form."""
    cls = type(event)
    data = _adapter(cls).dump_python(event, mode="json")
    custom_fields = data.pop(CUSTOM_FIELDS, None) or {}

    document: Dict[str, Any] = {TYPE_KEY: type_name_of(cls)}
    document.update(data)
    for key, value in custom_fields.items():
        check_custom_field(cls, key)
        document[key] = value
    return document


def event_from_dict(data: Any, expected: type) -> Any:
    """
    Build an event from its tagged document form.

    The ``$type`` discriminator selects the class when it names a registered
    subclass of ``expected``; otherwise ``expected`` is built.
    """
    if not isinstance(data, Mapping):
        raise EventSerializationError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    document = dict(data)
    type_name = document.pop(TYPE_KEY, None)
    cls = get_event_type(type_name) if isinstance(type_name, str) else None
    if cls is None or not issubclass(cls, expected):
        cls = expected

    names = {f.name for f in dataclasses.fields(cls) if f.init} - {CUSTOM_FIELDS}
    fields: Dict[str, Any] = {}
    custom_fields: Dict[str, Any] = {}
    for key, value in document.items():
        if key in names:
            fields[key] = value
        else:
            custom_fields[key] = value
    fields[CUSTOM_FIELDS] = custom_fields

    try:
        return _adapter(cls).validate_python(fields)
    except ValidationError as e:
        raise EventSerializationError(f"Cannot build {cls.__name__}: {e}") from e


def event_to_json(event: Any) -> str:
    return json.dumps(event_to_dict(event))


def event_from_json(text: Any, expected: type) -> Any:
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8")
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise EventSerializationError(f"Invalid JSON document: {e}") from e
    return event_from_dict(data, expected)
