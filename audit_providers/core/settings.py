"""
Event Settings
==============
Values that are either constant or computed from the audit event.
"""

from typing import Any, Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class Setting(Generic[T]):
    """
    A constant or a function of the audit event, with a fallback default.

    Example:
        topic = Setting(lambda ev: f"audit-{ev.event_type}", default="audit-topic")
        topic.resolve(event)
    """

    def __init__(
        self,
        value: Union[T, Callable[[Any], Optional[T]], None] = None,
        default: Optional[T] = None,
    ):
        self._value = value
        self.default = default

    @classmethod
    def of(cls, value: Any, default: Optional[T] = None) -> "Setting[T]":
        """Coerce a constant, a callable or an existing Setting."""
        if isinstance(value, Setting):
            if default is not None and value.default is None:
                return cls(value._value, default=default)
            return value
        return cls(value, default=default)

    @property
    def is_set(self) -> bool:
        return self._value is not None

    @property
    def is_dynamic(self) -> bool:
        return callable(self._value)

    @property
    def default_value(self) -> Optional[T]:
        """The constant value, or the default when the setting is a function."""
        if self._value is None or self.is_dynamic:
            return self.default
        return self._value

    def resolve(self, event: Any) -> Optional[T]:
        """Resolve the value for an event; user exceptions propagate as-is."""
        value = self._value(event) if self.is_dynamic else self._value
        return self.default if value is None else value

    def __repr__(self) -> str:
        return f"Setting(value={self._value!r}, default={self.default!r})"
