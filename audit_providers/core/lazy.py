"""
Lazy Handle
===========
Thread-safe, build-once cell for expensive client handles.
"""

import threading
from typing import Callable, Generic, Optional, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LazyHandle(Generic[T]):
    """
    Single-assignment cell built on first use.

    The factory runs at most once per successful build, no matter how many
    threads call ``get()`` concurrently. A failing factory leaves the cell
    empty so the next call retries the full build.

    Example:
        producer = LazyHandle(build_producer, name="kafka-producer")
        producer.get().produce(...)
    """

    def __init__(self, factory: Callable[[], T], name: str = "handle"):
        self.name = name
        self._factory = factory
        self._value: Optional[T] = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._value is not None

    def peek(self) -> Optional[T]:
        """Current value without triggering a build."""
        return self._value

    def get(self) -> T:
        """Return the handle, building it under the lock if needed."""
        value = self._value
        if value is None:
            with self._lock:
                value = self._value
                if value is None:
                    try:
                        value = self._factory()
                    except Exception as e:
                        logger.warning("handle_build_failed", handle=self.name, error=str(e))
                        raise
                    self._value = value
                    logger.info("handle_built", handle=self.name)
        return value

    def reset(self) -> Optional[T]:
        """Detach and return the current value so the caller can close it."""
        with self._lock:
            value, self._value = self._value, None
        return value
