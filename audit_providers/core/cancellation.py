"""
Cancellation
============
Cooperative cancellation of in-flight provider calls.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..exceptions import OperationCancelledError

T = TypeVar("T")


async def run_cancellable(
    awaitable: Awaitable[T],
    cancel_event: Optional[asyncio.Event] = None,
    provider: str = "unknown",
) -> T:
    """
    Await an operation, giving up when ``cancel_event`` fires first.

    Cancellation only stops the local wait. A write already handed to the
    client may still land at the remote end.

    Raises:
        OperationCancelledError: If the event fired before the operation finished
    """
    if cancel_event is None:
        return await awaitable

    if cancel_event.is_set():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise OperationCancelledError("Cancelled before start", provider=provider)

    operation = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait(
            {operation, waiter},
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        operation.cancel()
        raise
    finally:
        waiter.cancel()

    if operation in done:
        return operation.result()

    operation.cancel()
    raise OperationCancelledError("Cancelled while in flight", provider=provider)
