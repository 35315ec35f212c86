"""
Dispatcher fault types.

Listener exceptions are never wrapped; these cover misuse of the
dispatcher itself.
"""

from typing import Any, Optional

from ..faults import Fault, FaultDomain


class EventError(Fault):
    """Base class for event dispatcher faults."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "EVENT_ERROR",
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.EVENTS,
            metadata=metadata,
        )


class AsyncListenerError(EventError):
    """A listener returned an awaitable during synchronous dispatch."""

    def __init__(self, event: str, listener: Any):
        super().__init__(
            f"Listener {listener!r} for [{event}] returned an awaitable; "
            f"use dispatch_async() / until_async() / flush_async()",
            code="ASYNC_LISTENER",
            metadata={"event": event},
        )


class InvalidListenerError(EventError):
    """A registered listener cannot be invoked."""

    def __init__(self, listener: Any, reason: str = "not callable and has no handle() method"):
        super().__init__(
            f"Invalid listener {listener!r}: {reason}",
            code="INVALID_LISTENER",
            metadata={"listener": repr(listener)},
        )
