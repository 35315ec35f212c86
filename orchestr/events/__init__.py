"""
Orchestr Events

Listener registration, wildcard matching, halting and deferred dispatch.

Key Features:
- String and class-keyed events, ``*`` wildcard patterns
- Plain callables, handler objects/classes and container string references
- Halting dispatch (``until``) and push/flush queues
- Async twins (dispatch_async, until_async, flush_async)
- Event base class with JSON serialization and broadcast hooks
"""

from .contracts import DispatcherContract, EventSubscriber
from .dispatcher import Dispatcher, event_name
from .errors import AsyncListenerError, EventError, InvalidListenerError
from .event import Event
from .null import NullDispatcher
from .pending import PendingDispatch
from .registry import ListenerRegistry, compile_pattern, is_wildcard

__all__ = [
    "AsyncListenerError",
    "Dispatcher",
    "DispatcherContract",
    "Event",
    "EventError",
    "EventSubscriber",
    "InvalidListenerError",
    "ListenerRegistry",
    "NullDispatcher",
    "PendingDispatch",
    "compile_pattern",
    "event_name",
    "is_wildcard",
]
