"""
Deferred dispatch with fluent queue routing.
"""

from typing import Any, Callable, Dict, List, Union

from .contracts import DispatcherContract
from .event import Event


class PendingDispatch:
    """
    Configure an event's queue routing, then dispatch it.

    Example:
        PendingDispatch.for_event(events, OrderPlaced(order)) \\
            .on_queue("orders") \\
            .delay(300) \\
            .dispatch()
    """

    def __init__(self, dispatcher: DispatcherContract, event: Event):
        self.dispatcher = dispatcher
        self.event = event
        self.options: Dict[str, Any] = {}

    @classmethod
    def for_event(cls, dispatcher: DispatcherContract, event: Event) -> "PendingDispatch":
        return cls(dispatcher, event)

    def on_connection(self, connection: str) -> "PendingDispatch":
        self.options["connection"] = connection
        return self

    def on_queue(self, queue: str) -> "PendingDispatch":
        self.options["queue"] = queue
        return self

    def delay(self, delay: int) -> "PendingDispatch":
        self.options["delay"] = delay
        return self

    after_delay = delay

    def _apply_options(self) -> Event:
        for name in ("connection", "queue", "delay"):
            if self.options.get(name):
                setattr(self.event, name, self.options[name])
        return self.event

    def dispatch(self) -> List[Any]:
        return self.dispatcher.dispatch(self._apply_options())

    def until(self) -> Any:
        return self.dispatcher.until(self._apply_options())

    def dispatch_if(self, condition: Union[bool, Callable[[], bool]]) -> List[Any]:
        should = condition() if callable(condition) else condition
        return self.dispatch() if should else []

    def dispatch_unless(self, condition: Union[bool, Callable[[], bool]]) -> List[Any]:
        skip = condition() if callable(condition) else condition
        return [] if skip else self.dispatch()
