"""
Dispatcher contracts consumed by the ORM, cache and queue layers.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class DispatcherContract(Protocol):
    """
    Event dispatcher protocol.

    Implemented by Dispatcher and NullDispatcher.
    """

    def listen(self, events: Any, listener: Any) -> None:
        """Register a listener for one or more event names or patterns."""
        ...

    def has_listeners(self, event_name: str) -> bool:
        ...

    def subscribe(self, subscriber: Any) -> None:
        ...

    def dispatch(self, event: Any, payload: Optional[Sequence[Any]] = None, halt: bool = False) -> Any:
        """
        Dispatch an event.

        Returns the list of non-None responses, or with ``halt=True`` the
        first non-None response.
        """
        ...

    def until(self, event: Any, payload: Optional[Sequence[Any]] = None) -> Any:
        ...

    def push(self, event: str, payload: Optional[Sequence[Any]] = None) -> None:
        ...

    def flush(self, event: str) -> None:
        ...

    def forget(self, event: str) -> None:
        ...

    def forget_pushed(self) -> None:
        ...

    def get_raw_listeners(self) -> Dict[str, List[Any]]:
        ...


@runtime_checkable
class EventSubscriber(Protocol):
    """
    Registers several listeners at once.

    ``subscribe`` either calls ``dispatcher.listen`` itself and returns None,
    or returns a mapping of event → handler(s).
    """

    def subscribe(self, dispatcher: Any) -> Optional[Dict[Any, Any]]:
        ...
