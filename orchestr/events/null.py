"""
No-op dispatcher for tests and for applications that disable events.
"""

from typing import Any, Dict, List, Optional, Sequence


class NullDispatcher:
    """
    Dispatcher that accepts every call and does nothing.

    Example:
        app.instance("events", NullDispatcher())
    """

    def listen(self, events: Any, listener: Any) -> None:
        pass

    def has_listeners(self, event: Any) -> bool:
        return False

    def subscribe(self, subscriber: Any) -> None:
        pass

    def dispatch(self, event: Any, payload: Optional[Sequence[Any]] = None, halt: bool = False) -> Any:
        return None if halt else []

    def until(self, event: Any, payload: Optional[Sequence[Any]] = None) -> Any:
        return None

    async def dispatch_async(self, event: Any, payload: Optional[Sequence[Any]] = None, halt: bool = False) -> Any:
        return None if halt else []

    async def until_async(self, event: Any, payload: Optional[Sequence[Any]] = None) -> Any:
        return None

    def push(self, event: str, payload: Optional[Sequence[Any]] = None) -> None:
        pass

    def flush(self, event: str) -> None:
        pass

    async def flush_async(self, event: str) -> None:
        pass

    def forget(self, event: Any) -> None:
        pass

    def forget_pushed(self) -> None:
        pass

    def get_raw_listeners(self) -> Dict[str, List[Any]]:
        return {}
