"""
Event dispatcher - listener registration, wildcard matching and dispatch.

Listeners may be:
- plain callables (functions, lambdas, bound methods)
- objects with a ``handle`` method
- classes with a ``handle`` method, built through the container per dispatch
- string references: ``"key"`` / ``"key@method"`` resolved through the
  container, or ``"package.module:Class@method"`` import paths

String events call listeners with ``(event_name, *payload)``; event objects
call listeners with ``(event,)`` and use the class name as the event name.
"""

import importlib
import inspect
import logging
from collections.abc import Mapping
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..container import Container
from .errors import AsyncListenerError, InvalidListenerError
from .registry import ListenerRegistry

logger = logging.getLogger("orchestr.events.dispatcher")


def event_name(event: Any) -> str:
    """Name under which an event (string, class or instance) is dispatched."""
    if isinstance(event, str):
        return event
    if isinstance(event, type):
        return event.__name__
    return type(event).__name__


def _normalize_payload(payload: Any) -> List[Any]:
    if payload is None:
        return []
    if isinstance(payload, (list, tuple)):
        return list(payload)
    return [payload]


def _is_plain_callable(listener: Any) -> bool:
    return (
        inspect.isfunction(listener)
        or inspect.ismethod(listener)
        or inspect.isbuiltin(listener)
        or isinstance(listener, partial)
    )


class Dispatcher:
    """
    Event dispatcher.

    Example:
        events = Dispatcher(container)
        events.listen("user.*", audit_log)
        events.listen(UserRegistered, SendWelcomeEmail)

        events.dispatch("user.created", [user])
        events.dispatch(UserRegistered(user))
    """

    def __init__(self, container: Optional[Container] = None):
        self._container = container if container is not None else Container()
        self._listeners = ListenerRegistry()
        self._queue: Dict[str, List[List[Any]]] = {}

    @property
    def container(self) -> Container:
        return self._container

    # ========================================================================
    # Registration
    # ========================================================================

    def listen(self, events: Any, listener: Any) -> None:
        """
        Register a listener for one or more events.

        Args:
            events: Event name, wildcard pattern, event class, or a list of them
            listener: Callable, handler object/class, or string reference
        """
        self._validate_listener(listener)
        for name in self._event_names(events):
            self._listeners.add(name, listener)
            logger.debug("Listening on %s with %r", name, listener)

    def has_listeners(self, event: Any) -> bool:
        return self._listeners.has(event_name(event))

    def has_wildcard_listeners(self, event: Any) -> bool:
        name = event_name(event)
        return any(
            self._listeners.matches(pattern, name)
            for pattern in self._listeners.raw()
            if "*" in pattern
        )

    def subscribe(self, subscriber: Any) -> None:
        """
        Register an event subscriber.

        The subscriber's ``subscribe(dispatcher)`` either registers listeners
        itself or returns a mapping of event → handler(s). String handlers
        naming a subscriber method register that bound method.
        """
        subscriber = self._resolve_subscriber(subscriber)
        events = subscriber.subscribe(self)

        if events is None:
            return

        if not isinstance(events, Mapping):
            raise InvalidListenerError(subscriber, "subscribe() must return a mapping or None")

        for event, handlers in events.items():
            if isinstance(handlers, (list, tuple)):
                for handler in handlers:
                    self.listen(event, self._subscriber_handler(subscriber, handler))
            else:
                self.listen(event, self._subscriber_handler(subscriber, handlers))

    def forget(self, event: Any) -> None:
        """Remove listeners registered under exactly this name or pattern."""
        self._listeners.forget(event_name(event))

    def get_raw_listeners(self) -> Dict[str, List[Any]]:
        return self._listeners.raw()

    def get_listeners(self, event: Any) -> List[Any]:
        """Listeners that would run for ``event``, in invocation order."""
        return self._listeners.listeners_for(event_name(event))

    # ========================================================================
    # Dispatch
    # ========================================================================

    def dispatch(self, event: Any, payload: Optional[Sequence[Any]] = None, halt: bool = False) -> Any:
        """
        Fire an event and call its listeners.

        Args:
            event: Event name or event object
            payload: Extra arguments for string events
            halt: Stop at the first non-None response and return it

        Returns:
            List of non-None responses, or with ``halt`` the first non-None
            response (None if there was none)
        """
        name, arguments = self._parse_event(event, payload)
        listeners = self._listeners.listeners_for(name)
        logger.debug("Dispatching %s to %d listener(s)", name, len(listeners))

        responses: List[Any] = []
        for listener in listeners:
            response = self._make_listener(listener)(*arguments)

            if inspect.isawaitable(response):
                if inspect.iscoroutine(response):
                    response.close()
                raise AsyncListenerError(name, listener)

            if halt and response is not None:
                return response
            if response is not None:
                responses.append(response)

        return None if halt else responses

    def until(self, event: Any, payload: Optional[Sequence[Any]] = None) -> Any:
        """Dispatch until the first listener returns a non-None response."""
        return self.dispatch(event, payload, halt=True)

    async def dispatch_async(self, event: Any, payload: Optional[Sequence[Any]] = None, halt: bool = False) -> Any:
        """
        Async dispatch.

        Listeners run one at a time; awaitable responses are awaited before
        the next listener is called.
        """
        name, arguments = self._parse_event(event, payload)
        listeners = self._listeners.listeners_for(name)
        logger.debug("Dispatching %s to %d listener(s)", name, len(listeners))

        responses: List[Any] = []
        for listener in listeners:
            handler = await self._make_listener_async(listener)
            response = handler(*arguments)
            if inspect.isawaitable(response):
                response = await response

            if halt and response is not None:
                return response
            if response is not None:
                responses.append(response)

        return None if halt else responses

    async def until_async(self, event: Any, payload: Optional[Sequence[Any]] = None) -> Any:
        return await self.dispatch_async(event, payload, halt=True)

    # ========================================================================
    # Deferred events
    # ========================================================================

    def push(self, event: str, payload: Optional[Sequence[Any]] = None) -> None:
        """Queue an event for a later ``flush``."""
        self._queue.setdefault(event, []).append(_normalize_payload(payload))

    def flush(self, event: str) -> None:
        """Dispatch queued payloads for ``event`` oldest first, then drop them."""
        for payload in self._queue.pop(event, []):
            self.dispatch(event, payload)

    async def flush_async(self, event: str) -> None:
        for payload in self._queue.pop(event, []):
            await self.dispatch_async(event, payload)

    def forget_pushed(self) -> None:
        """Drop every queued event."""
        self._queue.clear()

    def get_pushed(self, event: str) -> List[List[Any]]:
        return [list(payload) for payload in self._queue.get(event, [])]

    # ========================================================================
    # Internals
    # ========================================================================

    def _event_names(self, events: Any) -> List[str]:
        if isinstance(events, (str, type)):
            return [event_name(events)]
        if isinstance(events, Iterable):
            return [event_name(event) for event in events]
        return [event_name(events)]

    def _parse_event(self, event: Any, payload: Optional[Sequence[Any]]) -> Tuple[str, List[Any]]:
        if isinstance(event, str):
            return event, [event, *_normalize_payload(payload)]
        return event_name(event), [event]

    def _validate_listener(self, listener: Any) -> None:
        if isinstance(listener, (str, type)):
            return
        if callable(listener) or callable(getattr(listener, "handle", None)):
            return
        raise InvalidListenerError(listener)

    def _make_listener(self, listener: Any) -> Callable[..., Any]:
        if _is_plain_callable(listener):
            return listener
        if isinstance(listener, str):
            target, method = self._parse_reference(listener)
            return self._bound_method(self._container.make(target), method, listener)
        if isinstance(listener, type):
            return self._bound_method(self._container.make(listener), "handle", listener)
        return self._handler_of(listener)

    async def _make_listener_async(self, listener: Any) -> Callable[..., Any]:
        if _is_plain_callable(listener):
            return listener
        if isinstance(listener, str):
            target, method = self._parse_reference(listener)
            return self._bound_method(await self._container.make_async(target), method, listener)
        if isinstance(listener, type):
            return self._bound_method(await self._container.make_async(listener), "handle", listener)
        return self._handler_of(listener)

    def _handler_of(self, listener: Any) -> Callable[..., Any]:
        handle = getattr(listener, "handle", None)
        if callable(handle):
            return handle
        if callable(listener):
            return listener
        raise InvalidListenerError(listener)

    @staticmethod
    def _bound_method(instance: Any, method: str, listener: Any) -> Callable[..., Any]:
        handler = getattr(instance, method, None)
        if not callable(handler):
            raise InvalidListenerError(listener, f"resolved object has no callable '{method}'")
        return handler

    @staticmethod
    def _parse_reference(reference: str) -> Tuple[Any, str]:
        target, _, method = reference.partition("@")
        method = method or "handle"
        if ":" in target:
            module_path, _, attr = target.partition(":")
            return getattr(importlib.import_module(module_path), attr), method
        return target, method

    def _resolve_subscriber(self, subscriber: Any) -> Any:
        if isinstance(subscriber, str):
            target, _ = self._parse_reference(subscriber)
            return self._container.make(target)
        if isinstance(subscriber, type):
            return self._container.make(subscriber)
        return subscriber

    @staticmethod
    def _subscriber_handler(subscriber: Any, handler: Any) -> Any:
        if isinstance(handler, str):
            method = getattr(subscriber, handler, None)
            if callable(method):
                return method
        return handler
