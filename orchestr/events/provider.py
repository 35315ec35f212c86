"""
Registers the event dispatcher and application listeners.
"""

import logging
from typing import Any, ClassVar, Dict, List

from ..foundation.provider import ServiceProvider
from .contracts import DispatcherContract
from .dispatcher import Dispatcher

logger = logging.getLogger("orchestr.events.provider")


class EventServiceProvider(ServiceProvider):
    """
    Binds the shared ``events`` dispatcher.

    Subclasses declare listeners and subscribers, registered on boot:

        class AppEventServiceProvider(EventServiceProvider):
            listen = {
                UserRegistered: [SendWelcomeEmail],
                "order.*": ["audit@record"],
            }
            subscribe = [UserEventSubscriber]
    """

    listen: ClassVar[Dict[Any, List[Any]]] = {}
    subscribe: ClassVar[List[Any]] = []

    def register(self) -> None:
        self.app.singleton("events", lambda app: Dispatcher(app))
        self.app.alias("events", Dispatcher)
        self.app.alias("events", DispatcherContract)

    def boot(self) -> None:
        if not self.listen and not self.subscribe:
            return

        events = self.app.make("events")
        for event, listeners in self.listen.items():
            if not isinstance(listeners, (list, tuple)):
                listeners = [listeners]
            for listener in listeners:
                events.listen(event, listener)

        for subscriber in self.subscribe:
            events.subscribe(subscriber)

        logger.info(
            "%s registered %d event(s) and %d subscriber(s)",
            type(self).__name__, len(self.listen), len(self.subscribe),
        )

    def provides(self) -> List[Any]:
        return ["events", Dispatcher, DispatcherContract]
