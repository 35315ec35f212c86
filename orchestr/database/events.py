"""
Model lifecycle events.

``*ing`` events fire before the operation and can cancel it: a listener
returning ``False`` halts the dispatch and the operation is abandoned.
"""

from dataclasses import dataclass
from typing import Any

from ..events.contracts import DispatcherContract


@dataclass
class ModelEvent:
    model: Any

    @property
    def halts(self) -> bool:
        """True for events whose listeners may cancel the operation."""
        return type(self).__name__.endswith("ing")


class ModelRetrieved(ModelEvent):
    pass


class ModelCreating(ModelEvent):
    pass


class ModelCreated(ModelEvent):
    pass


class ModelUpdating(ModelEvent):
    pass


class ModelUpdated(ModelEvent):
    pass


class ModelSaving(ModelEvent):
    pass


class ModelSaved(ModelEvent):
    pass


class ModelDeleting(ModelEvent):
    pass


class ModelDeleted(ModelEvent):
    pass


def fire_model_event(dispatcher: DispatcherContract, event: ModelEvent) -> bool:
    """
    Fire a model event.

    Returns:
        False if a halting event was cancelled by a listener, else True
    """
    if event.halts:
        return dispatcher.until(event) is not False
    dispatcher.dispatch(event)
    return True


async def fire_model_event_async(dispatcher: Any, event: ModelEvent) -> bool:
    if event.halts:
        return (await dispatcher.until_async(event)) is not False
    await dispatcher.dispatch_async(event)
    return True
