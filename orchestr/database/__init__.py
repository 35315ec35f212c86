"""
Orchestr Database - model lifecycle events consumed by the ORM layer.
"""

from .events import (
    ModelCreated,
    ModelCreating,
    ModelDeleted,
    ModelDeleting,
    ModelEvent,
    ModelRetrieved,
    ModelSaved,
    ModelSaving,
    ModelUpdated,
    ModelUpdating,
    fire_model_event,
    fire_model_event_async,
)

__all__ = [
    "ModelCreated",
    "ModelCreating",
    "ModelDeleted",
    "ModelDeleting",
    "ModelEvent",
    "ModelRetrieved",
    "ModelSaved",
    "ModelSaving",
    "ModelUpdated",
    "ModelUpdating",
    "fire_model_event",
    "fire_model_event_async",
]
