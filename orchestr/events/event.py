"""
Event base class.

Application events subclass Event to get JSON serialization for queueing,
broadcast hooks and class-level dispatch helpers.

Example:
    class UserRegistered(Event):
        def __init__(self, user):
            self.user = user

    UserRegistered.dispatch(user)
"""

import dataclasses
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar

E = TypeVar("E", bound="Event")

_QUEUE_ATTRIBUTES = ("connection", "queue", "delay")


class Event:
    """
    Base class for application events.

    Attributes:
        connection: Queue connection for queued listeners
        queue: Queue name for queued listeners
        delay: Seconds to delay queued listeners
    """

    # Attribute names left out of to_json()
    exclude_from_serialization: ClassVar[Tuple[str, ...]] = ()

    connection: Optional[str] = None
    queue: Optional[str] = None
    delay: Optional[int] = None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> Dict[str, Any]:
        """Public attributes as JSON-ready data, tagged with the class name."""
        data: Dict[str, Any] = {"_class": type(self).__name__}
        for name, value in vars(self).items():
            if name.startswith("_") or name in self.exclude_from_serialization:
                continue
            data[name] = self._serialize_value(value)
        return data

    def _serialize_value(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, datetime):
            return {"_type": "datetime", "value": value.isoformat()}
        if isinstance(value, date):
            return {"_type": "date", "value": value.isoformat()}
        if hasattr(value, "to_json") and callable(value.to_json):
            return value.to_json()
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {f.name: self._serialize_value(getattr(value, f.name)) for f in dataclasses.fields(value)}
        if isinstance(value, (list, tuple, set)):
            return [self._serialize_value(item) for item in value]
        if isinstance(value, dict):
            return {key: self._serialize_value(item) for key, item in value.items()}
        return value

    @classmethod
    def from_json(cls: Type[E], data: Dict[str, Any]) -> E:
        """Rebuild an event without calling ``__init__``."""
        instance = cls.__new__(cls)
        for key, value in data.items():
            if key == "_class":
                continue
            setattr(instance, key, cls._deserialize_value(value))
        return instance

    @classmethod
    def _deserialize_value(cls, value: Any) -> Any:
        if isinstance(value, dict):
            tag = value.get("_type")
            if tag == "datetime":
                return datetime.fromisoformat(value["value"])
            if tag == "date":
                return date.fromisoformat(value["value"])
            return {key: cls._deserialize_value(item) for key, item in value.items()}
        if isinstance(value, list):
            return [cls._deserialize_value(item) for item in value]
        return value

    # ------------------------------------------------------------------
    # Broadcasting
    # ------------------------------------------------------------------

    def broadcast_on(self) -> str | List[str]:
        """Channel name(s) to broadcast on; none by default."""
        return []

    def broadcast_with(self) -> Dict[str, Any]:
        return {
            name: value
            for name, value in vars(self).items()
            if not name.startswith("_") and name not in _QUEUE_ATTRIBUTES and value is not None
        }

    def broadcast_as(self) -> str:
        return type(self).__name__

    def should_broadcast(self) -> bool:
        channels = self.broadcast_on()
        if isinstance(channels, (list, tuple)):
            return len(channels) > 0
        return bool(channels)

    # ------------------------------------------------------------------
    # Dispatching through the Events facade
    # ------------------------------------------------------------------

    @classmethod
    def dispatch(cls, *args: Any, **kwargs: Any) -> List[Any]:
        """Build the event and dispatch it."""
        from ..support.facades import Events

        return Events.dispatch(cls(*args, **kwargs))

    @classmethod
    def dispatch_if(cls, condition: Any, *args: Any, **kwargs: Any) -> List[Any]:
        if callable(condition):
            condition = condition()
        return cls.dispatch(*args, **kwargs) if condition else []

    @classmethod
    def dispatch_unless(cls, condition: Any, *args: Any, **kwargs: Any) -> List[Any]:
        if callable(condition):
            condition = condition()
        return [] if condition else cls.dispatch(*args, **kwargs)
