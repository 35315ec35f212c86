"""
Facades - static-style access to services resolved from the application.

Example:
    class Mail(Facade):
        @classmethod
        def get_facade_accessor(cls):
            return "mailer"

    Facade.set_facade_application(app)
    Mail.send(message)        # app.make("mailer").send(message)
"""

import logging
from typing import TYPE_CHECKING, Any, Hashable, Optional, Type

from .errors import FacadeRootUnavailableError

if TYPE_CHECKING:
    from ..foundation.application import Application

logger = logging.getLogger("orchestr.support.facade")


class FacadeMeta(type):
    """Forwards unknown class attributes to the facade root."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(cls.get_facade_root(), name)


class Facade(metaclass=FacadeMeta):
    """
    Base facade.

    Roots are resolved once per accessor and cached in the application's
    ``facade_instances``; swapping the application or clearing the cache
    forces a fresh resolution.
    """

    _app: Optional["Application"] = None

    @classmethod
    def set_facade_application(cls, app: Optional["Application"]) -> None:
        Facade._app = app

    @classmethod
    def get_facade_application(cls) -> Optional["Application"]:
        return Facade._app

    @classmethod
    def get_facade_accessor(cls) -> Any:
        raise NotImplementedError("Facade does not implement get_facade_accessor method.")

    @classmethod
    def get_facade_root(cls) -> Any:
        return cls.resolve_facade_instance(cls.get_facade_accessor())

    @classmethod
    def resolve_facade_instance(cls, accessor: Any) -> Any:
        # Accessors that are not keys are the root itself
        if not isinstance(accessor, (str, type)):
            return accessor

        app = Facade._app
        if app is None:
            raise FacadeRootUnavailableError(cls.__name__)

        cache = app.facade_instances
        if accessor not in cache:
            cache[accessor] = app.make(accessor)
            logger.debug("Resolved facade root for %s", accessor)
        return cache[accessor]

    @classmethod
    def clear_resolved_instance(cls, accessor: Hashable) -> None:
        if Facade._app is not None:
            Facade._app.facade_instances.pop(accessor, None)

    @classmethod
    def clear_resolved_instances(cls) -> None:
        if Facade._app is not None:
            Facade._app.facade_instances.clear()


def create_facade(accessor: Any, name: Optional[str] = None) -> Type[Facade]:
    """
    Build a facade class for ``accessor``.

    Example:
        Cache = create_facade("cache")
        Cache.get("key")
    """
    class_name = name or (f"{accessor.title()}Facade" if isinstance(accessor, str) else "Facade")
    return FacadeMeta(
        class_name,
        (Facade,),
        {"get_facade_accessor": classmethod(lambda cls: accessor)},
    )
