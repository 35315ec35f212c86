"""
Service container - public binding and resolution API.
"""

import asyncio
import logging
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    overload,
)

from .errors import BindingResolutionError, describe
from .registry import Binding, BindingRegistry
from .resolver import Resolver, current_stack

logger = logging.getLogger("orchestr.container")

T = TypeVar("T")


class Container:
    """
    Service container.

    Stores bindings keyed by string names or classes and builds instances on
    demand, injecting constructor dependencies by reflection.

    Example:
        container = Container()
        container.singleton("db", lambda c: Database(c.make("config")))
        container.alias("db", "database")
        db = container.make("database")
    """

    def __init__(self):
        self._registry = BindingRegistry()
        self._resolver = Resolver(self)

    # ========================================================================
    # Registration
    # ========================================================================

    def bind(self, abstract: Hashable, concrete: Any = None, shared: bool = False) -> None:
        """
        Register a binding.

        Args:
            abstract: String key or class
            concrete: Factory ``(container) -> instance``, zero-arg factory,
                class to build, or None to build ``abstract`` itself
            shared: Cache the first resolved instance
        """
        binding = Binding.create(abstract, concrete, shared)
        self._registry.add_binding(binding)
        logger.debug(
            "Bound %s (%s, shared=%s)", describe(abstract), binding.kind, shared
        )

    def bind_if(self, abstract: Hashable, concrete: Any = None, shared: bool = False) -> None:
        """Register a binding only if the abstract is not bound yet."""
        if not self.bound(abstract):
            self.bind(abstract, concrete, shared)

    def singleton(self, abstract: Hashable, concrete: Any = None) -> None:
        """Register a shared binding."""
        self.bind(abstract, concrete, shared=True)

    def singleton_if(self, abstract: Hashable, concrete: Any = None) -> None:
        if not self.bound(abstract):
            self.singleton(abstract, concrete)

    def instance(self, abstract: Hashable, value: T) -> T:
        """Register an existing object; returns it unchanged."""
        self._registry.add_instance(abstract, value)
        logger.debug("Registered instance for %s", describe(abstract))
        return value

    def alias(self, abstract: Hashable, alias: Hashable) -> None:
        """Make ``alias`` resolve exactly as ``abstract`` does."""
        self._registry.add_alias(abstract, alias)
        logger.debug("Aliased %s -> %s", describe(alias), describe(abstract))

    # ========================================================================
    # Resolution
    # ========================================================================

    @overload
    def make(self, abstract: Type[T], parameters: Optional[Mapping[str, Any]] = None) -> T: ...

    @overload
    def make(self, abstract: Hashable, parameters: Optional[Mapping[str, Any]] = None) -> Any: ...

    def make(self, abstract, parameters=None):
        """
        Resolve an abstract to an instance.

        Args:
            abstract: String key or class
            parameters: Constructor overrides by name (automatic class
                resolution only)

        Raises:
            BindingResolutionError: Unbound string key or unresolvable parameter
            CircularDependencyError: Cyclic alias chain or dependency graph
        """
        abstract = self._registry.get_alias(abstract)

        if self._registry.has_instance(abstract):
            return self._registry.instance(abstract)

        binding = self._registry.binding(abstract)
        if binding is not None and binding.shared and self._registry.has_resolved(abstract):
            return self._registry.resolved_value(abstract)

        token = self._resolver.enter(abstract)
        try:
            if binding is not None:
                value = self._resolver.resolve_binding(binding)
            else:
                value = self._build_unbound(abstract, parameters)
        finally:
            self._resolver.leave(token)

        if binding is not None and binding.shared:
            self._registry.remember(abstract, value)
        return value

    async def make_async(self, abstract: Hashable, parameters: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Async resolve.

        Awaits coroutine factories and resolves constructor dependencies
        through ``make_async`` so async bindings anywhere in the graph work.
        """
        abstract = self._registry.get_alias(abstract)

        if self._registry.has_instance(abstract):
            return self._registry.instance(abstract)

        binding = self._registry.binding(abstract)
        shared = binding is not None and binding.shared
        if shared and self._registry.has_resolved(abstract):
            return self._registry.resolved_value(abstract)

        token = self._resolver.enter(abstract)
        try:
            if shared:
                pending = self._registry.pending(abstract)
                if pending is not None:
                    # Another task is building this singleton
                    return await asyncio.shield(pending)
                future = asyncio.get_running_loop().create_future()
                self._registry.add_pending(abstract, future)
                try:
                    value = await self._resolver.resolve_binding_async(binding)
                except asyncio.CancelledError:
                    future.cancel()
                    raise
                except BaseException as exc:
                    future.set_exception(exc)
                    # Mark retrieved when no other task is waiting
                    future.exception()
                    raise
                else:
                    self._registry.remember(abstract, value)
                    future.set_result(value)
                finally:
                    self._registry.clear_pending(abstract, future)
            elif binding is not None:
                value = await self._resolver.resolve_binding_async(binding)
            else:
                self._ensure_buildable(abstract)
                value = await self._resolver.build_async(abstract, parameters)
        finally:
            self._resolver.leave(token)
        return value

    def build(self, concrete: Type[T], parameters: Optional[Mapping[str, Any]] = None) -> T:
        """Instantiate a class by reflection, ignoring any binding for it."""
        return self._resolver.build(concrete, parameters)

    def call(
        self,
        target: Callable | str,
        parameters: Optional[Sequence[Any] | Mapping[str, Any]] = None,
    ) -> Any:
        """
        Call a function, injecting its parameters.

        Annotated parameters are resolved from the container. Parameters
        without usable type information take values from ``parameters``:
        positionally for a sequence, by name for a mapping.

        ``target`` may also be a ``"key@method"`` string.
        """
        return self._resolver.call(self._callable(target), parameters)

    async def call_async(
        self,
        target: Callable | str,
        parameters: Optional[Sequence[Any] | Mapping[str, Any]] = None,
    ) -> Any:
        if isinstance(target, str):
            target = await self._callable_async(target)
        return await self._resolver.call_async(target, parameters)

    def factory(self, abstract: Hashable) -> Callable[[], Any]:
        """Return a zero-argument callable that resolves ``abstract``."""
        return lambda: self.make(abstract)

    # ========================================================================
    # Introspection
    # ========================================================================

    def bound(self, abstract: Hashable) -> bool:
        """True if the abstract (or its alias target) has a binding or instance."""
        terminal = self._registry.get_alias(abstract)
        return self._registry.has_binding(terminal) or self._registry.has_instance(terminal)

    has = bound

    def __contains__(self, abstract: Hashable) -> bool:
        return self.bound(abstract)

    def resolved(self, abstract: Hashable) -> bool:
        """True if the abstract is an instance or a resolved shared binding."""
        terminal = self._registry.get_alias(abstract)
        return self._registry.has_instance(terminal) or self._registry.has_resolved(terminal)

    def is_shared(self, abstract: Hashable) -> bool:
        terminal = self._registry.get_alias(abstract)
        if self._registry.has_instance(terminal):
            return True
        binding = self._registry.binding(terminal)
        return binding is not None and binding.shared

    def is_alias(self, abstract: Hashable) -> bool:
        return self._registry.is_alias(abstract)

    def get_alias(self, abstract: Hashable) -> Hashable:
        return self._registry.get_alias(abstract)

    def get_bindings(self) -> Dict[Hashable, Binding]:
        return self._registry.bindings

    def get_instances(self) -> Dict[Hashable, Any]:
        return self._registry.instances

    def get_aliases(self) -> Dict[Hashable, Hashable]:
        return self._registry.aliases

    # ========================================================================
    # Cleanup
    # ========================================================================

    def forget_instance(self, abstract: Hashable) -> None:
        self._registry.forget_instance(abstract)

    def forget_instances(self) -> None:
        self._registry.forget_instances()

    def flush(self) -> None:
        """Clear bindings, instances, aliases and resolved instances."""
        self._registry.flush()
        logger.debug("Container flushed")

    # ========================================================================
    # Internals
    # ========================================================================

    def _build_unbound(self, abstract: Hashable, parameters: Optional[Mapping[str, Any]]) -> Any:
        self._ensure_buildable(abstract)
        return self._resolver.build(abstract, parameters)

    def _ensure_buildable(self, abstract: Hashable) -> None:
        if not isinstance(abstract, type):
            raise BindingResolutionError(abstract, build_stack=current_stack())

    def _callable(self, target: Callable | str) -> Callable:
        if not isinstance(target, str):
            return target
        key, method = self._split_reference(target)
        return getattr(self.make(key), method)

    async def _callable_async(self, target: str) -> Callable:
        key, method = self._split_reference(target)
        return getattr(await self.make_async(key), method)

    @staticmethod
    def _split_reference(target: str) -> tuple[str, str]:
        key, _, method = target.partition("@")
        return key, method or "handle"
