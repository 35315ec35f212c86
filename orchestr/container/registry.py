"""
Binding registry - abstract → binding/instance/alias storage.

Abstracts are either strings or classes. Both are hashable, so a single
dict per concern holds both forms.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional

from .errors import CircularDependencyError, ContainerError, describe


@dataclass(frozen=True, slots=True)
class Binding:
    """
    A registered recipe for producing a service.

    ``concrete`` is either a class (built by reflection) or a factory
    callable. ``takes_container`` records whether the factory declares a
    parameter to receive the container.
    """
    abstract: Hashable
    concrete: Any
    shared: bool = False
    is_class: bool = False
    takes_container: bool = True
    is_async: bool = False

    @classmethod
    def create(cls, abstract: Hashable, concrete: Any, shared: bool) -> "Binding":
        if concrete is None:
            if not isinstance(abstract, type):
                raise ContainerError(
                    f"Cannot bind [{describe(abstract)}] without a concrete factory or class",
                    code="INVALID_BINDING",
                    metadata={"abstract": describe(abstract)},
                )
            concrete = abstract

        if isinstance(concrete, type):
            return cls(abstract=abstract, concrete=concrete, shared=shared, is_class=True)

        if not callable(concrete):
            raise ContainerError(
                f"Concrete for [{describe(abstract)}] must be a class or callable, "
                f"got {type(concrete).__name__}; use instance() to register values",
                code="INVALID_BINDING",
                metadata={"abstract": describe(abstract)},
            )

        return cls(
            abstract=abstract,
            concrete=concrete,
            shared=shared,
            is_class=False,
            takes_container=_accepts_argument(concrete),
            is_async=inspect.iscoroutinefunction(concrete),
        )

    @property
    def kind(self) -> str:
        return "class" if self.is_class else "factory"


def _accepts_argument(factory: Callable) -> bool:
    """True if the factory can be called with one positional argument."""
    try:
        sig = inspect.signature(factory)
    except (TypeError, ValueError):
        return True

    for param in sig.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


class BindingRegistry:
    """
    Stores bindings, instances, aliases and the resolved-instance cache.

    The registry holds state only; resolution is the Resolver's job.
    """

    __slots__ = ("_bindings", "_instances", "_aliases", "_resolved", "_pending")

    def __init__(self):
        self._bindings: Dict[Hashable, Binding] = {}
        self._instances: Dict[Hashable, Any] = {}
        self._aliases: Dict[Hashable, Hashable] = {}
        self._resolved: Dict[Hashable, Any] = {}
        # Shared abstracts whose async build is in flight
        self._pending: Dict[Hashable, asyncio.Future] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_binding(self, binding: Binding) -> None:
        """Register a binding; last write wins."""
        abstract = binding.abstract
        self._instances.pop(abstract, None)
        self._resolved.pop(abstract, None)
        self._pending.pop(abstract, None)
        self._aliases.pop(abstract, None)
        self._bindings[abstract] = binding

    def add_instance(self, abstract: Hashable, value: Any) -> None:
        self._aliases.pop(abstract, None)
        self._instances[abstract] = value

    def add_alias(self, abstract: Hashable, alias: Hashable) -> None:
        if alias == abstract:
            raise ContainerError(
                f"[{describe(abstract)}] is aliased to itself",
                code="INVALID_ALIAS",
                metadata={"abstract": describe(abstract)},
            )
        self._aliases[alias] = abstract

    def remember(self, abstract: Hashable, value: Any) -> None:
        """Cache the resolved value of a shared binding."""
        self._resolved[abstract] = value

    def add_pending(self, abstract: Hashable, future: asyncio.Future) -> None:
        self._pending[abstract] = future

    def clear_pending(self, abstract: Hashable, future: asyncio.Future) -> None:
        if self._pending.get(abstract) is future:
            del self._pending[abstract]

    def forget_instance(self, abstract: Hashable) -> None:
        self._instances.pop(abstract, None)
        self._resolved.pop(abstract, None)

    def forget_instances(self) -> None:
        self._instances.clear()
        self._resolved.clear()

    def flush(self) -> None:
        """Drop every binding, instance, alias and cached resolution."""
        # Atomic swap
        self._bindings, self._instances, self._aliases, self._resolved = {}, {}, {}, {}
        self._pending = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_alias(self, abstract: Hashable) -> Hashable:
        """
        Follow the alias chain to its terminal abstract.

        Raises:
            CircularDependencyError: If the chain loops back on itself
        """
        seen: List[Hashable] = [abstract]
        current = abstract
        while current in self._aliases:
            current = self._aliases[current]
            if current in seen:
                raise CircularDependencyError(seen + [current], kind="alias")
            seen.append(current)
        return current

    def is_alias(self, abstract: Hashable) -> bool:
        return abstract in self._aliases

    def binding(self, abstract: Hashable) -> Optional[Binding]:
        return self._bindings.get(abstract)

    def has_binding(self, abstract: Hashable) -> bool:
        return abstract in self._bindings

    def has_instance(self, abstract: Hashable) -> bool:
        return abstract in self._instances

    def instance(self, abstract: Hashable) -> Any:
        return self._instances[abstract]

    def has_resolved(self, abstract: Hashable) -> bool:
        return abstract in self._resolved

    def resolved_value(self, abstract: Hashable) -> Any:
        return self._resolved[abstract]

    def pending(self, abstract: Hashable) -> Optional[asyncio.Future]:
        return self._pending.get(abstract)

    @property
    def bindings(self) -> Dict[Hashable, Binding]:
        return dict(self._bindings)

    @property
    def instances(self) -> Dict[Hashable, Any]:
        return dict(self._instances)

    @property
    def aliases(self) -> Dict[Hashable, Hashable]:
        return dict(self._aliases)
