"""
Resolver - turns an abstract into an instance.

Handles factory invocation, reflection-based constructor injection and
callable injection, in sync and async flavours. Cycle detection uses a
per-context resolution stack so concurrent async resolutions stay isolated.
"""

import inspect
import logging
import types
import weakref
from contextvars import ContextVar
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Callable,
    Dict,
    Hashable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .errors import BindingResolutionError, CircularDependencyError, describe
from .inject import find_inject
from .registry import Binding

if TYPE_CHECKING:
    from .container import Container

logger = logging.getLogger("orchestr.container.resolver")

_EMPTY = inspect.Parameter.empty

# Types that carry no information about which service to inject
PRIMITIVES = frozenset((
    int, float, complex, str, bytes, bytearray, bool,
    list, dict, tuple, set, frozenset, object, type,
))

# (container id, abstract) pairs currently being built in this context
_build_stack: ContextVar[Tuple[Tuple[int, Hashable], ...]] = ContextVar(
    "orchestr_build_stack", default=()
)

# Class → parameter plan; entries die with their class
_plan_cache: "weakref.WeakKeyDictionary[type, Tuple[Dependency, ...]]" = (
    weakref.WeakKeyDictionary()
)


@dataclass(frozen=True, slots=True)
class Dependency:
    """A single injectable parameter."""
    name: str
    abstract: Any = None  # None when the annotation gives nothing to resolve
    default: Any = _EMPTY
    optional: bool = False
    positional_only: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY


# ============================================================================
# Reflection
# ============================================================================

def _analyze_annotation(annotation: Any) -> Tuple[Any, bool]:
    """
    Work out which abstract an annotation asks for.

    Returns:
        (abstract or None, optional flag)
    """
    optional = False

    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        marker = find_inject(tuple(metadata))
        if marker is not None:
            if marker.abstract is not None:
                return marker.abstract, marker.optional
            optional = marker.optional
        annotation = base

    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != len(args):
            optional = True
        if len(members) != 1:
            return None, optional
        annotation = members[0]

    if isinstance(annotation, type) and annotation not in PRIMITIVES:
        return annotation, optional

    return None, optional


def inspect_dependencies(target: Callable) -> Tuple[Dependency, ...]:
    """
    Extract the injectable parameters of a class constructor or callable.

    Classes are cached; callables are inspected on every call.
    """
    if isinstance(target, type):
        cached = _plan_cache.get(target)
        if cached is not None:
            return cached

    try:
        sig = inspect.signature(target)
    except (TypeError, ValueError):
        # Builtins and C types may not expose a signature
        return ()

    hint_source = target.__init__ if isinstance(target, type) else target
    try:
        hints = get_type_hints(hint_source, include_extras=True)
    except (NameError, TypeError, AttributeError):
        hints = {}

    plan: List[Dependency] = []
    for name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation = hints.get(name, param.annotation)
        abstract, optional = (None, False) if annotation is _EMPTY else _analyze_annotation(annotation)

        plan.append(Dependency(
            name=name,
            abstract=abstract,
            default=param.default,
            optional=optional,
            positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
        ))

    result = tuple(plan)
    if isinstance(target, type):
        _plan_cache[target] = result
    return result


def _is_instantiable(cls: type) -> bool:
    if inspect.isabstract(cls):
        return False
    if getattr(cls, "_is_protocol", False):
        return False
    return True


def _owner_name(target: Any) -> str:
    if isinstance(target, type):
        return describe(target)
    return getattr(target, "__qualname__", repr(target))


def _split_arguments(
    parameters: Optional[Sequence[Any] | Mapping[str, Any]],
) -> Tuple[List[Any], Dict[str, Any]]:
    if parameters is None:
        return [], {}
    if isinstance(parameters, Mapping):
        return [], dict(parameters)
    return list(parameters), {}


def _unresolvable(owner: Any, dep: Dependency) -> BindingResolutionError:
    return BindingResolutionError(
        owner,
        f"Unresolvable dependency resolving [{dep.name}] in [{_owner_name(owner)}]",
        parameter=dep.name,
        build_stack=current_stack(),
    )


def current_stack() -> List[Hashable]:
    return [abstract for _, abstract in _build_stack.get()]


# ============================================================================
# Resolver
# ============================================================================

class Resolver:
    """
    Produces instances for a container.

    Recursion always goes back through ``container.make`` so aliases,
    instances and shared caching apply at every level.
    """

    __slots__ = ("_container",)

    def __init__(self, container: "Container"):
        self._container = container

    # ------------------------------------------------------------------
    # Cycle tracking
    # ------------------------------------------------------------------

    def enter(self, abstract: Hashable):
        """Push an abstract onto the build stack; returns the reset token."""
        stack = _build_stack.get()
        frame = (id(self._container), abstract)
        if frame in stack:
            mine = [a for cid, a in stack if cid == frame[0]]
            start = mine.index(abstract)
            raise CircularDependencyError(mine[start:] + [abstract])
        return _build_stack.set(stack + (frame,))

    def leave(self, token) -> None:
        _build_stack.reset(token)

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def resolve_binding(self, binding: Binding) -> Any:
        if binding.is_class:
            if binding.concrete is binding.abstract:
                return self.build(binding.concrete)
            return self._container.make(binding.concrete)

        if binding.is_async:
            raise BindingResolutionError(
                binding.abstract,
                f"Factory for [{describe(binding.abstract)}] is a coroutine function; "
                f"use make_async() instead",
                requires_async=True,
            )

        if binding.takes_container:
            result = binding.concrete(self._container)
        else:
            result = binding.concrete()

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise BindingResolutionError(
                binding.abstract,
                f"Factory for [{describe(binding.abstract)}] returned an awaitable; "
                f"use make_async() instead",
                requires_async=True,
            )
        return result

    def build(self, concrete: type, parameters: Optional[Mapping[str, Any]] = None) -> Any:
        """Instantiate a class, resolving its constructor dependencies."""
        self._check_instantiable(concrete)
        args, kwargs = self._resolve_arguments(concrete, inspect_dependencies(concrete), [], dict(parameters or {}))
        logger.debug("Building %s", describe(concrete))
        return concrete(*args, **kwargs)

    def call(
        self,
        target: Callable,
        parameters: Optional[Sequence[Any] | Mapping[str, Any]] = None,
    ) -> Any:
        positional, named = _split_arguments(parameters)
        args, kwargs = self._resolve_arguments(target, inspect_dependencies(target), positional, named)
        return target(*args, **kwargs)

    def _resolve_arguments(
        self,
        owner: Any,
        plan: Sequence[Dependency],
        positional: List[Any],
        named: Dict[str, Any],
    ) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for dep in plan:
            value = self._resolve_dependency(owner, dep, positional, named)
            if dep.positional_only:
                args.append(value)
            else:
                kwargs[dep.name] = value
        return args, kwargs

    def _resolve_dependency(
        self,
        owner: Any,
        dep: Dependency,
        positional: List[Any],
        named: Dict[str, Any],
    ) -> Any:
        if dep.name in named:
            return named[dep.name]

        if dep.abstract is not None:
            try:
                return self._container.make(dep.abstract)
            except BindingResolutionError as e:
                if e.requires_async:
                    raise
                if dep.has_default:
                    return dep.default
                if dep.optional:
                    return None
                raise

        if positional:
            return positional.pop(0)
        if dep.has_default:
            return dep.default
        if dep.optional:
            return None
        raise _unresolvable(owner, dep)

    # ------------------------------------------------------------------
    # Async
    # ------------------------------------------------------------------

    async def resolve_binding_async(self, binding: Binding) -> Any:
        if binding.is_class:
            if binding.concrete is binding.abstract:
                return await self.build_async(binding.concrete)
            return await self._container.make_async(binding.concrete)

        if binding.takes_container:
            result = binding.concrete(self._container)
        else:
            result = binding.concrete()

        if inspect.isawaitable(result):
            result = await result
        return result

    async def build_async(self, concrete: type, parameters: Optional[Mapping[str, Any]] = None) -> Any:
        self._check_instantiable(concrete)
        args, kwargs = await self._resolve_arguments_async(
            concrete, inspect_dependencies(concrete), [], dict(parameters or {})
        )
        logger.debug("Building %s", describe(concrete))
        return concrete(*args, **kwargs)

    async def call_async(
        self,
        target: Callable,
        parameters: Optional[Sequence[Any] | Mapping[str, Any]] = None,
    ) -> Any:
        positional, named = _split_arguments(parameters)
        args, kwargs = await self._resolve_arguments_async(
            target, inspect_dependencies(target), positional, named
        )
        result = target(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _resolve_arguments_async(
        self,
        owner: Any,
        plan: Sequence[Dependency],
        positional: List[Any],
        named: Dict[str, Any],
    ) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for dep in plan:
            if dep.name in named:
                value = named[dep.name]
            elif dep.abstract is not None:
                try:
                    value = await self._container.make_async(dep.abstract)
                except BindingResolutionError:
                    if dep.has_default:
                        value = dep.default
                    elif dep.optional:
                        value = None
                    else:
                        raise
            elif positional:
                value = positional.pop(0)
            elif dep.has_default:
                value = dep.default
            elif dep.optional:
                value = None
            else:
                raise _unresolvable(owner, dep)

            if dep.positional_only:
                args.append(value)
            else:
                kwargs[dep.name] = value
        return args, kwargs

    # ------------------------------------------------------------------

    def _check_instantiable(self, concrete: type) -> None:
        if not _is_instantiable(concrete):
            raise BindingResolutionError(
                concrete,
                f"Target [{describe(concrete)}] is not instantiable",
                build_stack=current_stack(),
            )
