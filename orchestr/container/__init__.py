"""
Orchestr Service Container

Binding registry, reflection-driven resolution and alias handling.

Key Features:
- String- or class-keyed bindings, shared (singleton) or transient
- Pre-built instances and transitive aliases
- Constructor and callable injection from type hints
- Annotated[T, Inject("key")] for string-keyed or primitive parameters
- Async twins (make_async, call_async) for coroutine factories
- Cycle detection for alias chains and dependency graphs
"""

from .container import Container
from .errors import BindingResolutionError, CircularDependencyError, ContainerError
from .inject import Inject, inject
from .registry import Binding, BindingRegistry
from .resolver import Dependency, Resolver, inspect_dependencies

__all__ = [
    "Binding",
    "BindingRegistry",
    "BindingResolutionError",
    "CircularDependencyError",
    "Container",
    "ContainerError",
    "Dependency",
    "Inject",
    "Resolver",
    "inject",
    "inspect_dependencies",
]
