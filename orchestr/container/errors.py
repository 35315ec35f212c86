"""
Container-specific fault types with rich diagnostics.
"""

from typing import Any, List, Optional

from ..faults import Fault, FaultDomain


def describe(abstract: Any) -> str:
    """Render an abstract identifier for messages."""
    if isinstance(abstract, str):
        return abstract
    if isinstance(abstract, type):
        return f"{abstract.__module__}.{abstract.__qualname__}"
    return repr(abstract)


class ContainerError(Fault):
    """Base class for service container faults."""

    domain = FaultDomain.CONTAINER

    def __init__(
        self,
        message: str,
        *,
        code: str = "CONTAINER_ERROR",
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONTAINER,
            metadata=metadata,
        )


class BindingResolutionError(ContainerError):
    """An abstract could not be resolved to an instance."""

    def __init__(
        self,
        abstract: Any,
        reason: Optional[str] = None,
        *,
        parameter: Optional[str] = None,
        build_stack: Optional[List[Any]] = None,
        requires_async: bool = False,
    ):
        self.abstract = abstract
        self.parameter = parameter
        # Only make_async() can resolve it
        self.requires_async = requires_async
        self.build_stack = list(build_stack or [])

        name = describe(abstract)
        if reason is None:
            reason = f"Target [{name}] is not bound and cannot be built"

        msg = reason
        if len(self.build_stack) > 1:
            chain = " -> ".join(describe(item) for item in self.build_stack)
            msg += f"\nWhile building: {chain}"

        super().__init__(
            msg,
            code="BINDING_RESOLUTION",
            metadata={"abstract": name, "parameter": parameter},
        )


class CircularDependencyError(ContainerError):
    """Circular alias chain or self-referential constructor graph."""

    def __init__(self, chain: List[Any], *, kind: str = "dependency"):
        self.chain = list(chain)
        self.kind = kind

        names = [describe(item) for item in self.chain]
        msg = f"Circular {kind} detected: " + " -> ".join(names)

        super().__init__(
            msg,
            code="CIRCULAR_DEPENDENCY",
            metadata={"chain": names, "kind": kind},
        )
