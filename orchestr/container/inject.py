"""
Injection metadata marker for parameters the container cannot infer.
"""

from dataclasses import dataclass
from typing import Any, Optional, Type


@dataclass(frozen=True)
class Inject:
    """
    Injection metadata marker.

    Names the abstract to resolve for a parameter whose annotation alone does
    not identify a binding (string keys, primitives, protocols).

    Usage:
        class Mailer:
            def __init__(self, dsn: Annotated[str, Inject("mail.dsn")]):
                ...
    """

    abstract: Optional[Type | str] = None
    optional: bool = False


def inject(abstract: Optional[Type | str] = None, *, optional: bool = False) -> Inject:
    """
    Create injection metadata.

    Args:
        abstract: Explicit abstract (inferred from the type hint if None)
        optional: If True, inject None when the abstract cannot be resolved
    """
    return Inject(abstract=abstract, optional=optional)


def find_inject(metadata: tuple[Any, ...]) -> Optional[Inject]:
    """Return the first Inject marker in Annotated metadata."""
    for meta in metadata:
        if isinstance(meta, Inject):
            return meta
    return None
