"""
Cache store events.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class CacheHit:
    store_name: str
    key: str
    value: Any
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CacheMissed:
    store_name: str
    key: str
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class KeyWritten:
    store_name: str
    key: str
    value: Any
    # None means the key never expires
    seconds: Optional[int] = None
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class KeyForgotten:
    store_name: str
    key: str
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CacheFlushed:
    store_name: str
    tags: List[str] = field(default_factory=list)
