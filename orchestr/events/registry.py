"""
Listener registry - event pattern → ordered listeners.

Exact names and wildcard patterns live in separate buckets. A ``*`` in a
pattern matches any run of characters, dots included, so ``"user.*"``
matches ``"user.created"`` and ``"user.updated.profile"`` and ``"*"``
matches every event.
"""

import re
from collections import OrderedDict
from typing import Any, Dict, List, Pattern

# Concrete event names whose listener lists are memoised
CACHE_SIZE = 1024


def is_wildcard(pattern: str) -> bool:
    return "*" in pattern


def compile_pattern(pattern: str) -> Pattern[str]:
    """Translate a wildcard pattern into an anchored regex."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


class ListenerRegistry:
    """
    Stores listeners per pattern in registration order.

    Lookups for the most recent concrete event names are memoised; any
    mutation clears the memo.
    """

    __slots__ = ("_listeners", "_wildcards", "_compiled", "_cache")

    def __init__(self):
        self._listeners: Dict[str, List[Any]] = {}
        self._wildcards: Dict[str, List[Any]] = {}
        self._compiled: Dict[str, Pattern[str]] = {}
        self._cache: "OrderedDict[str, List[Any]]" = OrderedDict()

    def add(self, pattern: str, listener: Any) -> None:
        if is_wildcard(pattern):
            if pattern not in self._compiled:
                self._compiled[pattern] = compile_pattern(pattern)
            self._wildcards.setdefault(pattern, []).append(listener)
        else:
            self._listeners.setdefault(pattern, []).append(listener)
        self._cache.clear()

    def forget(self, pattern: str) -> None:
        """Remove listeners registered under exactly ``pattern``."""
        self._listeners.pop(pattern, None)
        self._wildcards.pop(pattern, None)
        self._compiled.pop(pattern, None)
        self._cache.clear()

    def matches(self, pattern: str, event_name: str) -> bool:
        if not is_wildcard(pattern):
            return pattern == event_name
        compiled = self._compiled.get(pattern) or compile_pattern(pattern)
        return compiled.fullmatch(event_name) is not None

    def listeners_for(self, event_name: str) -> List[Any]:
        """Exact listeners in order, then matching wildcard listeners in order."""
        cached = self._cache.get(event_name)
        if cached is not None:
            self._cache.move_to_end(event_name)
            return list(cached)

        found = list(self._listeners.get(event_name, ()))
        for pattern, listeners in self._wildcards.items():
            if self._compiled[pattern].fullmatch(event_name):
                found.extend(listeners)

        self._cache[event_name] = found
        if len(self._cache) > CACHE_SIZE:
            self._cache.popitem(last=False)
        return list(found)

    def has(self, event_name: str) -> bool:
        if self._listeners.get(event_name):
            return True
        return any(
            self._compiled[pattern].fullmatch(event_name)
            for pattern, listeners in self._wildcards.items()
            if listeners
        )

    def raw(self) -> Dict[str, List[Any]]:
        """Copy of every pattern and its listeners."""
        raw = {name: list(listeners) for name, listeners in self._listeners.items()}
        raw.update({name: list(listeners) for name, listeners in self._wildcards.items()})
        return raw

    def clear(self) -> None:
        self._listeners.clear()
        self._wildcards.clear()
        self._compiled.clear()
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._listeners) + len(self._wildcards)
