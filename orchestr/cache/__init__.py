"""
Orchestr Cache - events fired by cache stores.
"""

from .events import CacheFlushed, CacheHit, CacheMissed, KeyForgotten, KeyWritten

__all__ = ["CacheFlushed", "CacheHit", "CacheMissed", "KeyForgotten", "KeyWritten"]
