"""
Queue worker events.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class JobProcessing:
    """Fired before a worker processes a job."""

    connection_name: str
    job: Any


@dataclass(frozen=True)
class JobProcessed:
    """Fired after a job was processed successfully."""

    connection_name: str
    job: Any
