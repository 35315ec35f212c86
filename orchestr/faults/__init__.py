"""
Orchestr Faults - structured error types.

Every error raised by the container, dispatcher, facades and configuration
layer is a Fault: an exception carrying a stable code, a domain, a severity
and diagnostic metadata.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
"""

from .core import (
    DOMAIN_DEFAULTS,
    Fault,
    FaultDomain,
    Severity,
)

__all__ = [
    "DOMAIN_DEFAULTS",
    "Fault",
    "FaultDomain",
    "Severity",
]
