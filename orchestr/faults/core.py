"""
Orchestr Faults - Core types and fault taxonomy.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (explicit fault domains)
- Severity levels
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines the logging level a fault is reported with.
    """
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    Can be one of the standard domains or a custom domain.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")
FaultDomain.CONTAINER = FaultDomain("container", "Service container errors")
FaultDomain.EVENTS = FaultDomain("events", "Event dispatcher errors")
FaultDomain.SUPPORT = FaultDomain("support", "Facade and helper errors")


DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.CONTAINER: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.EVENTS: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.SUPPORT: {"severity": Severity.ERROR, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    A fault carries:
    - Stable machine-readable code
    - Human-readable message
    - Severity level
    - Domain classification
    - Retry semantics
    - Metadata for diagnostics

    Subclasses may declare ``code``, ``message`` and ``domain`` as class
    attributes instead of passing them on every raise.

    Example:
        ```python
        raise Fault(
            code="BINDING_RESOLUTION",
            message="Target [mailer] is not bound",
            domain=FaultDomain.CONTAINER,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        # Fallback to class attributes if not provided
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or defaults["severity"]
        self.retryable = retryable if retryable is not None else defaults["retryable"]
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize fault to dictionary.

        Returns:
            Dictionary representation suitable for logging/serialization
        """
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "metadata": self.metadata,
        }
