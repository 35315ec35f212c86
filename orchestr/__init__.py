"""
Orchestr - service container and event dispatcher.

Key Features:
- Service container with reflection-driven constructor injection
- Shared and transient bindings, instances and transitive aliases
- Event dispatcher with wildcards, halting, push/flush and async dispatch
- Application container with service providers and facades
- Layered configuration (YAML/JSON files, .env, environment variables)
"""

__version__ = "0.1.0"

from .container import (
    BindingResolutionError,
    CircularDependencyError,
    Container,
    ContainerError,
    Inject,
    inject,
)
from .events import (
    AsyncListenerError,
    Dispatcher,
    DispatcherContract,
    Event,
    InvalidListenerError,
    NullDispatcher,
    PendingDispatch,
)
from .faults import Fault, FaultDomain, Severity
from .foundation import Application, Config, ConfigLoader, ConfigServiceProvider, ServiceProvider
from .support import Facade, FacadeRootUnavailableError, create_facade

__all__ = [
    "Application",
    "AsyncListenerError",
    "BindingResolutionError",
    "CircularDependencyError",
    "Config",
    "ConfigLoader",
    "ConfigServiceProvider",
    "Container",
    "ContainerError",
    "Dispatcher",
    "DispatcherContract",
    "Event",
    "Facade",
    "FacadeRootUnavailableError",
    "Fault",
    "FaultDomain",
    "InvalidListenerError",
    "Inject",
    "NullDispatcher",
    "PendingDispatch",
    "ServiceProvider",
    "Severity",
    "create_facade",
    "inject",
    "__version__",
]
