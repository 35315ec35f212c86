"""
Orchestr Support - facades.
"""

from .errors import FacadeRootUnavailableError
from .facade import Facade, FacadeMeta, create_facade
from .facades import App, Config, Events

__all__ = [
    "App",
    "Config",
    "Events",
    "Facade",
    "FacadeMeta",
    "FacadeRootUnavailableError",
    "create_facade",
]
