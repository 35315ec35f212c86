"""
Orchestr Foundation - application container, service providers and config.
"""

from .application import Application
from .config import Config, ConfigError, ConfigLoader, ConfigServiceProvider
from .provider import ProviderBootError, ServiceProvider

__all__ = [
    "Application",
    "Config",
    "ConfigError",
    "ConfigLoader",
    "ConfigServiceProvider",
    "ProviderBootError",
    "ServiceProvider",
]
