"""
Application - the container that owns paths, environment and providers.
"""

import asyncio
import inspect
import logging
import os
import sys
from fnmatch import fnmatch
from typing import Any, Callable, List, Optional, Sequence, Type, Union

from ..container import Container
from .provider import ProviderBootError, ServiceProvider

logger = logging.getLogger("orchestr.foundation.application")

VERSION = "0.1.0"

ProviderSpec = Union[ServiceProvider, Type[ServiceProvider]]


class Application(Container):
    """
    Application container.

    Registers itself as ``"app"``, ``Application`` and ``Container`` and
    always carries the event service provider.

    Example:
        app = Application("/srv/shop")
        app.register(ConfigServiceProvider)
        app.register(ShopServiceProvider)
        await app.boot()

        app.make("events").dispatch("shop.ready")
    """

    def __init__(self, base_path: Optional[str] = None):
        super().__init__()
        self._base_path = os.path.abspath(base_path) if base_path else os.getcwd()
        self._providers: List[ServiceProvider] = []
        self._booted = False
        self._terminating_callbacks: List[Callable[[], Any]] = []
        self._event_discovery_paths: Optional[List[str]] = None
        self.facade_instances: dict = {}

        self._register_base_bindings()
        self._register_base_providers()

    def _register_base_bindings(self) -> None:
        self.instance("app", self)
        self.instance(Application, self)
        self.instance(Container, self)
        if type(self) is not Application:
            self.instance(type(self), self)

    def _register_base_providers(self) -> None:
        from ..events.provider import EventServiceProvider

        self.register(EventServiceProvider)

    # ========================================================================
    # Paths
    # ========================================================================

    def base_path(self, path: str = "") -> str:
        return os.path.join(self._base_path, path) if path else self._base_path

    def path(self, path: str = "") -> str:
        """Path to the ``app`` directory."""
        return self._join("app", path)

    def config_path(self, path: str = "") -> str:
        return self._join("config", path)

    def database_path(self, path: str = "") -> str:
        return self._join("database", path)

    def storage_path(self, path: str = "") -> str:
        return self._join("storage", path)

    def public_path(self, path: str = "") -> str:
        return self._join("public", path)

    def set_base_path(self, base_path: str) -> "Application":
        self._base_path = os.path.abspath(base_path)
        return self

    def _join(self, directory: str, path: str) -> str:
        root = os.path.join(self._base_path, directory)
        return os.path.join(root, path) if path else root

    # ========================================================================
    # Service providers
    # ========================================================================

    def register(self, provider: ProviderSpec) -> ServiceProvider:
        """
        Register a service provider.

        Args:
            provider: Provider class (instantiated with the application) or
                instance

        Returns:
            The registered provider. A provider registered twice, by
            instance or by class, returns the first registration.

        Raises:
            ProviderBootError: The application is booted, the provider boots
                asynchronously and an event loop is running
        """
        registered = self._registered_provider(provider)
        if registered is not None:
            return registered

        provider = self._add_provider(provider)
        if self._booted:
            self._boot_late_provider(provider)
        return provider

    async def register_async(self, provider: ProviderSpec) -> ServiceProvider:
        """Register a service provider, awaiting its boot if the application is booted."""
        registered = self._registered_provider(provider)
        if registered is not None:
            return registered

        provider = self._add_provider(provider)
        if self._booted:
            result = provider.boot()
            if inspect.isawaitable(result):
                await result
        return provider

    def register_providers(self, providers: Sequence[ProviderSpec]) -> List[ServiceProvider]:
        return [self.register(provider) for provider in providers]

    def get_providers(self) -> List[ServiceProvider]:
        return list(self._providers)

    def get_provider(self, provider: ProviderSpec) -> Optional[ServiceProvider]:
        return self._registered_provider(provider)

    def _registered_provider(self, provider: ProviderSpec) -> Optional[ServiceProvider]:
        cls = provider if isinstance(provider, type) else type(provider)
        for registered in self._providers:
            if registered is provider or type(registered) is cls:
                return registered
        return None

    def _add_provider(self, provider: ProviderSpec) -> ServiceProvider:
        if isinstance(provider, type):
            provider = provider(self)

        provider.register()
        self._providers.append(provider)
        logger.debug("Registered provider %s", type(provider).__name__)
        return provider

    def _boot_late_provider(self, provider: ServiceProvider) -> None:
        result = provider.boot()
        if not inspect.isawaitable(result):
            return

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(_await(result))
            return

        if inspect.iscoroutine(result):
            result.close()
        # Unregistered so register_async() can boot it
        self._providers.remove(provider)
        raise ProviderBootError(type(provider).__name__)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def boot(self) -> None:
        """Boot every registered provider once, in registration order."""
        if self._booted:
            return

        for provider in list(self._providers):
            result = provider.boot()
            if inspect.isawaitable(result):
                await result

        self._booted = True
        logger.info("Application booted with %d provider(s)", len(self._providers))

    def is_booted(self) -> bool:
        return self._booted

    def terminating(self, callback: Callable[[], Any]) -> "Application":
        self._terminating_callbacks.append(callback)
        return self

    def terminate(self) -> None:
        """Run terminating callbacks in registration order."""
        for callback in self._terminating_callbacks:
            result = callback()
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise RuntimeError("Async terminating callback; use terminate_async()")

    async def terminate_async(self) -> None:
        for callback in self._terminating_callbacks:
            result = callback()
            if inspect.isawaitable(result):
                await result

    # ========================================================================
    # Environment
    # ========================================================================

    def version(self) -> str:
        return VERSION

    def environment_file(self) -> str:
        return ".env"

    def environment(self, *names: str) -> Union[str, bool]:
        """
        Current environment name from ``APP_ENV``.

        With names, returns whether the environment matches any of them
        (shell-style patterns allowed).
        """
        current = os.environ.get("APP_ENV", "production")
        if not names:
            return current
        return any(fnmatch(current, name) for name in names)

    def running_in_console(self) -> bool:
        flag = os.environ.get("APP_RUNNING_IN_CONSOLE")
        if flag is not None:
            return flag.lower() in ("1", "true", "yes")
        return sys.stdin is not None and sys.stdin.isatty()

    # ========================================================================
    # Event discovery
    # ========================================================================

    def with_events(self, discover: Optional[Sequence[str]] = None) -> "Application":
        """Set the directories scanned for event listeners."""
        self._event_discovery_paths = list(discover) if discover is not None else None
        return self

    def get_event_discovery_paths(self) -> List[str]:
        if self._event_discovery_paths is None:
            return [self.path("Listeners")]
        return list(self._event_discovery_paths)


async def _await(awaitable: Any) -> Any:
    return await awaitable
