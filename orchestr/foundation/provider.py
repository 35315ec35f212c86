"""
Service provider base class.
"""

from typing import TYPE_CHECKING, Any, List

from ..faults import Fault, FaultDomain

if TYPE_CHECKING:
    from .application import Application


class ProviderBootError(Fault):
    """An async provider boot cannot be awaited from a synchronous call."""

    code = "ASYNC_PROVIDER_BOOT"
    domain = FaultDomain.CONTAINER

    def __init__(self, provider: str):
        super().__init__(
            message=(
                f"Provider {provider} boots asynchronously inside a running event loop; "
                f"use register_async()"
            ),
            metadata={"provider": provider},
        )


class ServiceProvider:
    """
    Registers and bootstraps a group of services.

    ``register`` binds services into the container and must not resolve
    other services. ``boot`` runs after every provider has registered and
    may resolve anything; it can be sync or async.

    Example:
        class MailServiceProvider(ServiceProvider):
            def register(self):
                self.app.singleton("mailer", lambda app: Mailer(app.make("config")))

            async def boot(self):
                await self.app.make("mailer").connect()
    """

    def __init__(self, app: "Application"):
        self.app = app

    def register(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement register()")

    def boot(self) -> Any:
        """Bootstrap services after registration. Optional."""
        return None

    def provides(self) -> List[Any]:
        """Abstracts this provider registers."""
        return []
