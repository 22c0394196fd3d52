import logging
from typing import Any

from bevy.containers import Container

from castway.capabilities import CapabilityProbe, QualifierProbe
from castway.channels import ChannelRegistry
from castway.config import DEFAULT_STRATEGY, CastwayConfig, instantiate_entry
from castway.injection import ContainerObjectFactory, ObjectFactory
from castway.interceptor import TemplateInterceptor
from castway.pipeline import InterceptorChain
from castway.registry import HandlerRegistration, HandlerRegistry
from castway.routing import RouteMatchInterceptor

logger = logging.getLogger(__name__)


class Framework:
    """Owns the channel and handler registries and the optional injection collaborators.

    Handlers are registered first; ``create_pipeline`` then configures the
    interceptors against the complete registration set. Registering each route
    creates a channel whose id is the route key, which for templated routes
    is a placeholder until a request resolves it.

    Examples:
        ```python
        framework = Framework()
        framework.add_handler("/chat", ChatHandler())
        framework.add_handler("/room/{id}", RoomHandler())

        pipeline = framework.create_pipeline()
        pipeline.invoke(Request(scope))
        ```

    Args:
        object_factory: Builds handler instances with injected dependencies.
            When absent, resolved routes reuse the templated handler.
        probe: Detects handlers that declare named dependencies. Only consulted
            when an object factory is present.
    """

    def __init__(
        self,
        channels: ChannelRegistry | None = None,
        handlers: HandlerRegistry | None = None,
        object_factory: ObjectFactory | None = None,
        probe: CapabilityProbe | None = None,
    ):
        self.channels = channels if channels is not None else ChannelRegistry()
        self.handlers = handlers if handlers is not None else HandlerRegistry()
        self.object_factory = object_factory
        self.probe = probe
        self.injection_required = False

    @classmethod
    def from_config(
        cls, config: CastwayConfig, container: Container | None = None
    ) -> "Framework":
        injection = config.get("injection") or {}
        if not injection.get("enabled", False):
            return cls()

        return cls(object_factory=ContainerObjectFactory(container), probe=QualifierProbe())

    def add_handler(self, route: str, handler: Any) -> HandlerRegistration:
        channel, _ = self.channels.get_or_create(route)
        registration = HandlerRegistration(route, handler, channel)
        self.handlers.insert(registration)
        return registration

    def create_pipeline(self, config: CastwayConfig | None = None) -> InterceptorChain:
        config = config or {}
        chain = InterceptorChain()
        chain.add(RouteMatchInterceptor())

        strategy = instantiate_entry(
            config.get("strategy") or {"entry": DEFAULT_STRATEGY}, framework=self
        )
        chain.add(TemplateInterceptor(strategy))

        for entry in config.get("interceptors", []):
            chain.add(instantiate_entry(entry))

        chain.configure(self)
        logger.debug(f"Configured pipeline {chain.interceptors}")
        return chain
