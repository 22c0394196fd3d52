import logging
from typing import TYPE_CHECKING, Any

from castway.capabilities import requires_injection
from castway.pipeline import Action, Interceptor, Priority
from castway.remapper import ChannelRemapper, RemapStrategy
from castway.resolver import resolve_path
from castway.strategies import REGISTRATION, ForkingStrategy
from castway.templates import has_templates

if TYPE_CHECKING:
    from castway.framework import Framework

logger = logging.getLogger(__name__)


class TemplateInterceptor(Interceptor):
    """Resolves templated registrations into concrete channels as requests arrive.

    ``configure`` scans the registered routes once. Without any templated route
    the interceptor stays inert for the lifetime of the configuration and
    ``inspect`` returns immediately. With templates it resolves the request's
    path and remaps the matched registration on every request. It always
    returns ``Action.CONTINUE``; strategy failures propagate to the caller.

    It runs after the default route matching step, which attaches the matched
    registration to the request.
    """

    priority = Priority.AFTER_DEFAULT

    def __init__(self, strategy: RemapStrategy | None = None):
        self.strategy = strategy
        self.templated = False
        self.remapper: ChannelRemapper | None = None

    def configure(self, framework: "Framework") -> None:
        self.framework = framework
        self.templated = has_templates(framework.handlers.routes())
        if not self.templated:
            logger.debug("No templated routes registered, template resolution disabled")
            return

        if framework.object_factory is not None and framework.probe is not None:
            framework.injection_required = requires_injection(
                framework.handlers.values(), framework.probe
            )

        strategy = self.strategy or ForkingStrategy(framework)
        self.remapper = ChannelRemapper(framework.channels, strategy)
        logger.info(
            f"Templated routes detected, resolving with {type(strategy).__name__}"
            f" (injection {'enabled' if framework.injection_required else 'disabled'})"
        )

    def inspect(self, request: Any) -> Action:
        if not self.templated:
            return Action.CONTINUE

        registration = request.attributes.get(REGISTRATION)
        if registration is not None:
            self.remapper.remap(registration, resolve_path(request), request)

        return Action.CONTINUE
