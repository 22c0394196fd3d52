"""Remapping strategies.

``ForkingStrategy`` keeps the templated registration in place and adds one
concrete registration per resolved path, so later requests for that path are
routed straight to it. ``RebindStrategy`` instead swaps the templated
registration onto the first concrete channel it resolves to.
"""

import logging
from typing import TYPE_CHECKING, Any

from castway.capabilities import handler_type
from castway.exceptions import RemapError
from castway.registry import HandlerRegistration
from castway.templates import is_placeholder

if TYPE_CHECKING:
    from castway.framework import Framework

logger = logging.getLogger(__name__)

REGISTRATION = "registration"
CHANNEL = "channel"


def bind_request(request: Any, registration: HandlerRegistration) -> None:
    request.attributes[REGISTRATION] = registration
    request.attributes[CHANNEL] = registration.channel


class ForkingStrategy:
    def __init__(self, framework: "Framework"):
        self.framework = framework

    def remap(
        self,
        retired: bool,
        path: str,
        request: Any,
        registration: HandlerRegistration,
    ) -> HandlerRegistration:
        handlers = self.framework.handlers

        concrete = handlers.lookup(path)
        if concrete is None:
            # A failed build must not leave a channel behind.
            handler = self.create_handler(registration)
            channel, _ = self.framework.channels.get_or_create(path)
            concrete, inserted = handlers.insert_if_absent(HandlerRegistration(path, handler, channel))
            if inserted:
                logger.debug(f"Registered {path!r} from template {registration.route!r}")

        bind_request(request, concrete)
        return concrete

    def create_handler(self, registration: HandlerRegistration) -> Any:
        factory = self.framework.object_factory
        if self.framework.injection_required and factory is not None:
            return factory.create(handler_type(registration.handler))
        return registration.handler


class RebindStrategy:
    """Collapses a templated registration onto the first channel it resolves to.

    Whichever request swaps first wins; every later request for the template,
    whatever its path, is bound to the winner's channel. A channel created by
    a request that lost the swap is removed again.

    Raises:
        RemapError: The templated registration is no longer in the handler registry.
    """

    def __init__(self, framework: "Framework"):
        self.framework = framework

    def remap(
        self,
        retired: bool,
        path: str,
        request: Any,
        registration: HandlerRegistration,
    ) -> HandlerRegistration:
        handlers = self.framework.handlers
        channels = self.framework.channels

        current = self.current(registration, path)
        if not is_placeholder(current.channel.id):
            bind_request(request, current)
            return current

        channel, created = channels.get_or_create(path)
        rebound = current.bind(channel)
        if handlers.replace(current.route, current, rebound):
            logger.debug(f"Rebound {current.route!r} to channel {path!r}")
            current = rebound
        else:
            current = self.current(registration, path)
            if created and current.channel is not channel:
                channels.remove(path)
                logger.debug(f"Lost the rebind of {current.route!r}, dropped channel {path!r}")

        bind_request(request, current)
        return current

    def current(self, registration: HandlerRegistration, path: str) -> HandlerRegistration:
        stored = self.framework.handlers.lookup(registration.route)
        if stored is None:
            raise RemapError(
                f"Route {registration.route!r} is no longer registered",
                route=registration.route,
                path=path,
            )
        return stored
