import logging
from typing import Any, Protocol

from castway.channels import ChannelRegistry
from castway.registry import HandlerRegistration
from castway.templates import is_placeholder

logger = logging.getLogger(__name__)


class RemapStrategy(Protocol):
    """Rewrites a templated registration once its route has been resolved.

    Implementations obtain or create the concrete channel for ``path`` and
    update the handler registry. They return the registration the request
    ends up bound to, and raise to signal failure; nothing in the remapping
    path catches the error.
    """

    def remap(
        self,
        retired: bool,
        path: str,
        request: Any,
        registration: HandlerRegistration,
    ) -> HandlerRegistration: ...


class ChannelRemapper:
    """Retires placeholder channels and hands resolved registrations to a strategy.

    A registration whose channel is already concrete is returned untouched:
    no removal is attempted and the strategy is not called. Otherwise the
    placeholder is removed from the channel registry before the strategy runs,
    so nothing can subscribe to the stale id afterwards. ``retired`` tells the
    strategy whether this call is the one that removed it; concurrent calls for
    the same placeholder see ``False``.
    """

    def __init__(self, channels: ChannelRegistry, strategy: RemapStrategy):
        self.channels = channels
        self.strategy = strategy

    def remap(
        self, registration: HandlerRegistration, path: str, request: Any
    ) -> HandlerRegistration:
        placeholder = registration.channel.id
        if not is_placeholder(placeholder):
            return registration

        retired = self.channels.remove(placeholder)
        if retired:
            logger.info(f"Retired placeholder channel {placeholder!r} while resolving {path!r}")

        return self.strategy.remap(retired, path, request, registration)
