"""Handler registrations and the lock-disciplined table that stores them."""

import dataclasses
import threading
from dataclasses import dataclass
from typing import Any

from castway.channels import Channel
from castway.templates import is_templated


@dataclass(frozen=True)
class HandlerRegistration:
    """Associates a route key with a handler and the channel it broadcasts on.

    Registrations are immutable. Rebinding a registration to another channel
    produces a new object that is swapped into the ``HandlerRegistry``, so
    readers see either the old or the new registration, never a mix.
    """

    route: str
    handler: Any
    channel: Channel

    @property
    def templated(self) -> bool:
        return is_templated(self.route)

    def bind(self, channel: Channel, route: str | None = None, handler: Any = None) -> "HandlerRegistration":
        changes: dict[str, Any] = {"channel": channel}
        if route is not None:
            changes["route"] = route
        if handler is not None:
            changes["handler"] = handler
        return dataclasses.replace(self, **changes)


class HandlerRegistry:
    """Thread-safe route key to registration table."""

    def __init__(self):
        self._registrations: dict[str, HandlerRegistration] = {}
        self._lock = threading.RLock()

    def insert(self, registration: HandlerRegistration) -> None:
        with self._lock:
            self._registrations[registration.route] = registration

    def insert_if_absent(
        self, registration: HandlerRegistration
    ) -> tuple[HandlerRegistration, bool]:
        """Inserts unless the route is taken. Returns the stored registration and whether it was inserted."""
        with self._lock:
            existing = self._registrations.get(registration.route)
            if existing is not None:
                return existing, False

            self._registrations[registration.route] = registration
            return registration, True

    def replace(
        self,
        route: str,
        expected: HandlerRegistration,
        new: HandlerRegistration,
    ) -> bool:
        """Compare-and-swap: stores ``new`` only if ``expected`` is still the registration for the route."""
        with self._lock:
            if self._registrations.get(route) is not expected:
                return False

            self._registrations[route] = new
            return True

    def remove(self, route: str) -> HandlerRegistration | None:
        with self._lock:
            return self._registrations.pop(route, None)

    def lookup(self, route: str) -> HandlerRegistration | None:
        with self._lock:
            return self._registrations.get(route)

    def routes(self) -> list[str]:
        with self._lock:
            return list(self._registrations)

    def items(self) -> list[tuple[str, HandlerRegistration]]:
        with self._lock:
            return list(self._registrations.items())

    def values(self) -> list[HandlerRegistration]:
        with self._lock:
            return list(self._registrations.values())

    def __contains__(self, route: object) -> bool:
        with self._lock:
            return route in self._registrations

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)
