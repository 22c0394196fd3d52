import logging
from typing import Any, Protocol

from bevy import DependencyResolutionError, get_registry
from bevy.containers import Container

from castway.exceptions import InjectionError

logger = logging.getLogger(__name__)


class ObjectFactory(Protocol):
    def create(self, handler_type: type) -> Any: ...


class ContainerObjectFactory:
    """Builds handler instances through a bevy container.

    The container resolves the constructor's ``Inject[T, Options(qualifier=...)]``
    parameters. A dependency the container cannot supply, or a constructor that
    cannot be called with what was injected, is reported as ``InjectionError``.

    Examples:
        ```python
        container = get_registry().create_container()
        container.add(RoomStore, RoomStore(), qualifier="rooms")

        factory = ContainerObjectFactory(container)
        handler = factory.create(RoomHandler)
        ```
    """

    def __init__(self, container: Container | None = None):
        self.container = container if container is not None else get_registry().create_container()

    def create(self, handler_type: type) -> Any:
        logger.debug(f"Creating {handler_type.__qualname__} through the container")
        try:
            return self.container.call(handler_type)
        except (DependencyResolutionError, TypeError) as e:
            raise InjectionError(
                f"Unable to build {handler_type.__qualname__}: {e}",
                target=handler_type,
                dependency=getattr(e, "dependency", None),
            ) from e
