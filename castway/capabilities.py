"""Detection of handlers that declare named (qualified) dependencies.

A handler type declares the named-dependency capability either with the
``named`` class decorator or by annotating a constructor parameter with a bevy
``Options`` carrying a qualifier:

```python
from bevy import Inject, Options

@named("lobby")
class LobbyHandler: ...

class RoomHandler:
    def __init__(self, store: Inject[RoomStore, Options(qualifier="rooms")]): ...
```

Handlers that declare the capability get built through the object factory when
their templated route resolves, so the qualified dependencies are injected.
"""

import logging
from collections.abc import Iterable
from typing import Any, Protocol, get_args, get_type_hints

from bevy import Options

from castway.registry import HandlerRegistration

logger = logging.getLogger(__name__)

NAMED_ATTRIBUTE = "__castway_named__"


def named(qualifier: str):
    """Class decorator that marks a handler type as depending on named collaborators."""

    def decorator(cls):
        setattr(cls, NAMED_ATTRIBUTE, qualifier)
        return cls

    return decorator


class CapabilityProbe(Protocol):
    def declares_named_dependency(self, handler_type: type) -> bool: ...


def _find_options(annotation: Any) -> Options | None:
    for item in (*getattr(annotation, "__metadata__", ()), *get_args(annotation)):
        if isinstance(item, Options):
            return item
        if item is not annotation and (options := _find_options(item)):
            return options
    return None


def named_dependencies(handler_type: type) -> dict[str, tuple[Any, str]]:
    """Maps constructor parameter names to ``(dependency type, qualifier)``.

    Raises whatever ``typing.get_type_hints`` raises for annotations it cannot
    evaluate, e.g. ``NameError`` for an unresolvable forward reference.
    """
    init = handler_type.__init__
    if init is object.__init__:
        return {}

    dependencies = {}
    for name, annotation in get_type_hints(init, include_extras=True).items():
        if name == "return":
            continue

        options = _find_options(annotation)
        qualifier = getattr(options, "qualifier", None)
        if qualifier:
            args = get_args(annotation)
            dependencies[name] = (args[0] if args else annotation, qualifier)

    return dependencies


class QualifierProbe:
    """Probe backed by the ``named`` marker and bevy ``Options`` qualifiers."""

    def declares_named_dependency(self, handler_type: type) -> bool:
        if getattr(handler_type, NAMED_ATTRIBUTE, None):
            return True
        return bool(named_dependencies(handler_type))


def handler_type(handler: Any) -> type:
    return handler if isinstance(handler, type) else type(handler)


def requires_injection(
    registrations: Iterable[HandlerRegistration], probe: CapabilityProbe
) -> bool:
    """Returns True if any registered handler declares a named dependency.

    A probe that fails is treated as "no injection needed": injection is an
    enhancement, routing works without it.
    """
    try:
        return any(
            probe.declares_named_dependency(handler_type(registration.handler))
            for registration in registrations
        )
    except Exception:
        logger.debug("Capability probe failed, injection disabled", exc_info=True)
        return False
