"""Detection of templated route keys.

A route key is templated when it contains both a ``{`` and a ``}`` anywhere in
the string. Variable-name syntax is not validated here: ``/room/{id}``,
``/v{version:int}`` and even ``/}{`` all count as templated.
"""

from collections.abc import Iterable

TEMPLATE_OPEN = "{"
TEMPLATE_CLOSE = "}"


def is_templated(route: str) -> bool:
    """Returns True when the route key contains both template delimiters.

    Examples:
        >>> is_templated("/room/{id}")
        True

        >>> is_templated("/chat")
        False
    """
    return TEMPLATE_OPEN in route and TEMPLATE_CLOSE in route


def is_placeholder(channel_id: str) -> bool:
    """Returns True when a channel id still carries an unresolved template marker."""
    return TEMPLATE_OPEN in channel_id


def has_templates(routes: Iterable[str]) -> bool:
    """Scans route keys and returns True on the first templated one.

    An empty collection yields False.
    """
    return any(is_templated(route) for route in routes)
