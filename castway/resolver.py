from typing import Protocol

from castway.exceptions import PathInfoUnavailable


class PathSource(Protocol):
    """The request accessors the resolver reads."""

    @property
    def base_path(self) -> str: ...

    @property
    def path_info(self) -> str: ...


def resolve_path(request: PathSource) -> str:
    """Computes the concrete path a request addresses.

    The base path and path info are concatenated. A transport that cannot
    supply path info contributes nothing, and an empty result becomes ``/``.

    Examples:
        >>> resolve_path(request)  # base_path="/chat", path_info="/room1"
        '/chat/room1'
    """
    try:
        path_info = request.path_info
    except PathInfoUnavailable:
        path_info = None

    base_path = request.base_path or ""
    path = base_path + path_info if path_info is not None else base_path
    return path or "/"
