from typing import Any
from urllib.parse import parse_qs

from castway.exceptions import PathInfoUnavailable


class Request:
    """Read-only view over an ASGI connection scope.

    ``base_path`` is the mount prefix (``root_path``) and ``path_info`` the part of
    the path below it. Some ASGI servers do not include ``root_path`` in ``path``
    or omit ``path`` altogether; ``path_info`` then raises ``PathInfoUnavailable``
    instead of guessing.
    """

    def __init__(self, scope: dict[str, Any]):
        if scope.get("type") not in ("http", "websocket"):
            raise RuntimeError("Request only supports HTTP and WebSocket scopes")

        self.scope = scope
        self.attributes: dict[str, Any] = {}
        self.path_params: dict[str, Any] = {}

    @property
    def path(self) -> str:
        return self.scope.get("path", "")

    @property
    def base_path(self) -> str:
        return self.scope.get("root_path", "")

    @property
    def path_info(self) -> str:
        if "path" not in self.scope:
            raise PathInfoUnavailable("Connection scope carries no path")

        path = self.scope["path"]
        base_path = self.base_path
        if not path.startswith(base_path):
            raise PathInfoUnavailable(
                f"Path {path!r} is not below root path {base_path!r}"
            )
        return path[len(base_path) :]

    @property
    def query_string(self) -> str:
        return self.scope.get("query_string", b"").decode("utf-8")

    @property
    def query_params(self) -> dict:
        return {k: v if len(v) > 1 else v[0] for k, v in parse_qs(self.query_string).items()}

    @property
    def headers(self) -> dict:
        return {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in self.scope.get("headers", [])
        }

    def __repr__(self) -> str:
        return f"<Request {self.scope.get('type')} {self.path!r}>"
