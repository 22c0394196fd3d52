"""
Helper utilities for tests.
"""

from typing import Any

from castway.requests import Request


def create_scope(
    path: str = "/",
    root_path: str = "",
    scope_type: str = "websocket",
    query_string: str = "",
) -> dict[str, Any]:
    """Create an ASGI connection scope. ``path`` includes ``root_path`` as ASGI requires."""
    return {
        "type": scope_type,
        "path": root_path + path,
        "root_path": root_path,
        "query_string": query_string.encode(),
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 12345),
    }


def create_request(path: str = "/", root_path: str = "", **kwargs) -> Request:
    return Request(create_scope(path, root_path, **kwargs))


class RoomHandler:
    """Handler double that records the requests it was asked to process."""

    def __init__(self):
        self.requests = []

    def __call__(self, request, registration):
        self.requests.append((request, registration))


class RecordingStrategy:
    """Strategy double that records every call and returns the registration unchanged."""

    def __init__(self):
        self.calls = []

    def remap(self, retired, path, request, registration):
        self.calls.append((retired, path, request, registration))
        return registration
