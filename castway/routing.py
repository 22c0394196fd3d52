"""Default request-to-route matching.

Route keys support exact matches and path parameters with optional type hints:
``{param}``, ``{param:int}`` and ``{param:path}``. Parameters may be embedded in
a segment (``v{version:int}``) and ``path`` parameters consume several segments.
"""

import logging
import re
from typing import Any

from castway.pipeline import Action, Interceptor, Priority
from castway.registry import HandlerRegistration
from castway.strategies import bind_request

logger = logging.getLogger(__name__)

_PARAM_PATTERN = re.compile(r"\{([^}]+)\}")


def match_path(request_path: str, path_pattern: str) -> dict[str, Any] | None:
    """Performs path matching against a pattern.

    Returns:
        A dict of path parameters if matched, else None.

    Examples:
        >>> match_path("/room/42", "/room/{id:int}")
        {'id': 42}

        >>> match_path("/files/docs/readme.txt", "/files/{path:path}")
        {'path': 'docs/readme.txt'}
    """
    pattern_parts = path_pattern.strip("/").split("/")
    request_parts = request_path.strip("/").split("/")

    if any("{" in part and ":path}" in part for part in pattern_parts):
        return match_path_with_path_type(pattern_parts, request_parts)

    if len(pattern_parts) != len(request_parts):
        return None

    params = {}
    for p_part, r_part in zip(pattern_parts, request_parts, strict=True):
        if "{" in p_part and "}" in p_part:
            result = match_segment_with_params(p_part, r_part)
            if result is None:
                return None
            params.update(result)
        elif p_part != r_part:
            return None

    return params


def _split_spec(param_spec: str) -> tuple[str, str | None]:
    if ":" in param_spec:
        name, param_type = param_spec.split(":", 1)
        return name, param_type
    return param_spec, None


def _convert(value: str, param_type: str | None) -> Any:
    if param_type == "int":
        return int(value)
    return value


def match_segment_with_params(
    pattern_segment: str, request_segment: str
) -> dict[str, Any] | None:
    """Match a single path segment that may contain embedded parameters.

    Examples:
        >>> match_segment_with_params("v{version:int}", "v2")
        {'version': 2}
    """
    regex_parts = []
    specs = []
    last_end = 0
    for match in _PARAM_PATTERN.finditer(pattern_segment):
        name, param_type = _split_spec(match.group(1))
        specs.append((name, param_type))
        regex_parts.append(re.escape(pattern_segment[last_end : match.start()]))
        if param_type == "int":
            regex_parts.append(r"(\d+)")
        elif param_type == "path":
            regex_parts.append(r"(.+)")
        else:
            regex_parts.append(r"([^/]+)")
        last_end = match.end()
    regex_parts.append(re.escape(pattern_segment[last_end:]))

    match = re.fullmatch("".join(regex_parts), request_segment)
    if not match:
        return None

    try:
        return {
            name: _convert(value, param_type)
            for (name, param_type), value in zip(specs, match.groups(), strict=True)
        }
    except ValueError:
        return None


def match_path_with_path_type(
    pattern_parts: list[str], request_parts: list[str]
) -> dict[str, Any] | None:
    """Handle patterns with ``{param:path}`` parameters that consume multiple segments."""
    params = {}
    pattern_idx = 0
    request_idx = 0

    while pattern_idx < len(pattern_parts) and request_idx < len(request_parts):
        p_part = pattern_parts[pattern_idx]

        if p_part.startswith("{") and p_part.endswith("}"):
            name, param_type = _split_spec(p_part[1:-1])
            if param_type == "path":
                remaining_pattern = len(pattern_parts) - pattern_idx - 1
                segments_to_consume = len(request_parts) - request_idx - remaining_pattern
                if segments_to_consume < 1:
                    return None
                params[name] = "/".join(
                    request_parts[request_idx : request_idx + segments_to_consume]
                )
                request_idx += segments_to_consume
            else:
                try:
                    params[name] = _convert(request_parts[request_idx], param_type)
                except ValueError:
                    return None
                request_idx += 1
        elif "{" in p_part and "}" in p_part:
            result = match_segment_with_params(p_part, request_parts[request_idx])
            if result is None:
                return None
            params.update(result)
            request_idx += 1
        else:
            if p_part != request_parts[request_idx]:
                return None
            request_idx += 1

        pattern_idx += 1

    if pattern_idx == len(pattern_parts) and request_idx == len(request_parts):
        return params

    return None


class RouteMatchInterceptor(Interceptor):
    """Associates each request with the registration its path matches.

    Exact routes win over templated ones; templated routes are tried in
    registration order. The match is stored in the request's ``registration``
    and ``channel`` attributes and its parameters in ``request.path_params``.
    """

    priority = Priority.DEFAULT

    def configure(self, framework) -> None:
        self.framework = framework

    def match(self, path: str) -> tuple[HandlerRegistration, dict[str, Any]] | None:
        handlers = self.framework.handlers
        exact = handlers.lookup(path)
        if exact is not None:
            return exact, {}

        for registration in handlers.values():
            if not registration.templated:
                continue
            params = match_path(path, registration.route)
            if params is not None:
                return registration, params

        return None

    def inspect(self, request) -> Action:
        matched = self.match(request.path)
        if matched is None:
            logger.debug(f"No registration matches {request.path!r}")
            return Action.CONTINUE

        registration, params = matched
        request.path_params = params
        bind_request(request, registration)
        return Action.CONTINUE
