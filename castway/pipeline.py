import logging
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from castway.framework import Framework

logger = logging.getLogger(__name__)


class Action(Enum):
    CONTINUE = "continue"
    SUSPEND = "suspend"
    CANCELLED = "cancelled"


class Priority(IntEnum):
    """Execution order of interceptors; lower values run first."""

    FIRST_BEFORE_DEFAULT = 0
    BEFORE_DEFAULT = 1
    DEFAULT = 2
    AFTER_DEFAULT = 3


class Interceptor:
    """Base type for a step in the request-processing pipeline.

    Subclasses override ``inspect`` and optionally ``configure``, which runs once
    with the framework before any request is processed.
    """

    priority: Priority = Priority.DEFAULT

    def configure(self, framework: "Framework") -> None:
        pass

    def inspect(self, request: Any) -> Action:
        return Action.CONTINUE

    def __repr__(self) -> str:
        return f"<{type(self).__name__} priority={self.priority.name}>"


class InterceptorChain:
    """Runs interceptors in priority order until one stops the request.

    Interceptors with the same priority keep the order they were added in.
    Exceptions raised by an interceptor propagate to the caller unchanged.

    Examples:
        ```python
        chain = InterceptorChain()
        chain.add(RouteMatchInterceptor())
        chain.add(TemplateInterceptor())
        chain.configure(framework)

        action = chain.invoke(Request(scope))
        ```
    """

    def __init__(self):
        self._interceptors: list[Interceptor] = []

    @property
    def interceptors(self) -> list[Interceptor]:
        return list(self._interceptors)

    def add(self, interceptor: Interceptor) -> None:
        self._interceptors.append(interceptor)
        self._interceptors.sort(key=lambda i: i.priority)

    def configure(self, framework: "Framework") -> None:
        for interceptor in self._interceptors:
            interceptor.configure(framework)

    def invoke(self, request: Any) -> Action:
        for interceptor in self._interceptors:
            action = interceptor.inspect(request)
            if action is not Action.CONTINUE:
                logger.debug(f"{interceptor!r} stopped {request!r} with {action.name}")
                return action

        return Action.CONTINUE
