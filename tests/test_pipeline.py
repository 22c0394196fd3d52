from unittest.mock import MagicMock

import pytest

from castway.pipeline import Action, Interceptor, InterceptorChain, Priority
from tests.helpers import create_request


class Recording(Interceptor):
    def __init__(self, name, log, priority=Priority.DEFAULT, action=Action.CONTINUE):
        self.name = name
        self.log = log
        self.priority = priority
        self.action = action

    def configure(self, framework):
        self.log.append(f"configure {self.name}")

    def inspect(self, request):
        self.log.append(self.name)
        return self.action


class TestInterceptorChain:
    """Test ordering and short-circuiting in the interceptor chain."""

    def test_runs_in_priority_order(self):
        """Test interceptors run in priority order."""
        log = []
        chain = InterceptorChain()
        chain.add(Recording("after", log, Priority.AFTER_DEFAULT))
        chain.add(Recording("default", log))
        chain.add(Recording("first", log, Priority.FIRST_BEFORE_DEFAULT))
        chain.add(Recording("before", log, Priority.BEFORE_DEFAULT))

        assert chain.invoke(create_request()) is Action.CONTINUE
        assert log == ["first", "before", "default", "after"]

    def test_same_priority_keeps_insertion_order(self):
        """Test equal priorities run in insertion order."""
        log = []
        chain = InterceptorChain()
        for name in ("a", "b", "c"):
            chain.add(Recording(name, log))

        chain.invoke(create_request())

        assert log == ["a", "b", "c"]

    def test_stops_at_first_non_continue(self):
        """Test the chain stops at the first non-continue action."""
        log = []
        chain = InterceptorChain()
        chain.add(Recording("stop", log, action=Action.CANCELLED))
        chain.add(Recording("never", log, Priority.AFTER_DEFAULT))

        assert chain.invoke(create_request()) is Action.CANCELLED
        assert log == ["stop"]

    def test_configure_reaches_every_interceptor(self):
        """Test configure is forwarded to every interceptor."""
        log = []
        chain = InterceptorChain()
        chain.add(Recording("a", log))
        chain.add(Recording("b", log, Priority.BEFORE_DEFAULT))

        chain.configure(MagicMock())

        assert log == ["configure b", "configure a"]

    def test_exceptions_propagate(self):
        """Test interceptor errors propagate."""
        class Failing(Interceptor):
            def inspect(self, request):
                raise ValueError("broken")

        chain = InterceptorChain()
        chain.add(Failing())

        with pytest.raises(ValueError, match="broken"):
            chain.invoke(create_request())

    def test_base_interceptor_continues(self):
        """Test the base interceptor continues by default."""
        assert Interceptor().inspect(create_request()) is Action.CONTINUE
