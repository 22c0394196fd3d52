from typing import Annotated
from unittest.mock import MagicMock

from bevy import Options

from castway.capabilities import (
    QualifierProbe,
    named,
    named_dependencies,
    requires_injection,
)
from castway.channels import Channel
from castway.registry import HandlerRegistration


class RoomStore:
    pass


class PlainHandler:
    def __call__(self, request, registration):
        pass


@named("lobby")
class LobbyHandler:
    pass


class QualifiedHandler:
    def __init__(self, store: Annotated[RoomStore, Options(qualifier="rooms")] = None):
        self.store = store


class UnqualifiedHandler:
    def __init__(self, store: RoomStore = None, size: int = 10):
        self.store = store


class BrokenHandler:
    def __init__(self, store: "DoesNotExist" = None):  # noqa: F821
        self.store = store


def registrations(*handlers):
    return [
        HandlerRegistration(f"/route/{i}", handler, Channel(f"/route/{i}"))
        for i, handler in enumerate(handlers)
    ]


class TestNamedDependencies:
    """Test reading qualified dependencies from handler constructors."""

    def test_qualified_parameter(self):
        """Test a qualified Inject parameter is reported with its qualifier."""
        assert named_dependencies(QualifiedHandler) == {"store": (RoomStore, "rooms")}

    def test_unqualified_parameters(self):
        """Test parameters without a qualifier are ignored."""
        assert named_dependencies(UnqualifiedHandler) == {}

    def test_no_constructor(self):
        """Test a handler without its own constructor declares nothing."""
        assert named_dependencies(PlainHandler) == {}


class TestQualifierProbe:
    """Test detecting handlers that need named dependencies."""

    def test_named_marker(self):
        """Test the named decorator marks a handler."""
        assert QualifierProbe().declares_named_dependency(LobbyHandler)

    def test_qualified_constructor(self):
        """Test a qualified constructor parameter marks a handler."""
        assert QualifierProbe().declares_named_dependency(QualifiedHandler)

    def test_plain_handler(self):
        """Test a plain handler is not marked."""
        assert not QualifierProbe().declares_named_dependency(PlainHandler)
        assert not QualifierProbe().declares_named_dependency(UnqualifiedHandler)


class TestRequiresInjection:
    """Test scanning registrations for handlers that need injection."""

    def test_any_handler_declaring_capability(self):
        """Test one capable handler is enough."""
        regs = registrations(PlainHandler(), QualifiedHandler())

        assert requires_injection(regs, QualifierProbe()) is True

    def test_handler_types_are_probed(self):
        """Test the probe receives handler types rather than instances."""
        probe = MagicMock()
        probe.declares_named_dependency.return_value = False

        requires_injection(registrations(PlainHandler(), LobbyHandler), probe)

        probed = [call.args[0] for call in probe.declares_named_dependency.call_args_list]
        assert probed == [PlainHandler, LobbyHandler]

    def test_no_handler_declaring_capability(self):
        """Test no capable handler means no injection."""
        assert requires_injection(registrations(PlainHandler()), QualifierProbe()) is False

    def test_empty_registry(self):
        """Test an empty registry needs no injection."""
        assert requires_injection([], QualifierProbe()) is False

    def test_probe_failure_fails_closed(self, caplog):
        """Test a probe error disables injection and is logged."""
        regs = registrations(BrokenHandler(), QualifiedHandler())

        with caplog.at_level("DEBUG", logger="castway.capabilities"):
            assert requires_injection(regs, QualifierProbe()) is False

        assert "Capability probe failed" in caplog.text

    def test_probe_raising_fails_closed(self):
        """Test a probe that raises does not escape the scan."""
        probe = MagicMock()
        probe.declares_named_dependency.side_effect = ImportError("no reflection")

        assert requires_injection(registrations(PlainHandler()), probe) is False
