from unittest.mock import MagicMock

import pytest
from bevy import DependencyResolutionError

from castway.exceptions import InjectionError
from castway.injection import ContainerObjectFactory


class RoomStore:
    pass


class RoomHandler:
    def __init__(self, store: RoomStore = None):
        self.store = store


class LobbyHandler:
    def __init__(self, title: str):
        self.title = title


class MissingStore(DependencyResolutionError):
    def __init__(self):
        Exception.__init__(self, "no RoomStore qualified 'rooms'")
        self.dependency = RoomStore


class TestContainerObjectFactory:
    """Test building handlers through a bevy container."""

    def test_builds_through_container(self):
        """Test the container constructs the handler type."""
        built = RoomHandler(RoomStore())
        container = MagicMock()
        container.call.return_value = built

        handler = ContainerObjectFactory(container).create(RoomHandler)

        assert handler is built
        container.call.assert_called_once_with(RoomHandler)

    def test_unresolvable_dependency_raises_typed_error(self):
        """Test a dependency the container cannot supply becomes an InjectionError."""
        container = MagicMock()
        container.call.side_effect = MissingStore()

        with pytest.raises(InjectionError) as exc_info:
            ContainerObjectFactory(container).create(RoomHandler)

        error = exc_info.value
        assert error.target is RoomHandler
        assert error.dependency is RoomStore
        assert "rooms" in error.message
        assert isinstance(error.__cause__, DependencyResolutionError)

    def test_missing_constructor_argument_raises_typed_error(self):
        """Test a required parameter nothing can inject becomes an InjectionError."""
        container = MagicMock()
        container.call.side_effect = lambda handler_type: handler_type()

        with pytest.raises(InjectionError) as exc_info:
            ContainerObjectFactory(container).create(LobbyHandler)

        assert exc_info.value.target is LobbyHandler
        assert exc_info.value.dependency is None
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_other_errors_propagate(self):
        """Test failures inside the handler constructor are not reclassified."""
        container = MagicMock()
        container.call.side_effect = RuntimeError("constructor exploded")

        with pytest.raises(RuntimeError, match="constructor exploded"):
            ContainerObjectFactory(container).create(RoomHandler)

    def test_creates_container_when_none_given(self):
        """Test a fresh bevy container is created when none is passed."""
        factory = ContainerObjectFactory()

        assert factory.container is not None
