import pytest
from bevy import get_registry

from castway.framework import Framework


@pytest.fixture
def framework() -> Framework:
    return Framework()


@pytest.fixture
def container():
    return get_registry().create_container()
