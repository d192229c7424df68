import pytest

from hardware.ports import PortRegistry
from hardware.serial_link import NullMotorLink


@pytest.fixture
def link():
    return NullMotorLink()


@pytest.fixture
def registry():
    return PortRegistry()
