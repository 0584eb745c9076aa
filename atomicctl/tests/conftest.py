import pytest

from atomicctl.modules.provision import StaticDriver
from .fakes import RecordingCommander


@pytest.fixture
def commander():
    return RecordingCommander()


@pytest.fixture
def driver():
    return StaticDriver(machine_name='atomic-01', driver_name='virtualbox', ip_address='192.168.99.100')
