import pytest

from atomicctl.modules.provision import AtomicHostProvisioner, RegistryError, default_registry, read_os_release_id
from atomicctl.modules.provision.registry import ProvisionerRegistry, parse_os_release
from .fakes import RecordingCommander

OS_RELEASE = '''NAME="Red Hat Enterprise Linux Atomic Host"
VERSION="7.2"
ID="atomic.host"
# comment
VERSION_ID=7.2
'''


def test_default_registry_creates_atomic_host(commander, driver):
    provisioner = default_registry().create('AtomicHost', driver, commander, docker_port=3376)
    assert isinstance(provisioner, AtomicHostProvisioner)
    assert provisioner.docker_port == 3376


def test_unknown_name_raises(commander, driver):
    with pytest.raises(RegistryError, match="Unknown provisioner 'CoreOS'"):
        default_registry().create('CoreOS', driver, commander)


def test_duplicate_registration_raises():
    registry = ProvisionerRegistry()
    registry.register('AtomicHost', AtomicHostProvisioner)
    with pytest.raises(RegistryError):
        registry.register('AtomicHost', AtomicHostProvisioner)


def test_registries_are_independent():
    registry = ProvisionerRegistry()
    assert registry.names() == []
    assert default_registry().names() == ['AtomicHost']


def test_parse_os_release():
    info = parse_os_release(OS_RELEASE)
    assert info['ID'] == 'atomic.host'
    assert info['NAME'] == 'Red Hat Enterprise Linux Atomic Host'
    assert info['VERSION_ID'] == '7.2'


def test_detect_by_os_release(driver):
    commander = RecordingCommander({'cat /etc/os-release': OS_RELEASE})
    os_release_id = read_os_release_id(commander)

    assert os_release_id == 'atomic.host'
    assert default_registry().for_os_release(os_release_id, driver, commander) is not None
    assert default_registry().for_os_release('ubuntu', driver, commander) is None
