import pytest

from atomicctl.config import ConfigError, HostConfig

HOST_YAML = """
machine_name: atomic-01
driver_name: virtualbox
ssh:
  host: 192.168.99.100
  user: cloud-user
  key_path: ~/.ssh/atomic
engine:
  storage_driver: overlay
  labels: [env=dev]
  env: [HTTP_PROXY=http://proxy:3128]
swarm:
  enabled: true
  discovery: token://abc
"""


def test_load_host_file(tmp_path):
    path = tmp_path / "host.yaml"
    path.write_text(HOST_YAML)

    host = HostConfig.load(path)

    assert host.provisioner == 'AtomicHost'
    assert host.docker_port == 2376
    assert host.ssh.port == 22
    assert not host.ssh.key_path.startswith('~')
    assert host.engine_options().labels == ['env=dev']
    assert host.swarm_options().is_swarm
    assert host.driver().ip_address == '192.168.99.100'


def test_unsupported_storage_driver_is_left_to_the_provisioner():
    host = HostConfig.from_dict({
        'machine_name': 'atomic-01',
        'ssh': {'host': '10.0.0.5'},
        'engine': {'storage_driver': 'btrfs'},
    })
    assert host.engine_options().storage_driver == 'btrfs'


def test_missing_required_fields():
    with pytest.raises(ConfigError, match="machine_name"):
        HostConfig.from_dict({'ssh': {'host': '10.0.0.5'}})


def test_wrong_types():
    with pytest.raises(ConfigError):
        HostConfig.from_dict({
            'machine_name': 'atomic-01',
            'ssh': {'host': '10.0.0.5'},
            'engine': {'labels': 'env=dev'},
        })


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        HostConfig.load(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "host.yaml"
    path.write_text("machine_name: [unterminated\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        HostConfig.load(path)


def test_model_type_errors_are_config_errors():
    with pytest.raises(ConfigError, match="validation error"):
        HostConfig.from_dict({
            'machine_name': 'atomic-01',
            'ssh': {'host': '10.0.0.5'},
            'swarm': {'enabled': [1]},
        })
