import logging
import subprocess
import sys

import pytest
from typer.testing import CliRunner

from atomicctl.cli import app
from atomicctl.modules.provision import RegistryError

runner = CliRunner()

HOST_YAML = """
machine_name: atomic-01
driver_name: virtualbox
ssh:
  host: 192.168.99.100
engine:
  labels: [env=dev]
"""


@pytest.fixture
def host_file(tmp_path):
    path = tmp_path / "host.yaml"
    path.write_text(HOST_YAML)
    return path


def dry_run_commands(caplog):
    prefix = "[DRY RUN] Would execute on 192.168.99.100: "
    return [r.getMessage()[len(prefix):] for r in caplog.records if r.getMessage().startswith(prefix)]


def run_cli_command(cmd):
    return subprocess.run([sys.executable, "-m", "atomicctl.cli"] + cmd.split(), capture_output=True, text=True)


def test_help():
    result = run_cli_command("--help")
    assert "Usage" in result.stdout


def test_command_groups_exist():
    result = runner.invoke(app, ["--help"])
    for group in ("provision", "render", "service", "upgrade"):
        assert group in result.output


def test_render_unit(host_file):
    result = runner.invoke(app, ["render", "unit", "--file", str(host_file)])

    assert result.exit_code == 0
    assert "# /etc/systemd/system/docker.service\n[Unit]\n" in result.output
    assert "--storage-driver overlay" in result.output
    assert "--label env=dev --label provider=virtualbox " in result.output


def test_render_rejects_unsupported_storage_driver(tmp_path):
    path = tmp_path / "host.yaml"
    path.write_text(HOST_YAML + "  storage_driver: btrfs\n")

    result = runner.invoke(app, ["render", "unit", "--file", str(path)])
    assert result.exit_code == 1


def test_provision_dry_run(host_file, caplog):
    caplog.set_level(logging.INFO, logger="atomicctl")
    result = runner.invoke(app, ["provision", "host", "--file", str(host_file), "--dry-run"])
    assert result.exit_code == 0

    commands = dry_run_commands(caplog)
    assert commands[0] == "sudo hostname atomic-01 && echo atomic-01 | sudo tee /etc/hostname"
    assert commands[1] == "sudo mkdir -p /etc/docker"
    assert commands[2].startswith("printf '%s' '[Unit]")
    assert commands[2].endswith("| sudo tee /etc/systemd/system/docker.service")
    assert commands[3:] == ["sudo systemctl daemon-reload", "sudo systemctl restart docker"]


def test_provision_unknown_provisioner(tmp_path):
    path = tmp_path / "host.yaml"
    path.write_text(HOST_YAML + "provisioner: CoreOS\n")
    result = runner.invoke(app, ["provision", "host", "--file", str(path), "--dry-run"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, RegistryError)


def test_render_unknown_provisioner(tmp_path):
    path = tmp_path / "host.yaml"
    path.write_text(HOST_YAML + "provisioner: CoreOS\n")
    result = runner.invoke(app, ["render", "unit", "--file", str(path)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, RegistryError)


def test_service_dry_run(host_file):
    result = runner.invoke(app, ["service", "control", "docker", "restart", "--file", str(host_file), "--dry-run"])
    assert result.exit_code == 0


def test_service_rejects_unknown_action(host_file):
    result = runner.invoke(app, ["service", "control", "docker", "reload", "--file", str(host_file), "--dry-run"])
    assert result.exit_code != 0


def test_upgrade_dry_run(host_file, caplog):
    caplog.set_level(logging.INFO, logger="atomicctl")
    result = runner.invoke(app, ["upgrade", "host", "--file", str(host_file), "--dry-run"])
    assert result.exit_code == 0

    messages = [r.getMessage() for r in caplog.records]
    assert "[DRY RUN] No changes made to atomic-01." in messages
    assert not any("is rebooting" in m for m in messages)


def test_missing_host_file(tmp_path):
    result = runner.invoke(app, ["render", "unit", "--file", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
