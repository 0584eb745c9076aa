"""Helpers shared by the command groups."""
import logging
from contextlib import contextmanager
from pathlib import Path

import typer

from atomicctl.config import ConfigError, HostConfig
from atomicctl.logging import setup_logger
from atomicctl.modules.provision import ProvisionError, default_registry
from atomicctl.modules.ssh import DryRunCommander, SSHCommander

logger = logging.getLogger("atomicctl.commands")


def load_host(file: Path) -> HostConfig:
    """Load a host file, exiting with an error message if it is invalid."""
    try:
        host = HostConfig.load(file)
    except ConfigError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(code=1)

    level = getattr(logging, host.logging.level.upper(), logging.INFO)
    if logging.getLogger().level == logging.DEBUG:
        level = logging.DEBUG
    setup_logger(
        "atomicctl",
        level=level,
        log_file=host.logging.file,
        max_size_mb=host.logging.max_size_mb,
        backup_count=host.logging.backup_count,
        console=False,
    )
    return host


@contextmanager
def open_commander(host: HostConfig, dry_run: bool = False):
    """Yield a commander for the host, closing the SSH session afterwards."""
    if dry_run:
        yield DryRunCommander(host.ssh.host)
        return

    commander = SSHCommander(
        host=host.ssh.host,
        username=host.ssh.user,
        key_path=host.ssh.key_path,
        port=host.ssh.port,
        timeout=host.ssh.timeout,
    )
    try:
        yield commander
    finally:
        commander.close()


def build_provisioner(host: HostConfig, commander):
    """Create the provisioner named in the host file."""
    return default_registry().create(
        host.provisioner,
        host.driver(),
        commander,
        docker_port=host.docker_port,
    )


@contextmanager
def exit_on_error(action: str):
    """Turn provisioning errors into a logged message and exit code 1."""
    try:
        yield
    except ProvisionError as e:
        logger.error(f"❌ {action} failed: {e}")
        raise typer.Exit(code=1)
