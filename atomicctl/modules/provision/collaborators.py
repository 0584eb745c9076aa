"""Host-level steps the provisioner delegates to.

The provisioner only sequences these steps. `RemoteHostCollaborators` is the
stock implementation that issues plain shell commands over the provisioner's
commander; callers can pass any object with the same methods instead.
Certificate generation is not handled here: the TLS material is expected to
be present at the remote paths returned by `prepare_auth_options`.
"""

import logging
import posixpath
import shlex
from typing import Protocol
from urllib.parse import urlparse

from .errors import ValidationError
from .models import (
    DOCKER_OPTIONS_DIR,
    AuthOptions,
    DockerOptions,
    ServiceAction,
    SwarmOptions,
)

logger = logging.getLogger("atomicctl.provision.collaborators")


class HostCollaborators(Protocol):
    """Steps of a provisioning run that change the remote host."""

    def set_hostname(self, provisioner, hostname: str) -> None:
        ...

    def make_options_dir(self, provisioner) -> None:
        ...

    def prepare_auth_options(self, provisioner, auth_options: AuthOptions) -> AuthOptions:
        ...

    def configure_auth(self, provisioner) -> None:
        ...

    def configure_swarm(self, provisioner, swarm_options: SwarmOptions, auth_options: AuthOptions) -> None:
        ...


def write_docker_options(commander, docker_options: DockerOptions) -> None:
    """Write a rendered unit file to its remote path."""
    logger.debug(f"Writing engine options to {docker_options.engine_options_path}")
    commander.run(
        f"printf '%s' {shlex.quote(docker_options.engine_options)} | "
        f"sudo tee {shlex.quote(docker_options.engine_options_path)}"
    )


def _env_flags(env) -> str:
    return ''.join(f"-e {shlex.quote(var)} " for var in env)


class RemoteHostCollaborators:
    """Default host steps implemented with shell commands."""

    def __init__(self, options_dir: str = DOCKER_OPTIONS_DIR):
        self.options_dir = options_dir

    def set_hostname(self, provisioner, hostname: str) -> None:
        quoted = shlex.quote(hostname)
        provisioner.commander.run(
            f"sudo hostname {quoted} && echo {quoted} | sudo tee /etc/hostname"
        )

    def make_options_dir(self, provisioner) -> None:
        provisioner.commander.run(f"sudo mkdir -p {shlex.quote(self.options_dir)}")

    def prepare_auth_options(self, provisioner, auth_options: AuthOptions) -> AuthOptions:
        return AuthOptions(
            ca_cert_remote_path=posixpath.join(self.options_dir, 'ca.pem'),
            server_cert_remote_path=posixpath.join(self.options_dir, 'server.pem'),
            server_key_remote_path=posixpath.join(self.options_dir, 'server-key.pem'),
        )

    def configure_auth(self, provisioner) -> None:
        docker_options = provisioner.generate_docker_options()
        write_docker_options(provisioner.commander, docker_options)
        provisioner.service('docker', ServiceAction.RESTART)

    def configure_swarm(self, provisioner, swarm_options: SwarmOptions, auth_options: AuthOptions) -> None:
        if not swarm_options.is_swarm:
            logger.debug("Swarm not enabled, skipping")
            return

        ip_address = getattr(provisioner.driver, 'ip_address', None)
        if not ip_address:
            raise ValidationError("Swarm requires the host IP address")

        env = _env_flags(swarm_options.env)
        engine_port = provisioner.docker_port

        if swarm_options.master:
            manage_port = urlparse(swarm_options.host).port or 3376
            flags = ''.join(f"--{flag} " for flag in swarm_options.arbitrary_flags)
            provisioner.commander.run(
                f"sudo docker run -d -p {manage_port}:{manage_port} {env}--restart=always "
                f"--name swarm-agent-master -v {self.options_dir}:{self.options_dir} "
                f"{swarm_options.image} manage --tlsverify "
                f"--tlscacert={auth_options.ca_cert_remote_path} "
                f"--tlscert={auth_options.server_cert_remote_path} "
                f"--tlskey={auth_options.server_key_remote_path} "
                f"-H {swarm_options.host} --strategy {swarm_options.strategy} "
                f"{flags}{swarm_options.discovery}"
            )

        provisioner.commander.run(
            f"sudo docker run -d {env}--restart=always --name swarm-agent "
            f"{swarm_options.image} join --advertise {ip_address}:{engine_port} "
            f"{swarm_options.discovery}"
        )
