"""Atomic Host provisioning.

This module contains AtomicHostProvisioner, which brings a freshly created
Atomic Host to the point where it runs a TLS-protected Docker engine.
"""

import logging
from typing import Optional

from .collaborators import HostCollaborators, RemoteHostCollaborators
from .errors import ValidationError
from .models import (
    DAEMON_OPTIONS_FILE,
    DEFAULT_DOCKER_PORT,
    DEFAULT_STORAGE_DRIVER,
    OS_RELEASE_ID,
    SUPPORTED_STORAGE_DRIVERS,
    AuthOptions,
    DockerOptions,
    Driver,
    EngineOptions,
    PackageAction,
    ProvisionPhase,
    ProvisionRun,
    ServiceAction,
    SwarmOptions,
)
from .renderer import render_engine_config
from .service import ServiceController
from .upgrade import UpgradeManager

logger = logging.getLogger("atomicctl.provision.provisioner")


def resolve_storage_driver(storage_driver: str) -> str:
    """Default an empty storage driver and reject unsupported ones.

    Raises:
        ValidationError: If the driver is not supported on Atomic Host
    """
    if not storage_driver:
        return DEFAULT_STORAGE_DRIVER
    if storage_driver not in SUPPORTED_STORAGE_DRIVERS:
        raise ValidationError(f"Unsupported storage driver: {storage_driver}")
    return storage_driver


class AtomicHostProvisioner:
    """Provisions one Atomic Host over a remote command channel.

    A provisioning run is a fixed sequence of phases (see ProvisionPhase). The
    first exception aborts the run and is re-raised unchanged; `self.run`
    records which phase failed. Steps already applied to the host are not
    rolled back.
    """

    def __init__(
        self,
        driver: Driver,
        commander,
        collaborators: Optional[HostCollaborators] = None,
        docker_port: int = DEFAULT_DOCKER_PORT,
        os_release_id: str = OS_RELEASE_ID,
    ):
        """Initialize the provisioner.

        Args:
            driver: Driver identity (driver_name, machine_name)
            commander: Remote command runner for the host
            collaborators: Host steps (default: RemoteHostCollaborators)
            docker_port: TCP port for the engine API
            os_release_id: /etc/os-release ID this provisioner handles
        """
        self.driver = driver
        self.commander = commander
        self.collaborators = collaborators or RemoteHostCollaborators()
        self.docker_port = docker_port
        self.os_release_id = os_release_id
        self.daemon_options_file = DAEMON_OPTIONS_FILE

        self.service_controller = ServiceController(commander)
        self.upgrade_manager = UpgradeManager(commander)

        self.engine_options = EngineOptions()
        self.auth_options = AuthOptions()
        self.swarm_options = SwarmOptions()
        self.run = ProvisionRun()

    def __str__(self) -> str:
        return "atomic.host"

    def compatible_with_host(self, os_release_id: str) -> bool:
        """Check whether a host's /etc/os-release ID matches this provisioner."""
        return os_release_id == self.os_release_id

    def provider_label(self) -> str:
        return f"provider={self.driver.driver_name}"

    def generate_docker_options(self, docker_port: Optional[int] = None) -> DockerOptions:
        """Render the engine unit file for the current options.

        The provider label is appended to the engine labels unless they already
        contain it, including when the caller supplied the same label. Later
        calls render the same label set.
        """
        label = self.provider_label()
        if label not in self.engine_options.labels:
            self.engine_options.labels.append(label)

        engine_config = render_engine_config(
            self.engine_options,
            self.auth_options,
            docker_port if docker_port is not None else self.docker_port,
        )
        logger.debug(self.daemon_options_file)
        return DockerOptions(
            engine_options=engine_config,
            engine_options_path=self.daemon_options_file,
        )

    def service(self, name: str, action: ServiceAction) -> None:
        self.service_controller.service(name, action)

    def package(self, name: str, action: PackageAction):
        return self.upgrade_manager.package(name, action)

    def provision(
        self,
        swarm_options: SwarmOptions,
        auth_options: AuthOptions,
        engine_options: EngineOptions,
    ) -> ProvisionRun:
        """Provision the host.

        The options are copied; the caller's instances are never modified.

        Returns:
            ProvisionRun: The completed run

        Raises:
            ValidationError: If the storage driver is unsupported. Nothing has
                been run on the host in that case.
            ProvisionError: Or any other exception raised by a step, unchanged
        """
        self.run = ProvisionRun()
        self.engine_options = engine_options.copy()
        self.auth_options = auth_options
        self.swarm_options = swarm_options.copy()
        self.swarm_options.env = list(self.engine_options.env)

        try:
            self._provision()
        except Exception as e:
            logger.debug(f"Provisioning failed during {self.run.phase.value}: {e}")
            self.run.record_failure(e)
            raise

        return self.run

    def _provision(self) -> None:
        self.engine_options.storage_driver = resolve_storage_driver(
            self.engine_options.storage_driver
        )

        hostname = self.driver.machine_name
        self.run.update_phase(ProvisionPhase.SETTING_HOSTNAME)
        logger.debug(f"Setting hostname {hostname}")
        self.collaborators.set_hostname(self, hostname)

        self.run.update_phase(ProvisionPhase.PREPARING_OPTIONS_DIR)
        logger.debug("Make daemon options dir")
        self.collaborators.make_options_dir(self)

        self.run.update_phase(ProvisionPhase.PREPARING_CERTIFICATES)
        logger.debug("Preparing certificates")
        self.auth_options = self.collaborators.prepare_auth_options(self, self.auth_options)

        self.run.update_phase(ProvisionPhase.CONFIGURING_AUTH)
        logger.debug("Setting up certificates")
        self.collaborators.configure_auth(self)

        self.run.update_phase(ProvisionPhase.CONFIGURING_SWARM)
        logger.debug("Configuring swarm")
        self.collaborators.configure_swarm(self, self.swarm_options, self.auth_options)

        self.run.update_phase(ProvisionPhase.DONE)
        logger.info(f"Provisioned {hostname}")
