"""Data models for Atomic Host provisioning."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

DEFAULT_STORAGE_DRIVER = "overlay"
SUPPORTED_STORAGE_DRIVERS = ("overlay",)

DOCKER_OPTIONS_DIR = "/etc/docker"
DAEMON_OPTIONS_FILE = "/etc/systemd/system/docker.service"
DEFAULT_DOCKER_PORT = 2376

ENGINE_PACKAGE = "docker"
OS_RELEASE_ID = "atomic.host"


class ServiceAction(str, Enum):
    """Lifecycle actions understood by systemctl."""
    START = 'start'
    STOP = 'stop'
    RESTART = 'restart'
    ENABLE = 'enable'
    DISABLE = 'disable'

    @property
    def requires_daemon_reload(self) -> bool:
        # Unit files may have changed on disk since the last reload.
        return self in (ServiceAction.START, ServiceAction.RESTART)


class PackageAction(str, Enum):
    """Package-level requests a provisioner may receive."""
    INSTALL = 'install'
    REMOVE = 'remove'
    UPGRADE = 'upgrade'


class UpgradeOutcome(str, Enum):
    """Classification of a single `atomic host upgrade` run."""
    NO_UPGRADE_AVAILABLE = 'no_upgrade_available'
    UPGRADED_PENDING_REBOOT = 'upgraded_pending_reboot'
    FAILED = 'failed'


class ProvisionPhase(str, Enum):
    """Phases of a provisioning run, in execution order."""
    SETTING_STORAGE_DRIVER = 'setting_storage_driver'
    SETTING_HOSTNAME = 'setting_hostname'
    PREPARING_OPTIONS_DIR = 'preparing_options_dir'
    PREPARING_CERTIFICATES = 'preparing_certificates'
    CONFIGURING_AUTH = 'configuring_auth'
    CONFIGURING_SWARM = 'configuring_swarm'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class EngineOptions:
    """Docker engine runtime settings."""
    storage_driver: str = ''
    labels: List[str] = field(default_factory=list)
    insecure_registry: List[str] = field(default_factory=list)
    registry_mirror: List[str] = field(default_factory=list)
    arbitrary_flags: List[str] = field(default_factory=list)
    env: List[str] = field(default_factory=list)

    def copy(self) -> 'EngineOptions':
        """Return a copy that shares no lists with this instance."""
        return EngineOptions(
            storage_driver=self.storage_driver,
            labels=list(self.labels),
            insecure_registry=list(self.insecure_registry),
            registry_mirror=list(self.registry_mirror),
            arbitrary_flags=list(self.arbitrary_flags),
            env=list(self.env),
        )


@dataclass(frozen=True)
class AuthOptions:
    """Remote locations of the TLS material used by the engine."""
    ca_cert_remote_path: str = ''
    server_cert_remote_path: str = ''
    server_key_remote_path: str = ''


@dataclass
class SwarmOptions:
    """Swarm cluster-join settings."""
    is_swarm: bool = False
    master: bool = False
    discovery: str = ''
    image: str = 'swarm:latest'
    host: str = 'tcp://0.0.0.0:3376'
    strategy: str = 'spread'
    arbitrary_flags: List[str] = field(default_factory=list)
    env: List[str] = field(default_factory=list)

    def copy(self) -> 'SwarmOptions':
        return SwarmOptions(
            is_swarm=self.is_swarm,
            master=self.master,
            discovery=self.discovery,
            image=self.image,
            host=self.host,
            strategy=self.strategy,
            arbitrary_flags=list(self.arbitrary_flags),
            env=list(self.env),
        )


@dataclass(frozen=True)
class DockerOptions:
    """A rendered engine unit file and where it belongs on the host."""
    engine_options: str
    engine_options_path: str


class Driver(Protocol):
    """Identity of the machine driver that created the host."""
    driver_name: str
    machine_name: str


@dataclass(frozen=True)
class StaticDriver:
    """Driver identity for hosts reached directly over SSH."""
    machine_name: str
    driver_name: str = 'generic'
    ip_address: Optional[str] = None


@dataclass
class ProvisionRun:
    """Tracks progress of a single provisioning run."""
    phase: ProvisionPhase = ProvisionPhase.SETTING_STORAGE_DRIVER
    completed: List[ProvisionPhase] = field(default_factory=list)
    failed_phase: Optional[ProvisionPhase] = None
    error: Optional[Exception] = None

    def update_phase(self, phase: ProvisionPhase) -> None:
        """Mark the current phase complete and move to the next one."""
        if self.phase not in (ProvisionPhase.DONE, ProvisionPhase.FAILED):
            self.completed.append(self.phase)
        self.phase = phase

    def record_failure(self, error: Exception) -> None:
        """Record the error that aborted the current phase."""
        self.failed_phase = self.phase
        self.error = error
        self.phase = ProvisionPhase.FAILED

    @property
    def succeeded(self) -> bool:
        return self.phase == ProvisionPhase.DONE
