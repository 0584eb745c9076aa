"""
Atomic Host provisioning.

Renders the Docker engine unit, drives systemd over SSH, upgrades the host
image and sequences it all into a single fail-fast provisioning run.
"""

from .errors import ProvisionError, ValidationError, CommandError, RenderError, RegistryError
from .models import (
    EngineOptions,
    AuthOptions,
    SwarmOptions,
    DockerOptions,
    StaticDriver,
    ServiceAction,
    PackageAction,
    UpgradeOutcome,
    ProvisionPhase,
    ProvisionRun,
)
from .renderer import render_engine_config
from .service import ServiceController
from .upgrade import UpgradeManager, classify_upgrade
from .collaborators import HostCollaborators, RemoteHostCollaborators
from .provisioner import AtomicHostProvisioner
from .registry import ProvisionerRegistry, default_registry, read_os_release_id

__all__ = [
    'ProvisionError',
    'ValidationError',
    'CommandError',
    'RenderError',
    'RegistryError',
    'EngineOptions',
    'AuthOptions',
    'SwarmOptions',
    'DockerOptions',
    'StaticDriver',
    'ServiceAction',
    'PackageAction',
    'UpgradeOutcome',
    'ProvisionPhase',
    'ProvisionRun',
    'render_engine_config',
    'ServiceController',
    'UpgradeManager',
    'classify_upgrade',
    'HostCollaborators',
    'RemoteHostCollaborators',
    'AtomicHostProvisioner',
    'ProvisionerRegistry',
    'default_registry',
    'read_os_release_id',
]
