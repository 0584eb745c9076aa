"""Named provisioner variants.

Provisioners are looked up by name (from host configuration) or by the ID a
host reports in /etc/os-release. The registry is an explicit object; nothing
registers itself on import.
"""

import logging
import shlex
from typing import Callable, Dict, List, Optional

from .errors import RegistryError
from .provisioner import AtomicHostProvisioner

logger = logging.getLogger("atomicctl.provision.registry")

OS_RELEASE_PATH = "/etc/os-release"

ProvisionerFactory = Callable[..., AtomicHostProvisioner]


def parse_os_release(content: str) -> Dict[str, str]:
    """Parse os-release KEY=value lines into a dict."""
    info = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value]
        info[key.strip()] = parts[0] if parts else ''
    return info


def read_os_release_id(commander) -> str:
    """Read the ID field of /etc/os-release from the remote host."""
    return parse_os_release(commander.run(f"cat {OS_RELEASE_PATH}")).get('ID', '')


class ProvisionerRegistry:
    """Mapping of provisioner name to factory."""

    def __init__(self):
        self._factories: Dict[str, ProvisionerFactory] = {}

    def register(self, name: str, factory: ProvisionerFactory) -> None:
        if name in self._factories:
            raise RegistryError(f"Provisioner already registered: {name}")
        self._factories[name] = factory

    def names(self) -> List[str]:
        return sorted(self._factories)

    def create(self, name: str, driver, commander, **kwargs) -> AtomicHostProvisioner:
        """Build the provisioner registered under `name`.

        Raises:
            RegistryError: If no provisioner has that name
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise RegistryError(
                f"Unknown provisioner '{name}' (available: {', '.join(self.names()) or 'none'})"
            ) from None
        return factory(driver, commander, **kwargs)

    def for_os_release(self, os_release_id: str, driver, commander, **kwargs) -> Optional[AtomicHostProvisioner]:
        """Return the first registered provisioner compatible with a host, if any."""
        for name in self.names():
            provisioner = self.create(name, driver, commander, **kwargs)
            if provisioner.compatible_with_host(os_release_id):
                logger.debug(f"Host ID {os_release_id} matched provisioner {name}")
                return provisioner
        return None


def default_registry() -> ProvisionerRegistry:
    """Build a registry holding the provisioners shipped with atomicctl."""
    registry = ProvisionerRegistry()
    registry.register("AtomicHost", AtomicHostProvisioner)
    return registry
