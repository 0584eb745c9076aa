"""systemd service lifecycle management on the remote host."""

import logging

from .models import ServiceAction

logger = logging.getLogger("atomicctl.provision.service")

DAEMON_RELOAD_COMMAND = "sudo systemctl daemon-reload"


def service_command(name: str, action: ServiceAction) -> str:
    """Build the systemctl command for a lifecycle action on a unit."""
    return f"sudo systemctl {ServiceAction(action).value} {name}"


class ServiceController:
    """Drives systemd units over a remote command channel.

    Start and restart are preceded by a daemon-reload so systemd picks up
    unit files written since the last reload. Failures are raised to the
    caller unchanged; nothing is retried here.
    """

    def __init__(self, commander):
        self.commander = commander

    def service(self, name: str, action: ServiceAction) -> None:
        """Apply a lifecycle action to a unit.

        Args:
            name: Unit name, e.g. 'docker'
            action: Lifecycle action to apply

        Raises:
            CommandError: If the reload or the action command fails. The action
                command is never attempted when the reload fails.
        """
        action = ServiceAction(action)

        if action.requires_daemon_reload:
            logger.debug(f"Reloading systemd before {action.value} of {name}")
            self.commander.run(DAEMON_RELOAD_COMMAND)

        logger.debug(f"Running systemctl {action.value} {name}")
        self.commander.run(service_command(name, action))
