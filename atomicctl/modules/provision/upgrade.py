"""Atomic Host image upgrades.

`atomic host upgrade` reports "nothing to do" in two different ways depending
on the rpm-ostree version installed on the host: newer releases exit with
status 77, older ones (still shipped on CentOS 7) exit 0 and print
"No upgrade available.". Both signals are checked; neither is sufficient on
its own across the hosts seen in the field.
"""

import logging
from typing import Optional

from .errors import CommandError
from .models import ENGINE_PACKAGE, PackageAction, UpgradeOutcome

logger = logging.getLogger("atomicctl.provision.upgrade")

UPGRADE_COMMAND = "sudo atomic host upgrade"
REBOOT_COMMAND = "sudo reboot"

# See rpm-ostree(1): exit status 77 means no changes were made.
NO_CHANGES_EXIT_STATUS = 77
NO_UPGRADE_MARKER = "No upgrade available."


def classify_upgrade(error: Optional[CommandError], output: str = "") -> UpgradeOutcome:
    """Classify the result of an upgrade command.

    Args:
        error: The CommandError raised by the upgrade command, or None on success
        output: Captured output of a successful upgrade command

    Returns:
        UpgradeOutcome: What happened on the host
    """
    if error is not None:
        if error.exit_status == NO_CHANGES_EXIT_STATUS:
            return UpgradeOutcome.NO_UPGRADE_AVAILABLE
        return UpgradeOutcome.FAILED

    if NO_UPGRADE_MARKER in output:
        return UpgradeOutcome.NO_UPGRADE_AVAILABLE
    return UpgradeOutcome.UPGRADED_PENDING_REBOOT


class UpgradeManager:
    """Runs OS image upgrades and reboots into the new deployment."""

    def __init__(self, commander):
        self.commander = commander

    def package(self, name: str, action: PackageAction) -> Optional[UpgradeOutcome]:
        """Handle a package request.

        Only an upgrade of the engine package does anything on an Atomic Host;
        the engine ships inside the OS image. Every other request succeeds
        without touching the host.
        """
        if name == ENGINE_PACKAGE and PackageAction(action) == PackageAction.UPGRADE:
            return self.upgrade()

        logger.debug(f"Ignoring package request {PackageAction(action).value} {name}")
        return None

    def upgrade(self) -> UpgradeOutcome:
        """Upgrade the host image, rebooting only if a new image was deployed.

        Returns:
            UpgradeOutcome: NO_UPGRADE_AVAILABLE or UPGRADED_PENDING_REBOOT

        Raises:
            CommandError: If the upgrade command fails for any reason other than
                "no changes"
        """
        logger.info("Running 'atomic host upgrade' (this may take a while)...")

        output = ""
        error = None
        try:
            output = self.commander.run(UPGRADE_COMMAND)
        except CommandError as e:
            error = e

        outcome = classify_upgrade(error, output)
        if outcome == UpgradeOutcome.FAILED:
            raise error

        if outcome == UpgradeOutcome.NO_UPGRADE_AVAILABLE:
            logger.info("No upgrade available at this time.")
        else:
            logger.info("Upgrade succeeded, rebooting.")
            self.reboot_best_effort()

        return outcome

    def reboot_best_effort(self) -> None:
        """Issue a reboot, discarding any error.

        The SSH session is torn down as the host goes down, so the transport
        usually reports a failure even when the reboot was accepted.
        """
        try:
            self.commander.run(REBOOT_COMMAND)
        except CommandError as e:
            logger.debug(f"Ignoring reboot error (connection drop expected): {e}")
