import logging
from pathlib import Path

import typer

from atomicctl.modules.provision import PackageAction, UpgradeOutcome
from atomicctl.modules.provision.models import ENGINE_PACKAGE
from .common import build_provisioner, exit_on_error, load_host, open_commander

app = typer.Typer()
logger = logging.getLogger("atomicctl.commands.upgrade")


@app.command("host")
def upgrade_host(
    file: Path = typer.Option(..., "--file", "-f", help="Host definition YAML"),
    dry_run: bool = typer.Option(False, help="Log remote commands without running them"),
):
    """Upgrade the host image, rebooting if a new image was deployed."""
    host = load_host(file)

    with open_commander(host, dry_run=dry_run) as commander, exit_on_error("Upgrade"):
        outcome = build_provisioner(host, commander).package(ENGINE_PACKAGE, PackageAction.UPGRADE)

    if dry_run:
        # Dry-run output is always empty, which never reads as a no-op upgrade.
        logger.info(f"[DRY RUN] No changes made to {host.machine_name}.")
    elif outcome == UpgradeOutcome.UPGRADED_PENDING_REBOOT:
        logger.info(f"🔁 {host.machine_name} upgraded and is rebooting.")
    else:
        logger.info(f"✅ {host.machine_name} is already up to date.")
