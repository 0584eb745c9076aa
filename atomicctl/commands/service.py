import logging
from pathlib import Path

import typer

from atomicctl.modules.provision import ServiceAction
from .common import build_provisioner, exit_on_error, load_host, open_commander

app = typer.Typer()
logger = logging.getLogger("atomicctl.commands.service")


@app.command("control")
def control(
    name: str = typer.Argument(..., help="systemd unit name"),
    action: ServiceAction = typer.Argument(..., help="Lifecycle action"),
    file: Path = typer.Option(..., "--file", "-f", help="Host definition YAML"),
    dry_run: bool = typer.Option(False, help="Log remote commands without running them"),
):
    """Start, stop, restart, enable or disable a unit on the host."""
    host = load_host(file)

    with open_commander(host, dry_run=dry_run) as commander, exit_on_error(f"{action.value} {name}"):
        build_provisioner(host, commander).service(name, action)

    logger.info(f"✅ {action.value} {name} on {host.machine_name}")
