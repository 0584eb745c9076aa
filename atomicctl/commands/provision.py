import logging
from pathlib import Path

import typer

from atomicctl.modules.provision import ProvisionError, read_os_release_id, default_registry
from .common import build_provisioner, exit_on_error, load_host, open_commander

app = typer.Typer()
logger = logging.getLogger("atomicctl.commands.provision")


@app.command("host")
def provision_host(
    file: Path = typer.Option(..., "--file", "-f", help="Host definition YAML"),
    dry_run: bool = typer.Option(False, help="Log remote commands without running them"),
):
    """Provision an Atomic Host to run the Docker engine."""
    host = load_host(file)
    logger.info(f"🚀 Provisioning {host.machine_name} ({host.ssh.host})...")

    with open_commander(host, dry_run=dry_run) as commander:
        with exit_on_error("Provisioning"):
            provisioner = build_provisioner(host, commander)
        try:
            provisioner.provision(host.swarm_options(), host.auth_options(), host.engine_options())
        except ProvisionError as e:
            phase = provisioner.run.failed_phase
            logger.error(f"❌ Provisioning failed while {phase.value.replace('_', ' ')}: {e}")
            raise typer.Exit(code=1)

    logger.info(f"✅ {host.machine_name} is ready.")


@app.command("detect")
def detect(
    file: Path = typer.Option(..., "--file", "-f", help="Host definition YAML"),
):
    """Report which provisioner matches the host's /etc/os-release."""
    host = load_host(file)

    with open_commander(host) as commander, exit_on_error("Detection"):
        os_release_id = read_os_release_id(commander)
        provisioner = default_registry().for_os_release(os_release_id, host.driver(), commander)

    if provisioner is None:
        logger.error(f"❌ No provisioner supports host ID '{os_release_id}'")
        raise typer.Exit(code=1)
    typer.echo(str(provisioner))
