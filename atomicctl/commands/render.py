from pathlib import Path

import typer

from atomicctl.modules.provision.provisioner import resolve_storage_driver
from atomicctl.modules.ssh import DryRunCommander
from .common import build_provisioner, exit_on_error, load_host

app = typer.Typer()


@app.command("unit")
def render_unit(
    file: Path = typer.Option(..., "--file", "-f", help="Host definition YAML"),
):
    """Print the Docker engine unit file that provisioning would write."""
    host = load_host(file)

    with exit_on_error("Rendering"):
        provisioner = build_provisioner(host, DryRunCommander(host.ssh.host))
        provisioner.engine_options = host.engine_options()
        provisioner.engine_options.storage_driver = resolve_storage_driver(
            provisioner.engine_options.storage_driver
        )
        provisioner.auth_options = provisioner.collaborators.prepare_auth_options(
            provisioner, host.auth_options()
        )
        docker_options = provisioner.generate_docker_options()

    typer.echo(f"# {docker_options.engine_options_path}")
    typer.echo(docker_options.engine_options, nl=False)
