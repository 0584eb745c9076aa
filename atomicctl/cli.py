import typer
import logging
import sys
from atomicctl.commands import provision, render, service, upgrade

app = typer.Typer()

debug_mode = False


def setup_logging(debug_mode: bool = False):
    """Configure logging based on debug mode."""
    log_level = logging.DEBUG if debug_mode else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )
    # Disable debug logging for noisy libraries
    if not debug_mode:
        logging.getLogger('paramiko').setLevel(logging.WARNING)


# Add all command groups
app.add_typer(provision.app, name="provision", help="Provision Atomic Hosts")
app.add_typer(render.app, name="render", help="Render engine configuration")
app.add_typer(service.app, name="service", help="Manage systemd units")
app.add_typer(upgrade.app, name="upgrade", help="Upgrade the host image")


# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """atomicctl - Atomic Host provisioning CLI."""
    global debug_mode
    debug_mode = debug
    setup_logging(debug)
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Debug mode enabled")


if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        if debug_mode:
            import traceback
            logging.error(f"Unhandled exception: {e}\n{traceback.format_exc()}")
        else:
            logging.error(f"Error: {e}")
        sys.exit(1)
