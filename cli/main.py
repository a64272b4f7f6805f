#!/usr/bin/env python3
"""
paperlot CLI - event-sourced lot state

Main entrypoint for the paperlot command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import log, replay, state
from paperlot.config import Settings
from paperlot.logging_config import setup_logging
from paperlot.metrics import start_metrics_server

# Initialize Typer app
app = typer.Typer(
    name="paperlot",
    help="Event-sourced parking lot state: live view, time travel and paced replay",
    add_completion=False,
)

console = Console()

app.add_typer(log.app, name="log", help="Event log operations")
app.add_typer(state.app, name="state", help="Current and point-in-time lot state")

app.command(name="replay")(replay.replay_command)


@app.callback()
def configure():
    """Configure logging and metrics from the environment."""
    settings = Settings.from_env()
    setup_logging(settings)
    start_metrics_server(settings.metrics_enabled, settings.metrics_port)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from paperlot import __version__ as kernel_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]paperlot CLI[/bold]", f"v{__version__}")
    table.add_row("Kernel", f"v{kernel_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
