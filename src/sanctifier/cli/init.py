"""Init command: write a default .sanctify.toml."""

from pathlib import Path

import typer

from ..config import SanctifyConfig, write_config
from ..exceptions import InvalidConfigError
from . import app
from ._common import console, err_console


@app.command()
def init(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory to write .sanctify.toml into",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing configuration file",
    ),
):
    """
    Create a default .sanctify.toml configuration file.
    """
    try:
        config_path = write_config(SanctifyConfig(), directory, force=force)
    except InvalidConfigError as e:
        err_console.print(f"[yellow]Warning:[/yellow] {e.reason}: {e.value}")
        raise typer.Exit(1)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] failed to create configuration file: {e}")
        raise typer.Exit(1)

    console.print("[green]Configuration file created successfully![/green]")
    console.print(f"   Location: {config_path}")
