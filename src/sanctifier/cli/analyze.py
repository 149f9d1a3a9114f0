"""Main analysis command."""

from pathlib import Path
from typing import Optional

import typer

from ..config import load_config
from ..exceptions import SanctifierError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..models import AnalysisContext
from . import app
from ._common import analyze_target, err_console, validate_target


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Contract project directory (with Cargo.toml) or a single .rs file",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text or json",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        help="Ledger entry size limit in bytes (overrides config)",
        min=1,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a .sanctify.toml file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG level) logging",
    ),
):
    """
    Analyze a Soroban contract for security issues.

    [bold cyan]Examples:[/bold cyan]

      sanctifier analyze ./my-contract

      sanctifier analyze src/lib.rs --format json --limit 32000
    """
    logger = setup_logging(verbose=verbose)

    try:
        formatter = get_formatter(output_format)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    try:
        settings = load_config(config_file=config, ledger_limit=limit)
        target = validate_target(path)
        reports, scanned = analyze_target(target, settings)
    except SanctifierError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    context = AnalysisContext(
        target=str(path),
        files_scanned=scanned,
        ledger_limit=settings.ledger_limit,
    )
    formatter.render(reports, context)
